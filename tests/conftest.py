"""
Pytest fixtures for the payroll kernel test suite.

Provides:
- Structured logging configured for every test session
- A fresh ledger per test with a deterministic clock
- The standard cast of accounts (owner, two employees, a stranger)
"""

import json
import logging
from io import StringIO

import pytest

from payroll_kernel.domain.clock import DeterministicClock
from payroll_kernel.domain.values import to_base_units
from payroll_kernel.ledger import PayrollLedger
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from payroll_kernel.services.event_journal import EventJournal
from payroll_kernel.services.token_transfer import InMemoryTokenVault

OWNER = "0x00000000000000000000000000000000000000aa"
EMPLOYEE_A = "0x1111111111111111111111111111111111111111"
EMPLOYEE_B = "0x2222222222222222222222222222222222222222"
STRANGER = "0x3333333333333333333333333333333333333333"
EMPTY_ADDRESS = "0x0"

DECIMALS = 18
INITIAL_SUPPLY = to_base_units(10_000, DECIMALS)
CRAZY_EMPLOYEE_SALARY = to_base_units(50_000, DECIMALS)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture payroll_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, ledger):
            ledger.add_employee(OWNER, EMPLOYEE_A, 10, 1)
            logs = captured_logs()
            assert any(r["message"] == "employee_added" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("payroll_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Ledger fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock()


@pytest.fixture
def journal(deterministic_clock):
    return EventJournal(clock=deterministic_clock)


@pytest.fixture
def ledger(journal):
    """A fresh reference-deployment ledger owned by OWNER."""
    return PayrollLedger(OWNER, INITIAL_SUPPLY, journal=journal)


@pytest.fixture
def vault():
    """Vault holding the full pool, as minted to the owner at deployment."""
    return InMemoryTokenVault(reserve=INITIAL_SUPPLY)


@pytest.fixture
def ledger_with_a(ledger):
    """Ledger with EMPLOYEE_A registered at salary 10, pay period 1."""
    ledger.add_employee(OWNER, EMPLOYEE_A, 10, 1)
    return ledger


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow_locks: mark test as exercising real thread contention"
    )
