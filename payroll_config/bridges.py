"""
Config -> Kernel Bridges.

Turns a ``LedgerConfig`` into kernel objects. This lives in payroll_config
(the producer) because the kernel never imports payroll_config.

Usage:
    from payroll_config import get_active_config
    from payroll_config.bridges import build_ledger

    ledger = build_ledger("0xowner", get_active_config())
"""

from __future__ import annotations

from payroll_config.schema import LedgerConfig
from payroll_kernel.domain.clock import Clock
from payroll_kernel.ledger import PayrollLedger
from payroll_kernel.services.event_journal import EventJournal
from payroll_kernel.services.token_transfer import InMemoryTokenVault


def build_ledger(
    owner: str,
    config: LedgerConfig,
    *,
    clock: Clock | None = None,
    journal: EventJournal | None = None,
) -> PayrollLedger:
    """Create a ledger whose pool is ``config.total_supply`` base units."""
    return PayrollLedger(
        owner,
        config.total_supply,
        clock=clock,
        journal=journal,
    )


def build_vault(config: LedgerConfig) -> InMemoryTokenVault:
    """Create a vault holding the configured pool, as minted at deployment."""
    return InMemoryTokenVault(reserve=config.total_supply)
