"""
Ledger Invariants Contract.

These invariants are structural law. They are hardcoded in PayrollLedger's
guards and recomputed by ``PayrollLedger.verify_invariants()``. No
configuration value may switch them off.

This module exists solely to declare these invariants explicitly. The
enforcement lives in ``payroll_kernel.ledger``.
"""

from enum import Enum, unique


@unique
class LedgerInvariant(str, Enum):
    """Non-configurable invariants enforced by the payroll ledger.

    Each value names one structural guarantee that the ledger provides
    unconditionally.
    """

    ACCOUNT_BINDING = "account_binding"
    """account -> id is a bijection over active employees. Enforced by
    add_employee / set_employee_address duplicate checks."""

    ID_RETIREMENT = "id_retirement"
    """Employee ids are allocated sequentially from 1 and never reused,
    even after removal."""

    SUPPLY_CONSERVATION = "supply_conservation"
    """The cumulative amount credited by claims never exceeds
    total_supply, so the sum of balances never can either."""

    PERIOD_MONOTONICITY = "period_monotonicity"
    """A claim advances pay_period by exactly one. Only the owner's
    set_employee_payday moves it otherwise."""

    OWNER_AUTHORITY = "owner_authority"
    """Roster mutations require the owner fixed at construction."""

    ATOMICITY = "atomicity"
    """Every operation validates fully before mutating; a failure
    leaves the ledger unchanged."""


# All invariants as a frozenset for programmatic checks.
ALL_LEDGER_INVARIANTS: frozenset[LedgerInvariant] = frozenset(LedgerInvariant)
