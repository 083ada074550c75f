"""
Tests for withdrawals and PayoutService.

Covers:
- Balance debited only after a successful transfer
- Self-service authorization on withdrawal
- Withdrawn units stay counted against the pool
- Full-balance payouts and the nothing-due case
"""

import pytest

from payroll_kernel.exceptions import (
    EmployeeNotFoundError,
    InsufficientFundsError,
    UnauthorizedError,
)
from payroll_kernel.ledger import PayrollLedger
from payroll_kernel.services.payout_service import PayoutService, PayoutStatus
from payroll_kernel.services.token_transfer import InMemoryTokenVault, TokenTransfer
from tests.conftest import EMPLOYEE_A, EMPLOYEE_B, OWNER


class _BrokenTransfer(TokenTransfer):
    """Settlement that always fails."""

    def __init__(self):
        self.attempts = 0

    def transfer(self, recipient: str, amount: int) -> None:
        self.attempts += 1
        raise ConnectionError("settlement unavailable")


class _ReentrantTransfer(TokenTransfer):
    """Settlement that withdraws again from inside its first transfer."""

    def __init__(self, ledger, vault, nested_amount):
        self.ledger = ledger
        self.vault = vault
        self.nested_amount = nested_amount
        self.calls = 0

    def transfer(self, recipient: str, amount: int) -> None:
        self.calls += 1
        if self.calls == 1:
            self.ledger.withdraw(recipient, 1, self.nested_amount, self)
        self.vault.transfer(recipient, amount)


@pytest.fixture
def paid_ledger(ledger_with_a):
    """EMPLOYEE_A has claimed three periods (balance 30)."""
    for period in (1, 2, 3):
        ledger_with_a.claim(EMPLOYEE_A, 1, period)
    return ledger_with_a


class TestWithdraw:

    def test_partial_withdrawal(self, paid_ledger, vault):
        info = paid_ledger.withdraw(EMPLOYEE_A, 1, 12, vault)

        assert info.balance == 18
        assert paid_ledger.balance_by_id(1) == 18
        assert paid_ledger.withdrawn() == 12
        assert vault.wallet_balance(EMPLOYEE_A) == 12
        paid_ledger.verify_invariants()

    def test_cannot_overdraw_balance(self, paid_ledger, vault):
        with pytest.raises(InsufficientFundsError) as exc_info:
            paid_ledger.withdraw(EMPLOYEE_A, 1, 31, vault)

        assert exc_info.value.source == "balance"
        assert exc_info.value.available == 30
        assert paid_ledger.balance_by_id(1) == 30
        assert vault.wallet_balance(EMPLOYEE_A) == 0

    def test_only_bound_account_may_withdraw(self, paid_ledger, vault):
        with pytest.raises(UnauthorizedError):
            paid_ledger.withdraw(OWNER, 1, 5, vault)
        assert paid_ledger.balance_by_id(1) == 30

    def test_withdraw_unknown_employee(self, paid_ledger, vault):
        with pytest.raises(EmployeeNotFoundError):
            paid_ledger.withdraw(EMPLOYEE_A, 2, 5, vault)

    def test_failed_transfer_leaves_balance(self, paid_ledger):
        broken = _BrokenTransfer()
        journal_size = len(paid_ledger.journal)

        with pytest.raises(ConnectionError):
            paid_ledger.withdraw(EMPLOYEE_A, 1, 10, broken)

        assert broken.attempts == 1
        assert paid_ledger.balance_by_id(1) == 30
        assert paid_ledger.withdrawn() == 0
        assert len(paid_ledger.journal) == journal_size

    def test_reentrant_transfer_cannot_double_spend(self, ledger_with_a, vault):
        ledger_with_a.claim(EMPLOYEE_A, 1, 1)
        reentrant = _ReentrantTransfer(ledger_with_a, vault, nested_amount=10)

        with pytest.raises(InsufficientFundsError) as exc_info:
            ledger_with_a.withdraw(EMPLOYEE_A, 1, 10, reentrant)

        assert exc_info.value.source == "balance"
        assert exc_info.value.available == 0
        assert ledger_with_a.balance_by_id(1) == 10
        assert ledger_with_a.withdrawn() == 0
        assert vault.wallet_balance(EMPLOYEE_A) == 0
        ledger_with_a.verify_invariants()

    def test_reentrant_transfer_limited_to_remaining_balance(self, paid_ledger, vault):
        reentrant = _ReentrantTransfer(paid_ledger, vault, nested_amount=10)

        paid_ledger.withdraw(EMPLOYEE_A, 1, 20, reentrant)

        assert reentrant.calls == 2
        assert paid_ledger.balance_by_id(1) == 0
        assert paid_ledger.withdrawn() == 30
        assert vault.wallet_balance(EMPLOYEE_A) == 30
        paid_ledger.verify_invariants()

    def test_vault_shortfall_leaves_balance(self, paid_ledger):
        vault = InMemoryTokenVault(reserve=5)
        with pytest.raises(InsufficientFundsError) as exc_info:
            paid_ledger.withdraw(EMPLOYEE_A, 1, 10, vault)
        assert exc_info.value.source == "vault"
        assert paid_ledger.balance_by_id(1) == 30
        assert vault.reserve == 5

    def test_withdrawn_units_do_not_return_to_pool(self, vault):
        ledger = PayrollLedger(OWNER, 20)
        ledger.add_employee(OWNER, EMPLOYEE_A, 10, 1)
        ledger.claim(EMPLOYEE_A, 1, 1)
        ledger.claim(EMPLOYEE_A, 1, 2)
        ledger.withdraw(EMPLOYEE_A, 1, 20, vault)

        assert ledger.balance_by_id(1) == 0
        assert ledger.remaining_capacity() == 0
        with pytest.raises(InsufficientFundsError):
            ledger.claim(EMPLOYEE_A, 1, 3)

    def test_withdraw_after_rebinding_pays_new_account(self, paid_ledger, vault):
        paid_ledger.set_employee_address(OWNER, 1, EMPLOYEE_B)
        paid_ledger.withdraw(EMPLOYEE_B, 1, 30, vault)
        assert vault.wallet_balance(EMPLOYEE_B) == 30
        assert vault.wallet_balance(EMPLOYEE_A) == 0


class TestPayoutService:

    def test_withdraw_all(self, paid_ledger, vault):
        service = PayoutService(paid_ledger, vault)
        result = service.withdraw_all(EMPLOYEE_A, 1)

        assert result.status == PayoutStatus.PAID
        assert result.is_paid
        assert result.amount == 30
        assert result.remaining_balance == 0
        assert vault.wallet_balance(EMPLOYEE_A) == 30
        assert vault.reserve == paid_ledger.total_supply() - 30

    def test_nothing_due(self, ledger_with_a, vault):
        service = PayoutService(ledger_with_a, vault)
        result = service.withdraw_all(EMPLOYEE_A, 1)

        assert result.status == PayoutStatus.NOTHING_DUE
        assert not result.is_paid
        assert result.amount == 0

    def test_nothing_due_still_checks_caller(self, ledger_with_a, vault):
        service = PayoutService(ledger_with_a, vault)
        with pytest.raises(UnauthorizedError):
            service.withdraw_all(EMPLOYEE_B, 1)

    def test_partial_payout(self, paid_ledger, vault):
        service = PayoutService(paid_ledger, vault)
        result = service.withdraw(EMPLOYEE_A, 1, 7)
        assert result.amount == 7
        assert result.remaining_balance == 23
