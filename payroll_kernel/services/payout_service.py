"""
PayoutService -- pays accrued balances out to employee wallets.

Responsibility:
    Thin façade over ``PayrollLedger.withdraw`` for the common case of
    paying an employee everything they have accrued, reporting the outcome
    as a ``PayoutResult`` instead of making callers inspect balances.

Architecture position:
    Kernel > Services. Composes a PayrollLedger with a TokenTransfer.

Failure modes:
    Ledger refusals (UnauthorizedError, EmployeeNotFoundError) and transfer
    failures propagate unchanged. An empty balance is not an error: it
    yields ``PayoutStatus.NOTHING_DUE``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from payroll_kernel.ledger import PayrollLedger
from payroll_kernel.logging_config import get_logger
from payroll_kernel.services.token_transfer import TokenTransfer

logger = get_logger("services.payout")


class PayoutStatus(str, Enum):
    PAID = "paid"
    NOTHING_DUE = "nothing_due"


@dataclass(frozen=True)
class PayoutResult:
    status: PayoutStatus
    employee_id: int
    amount: int
    remaining_balance: int

    @property
    def is_paid(self) -> bool:
        return self.status == PayoutStatus.PAID


class PayoutService:
    """
    Pays employees out of their ledger balance.

    Usage:
        service = PayoutService(ledger, InMemoryTokenVault(ledger.total_supply()))
        result = service.withdraw_all(caller="0xalice", employee_id=1)
    """

    def __init__(self, ledger: PayrollLedger, transfer: TokenTransfer):
        self._ledger = ledger
        self._transfer = transfer

    def withdraw(self, caller: str, employee_id: int, amount: int) -> PayoutResult:
        """Pay out ``amount`` of the employee's balance."""
        info = self._ledger.withdraw(caller, employee_id, amount, self._transfer)
        return PayoutResult(
            status=PayoutStatus.PAID if amount else PayoutStatus.NOTHING_DUE,
            employee_id=info.id,
            amount=amount,
            remaining_balance=info.balance,
        )

    def withdraw_all(self, caller: str, employee_id: int) -> PayoutResult:
        """
        Pay out the employee's full balance as read at call time.

        A claim landing between the read and the withdrawal stays in the
        balance for the next payout; two racing payouts cannot both pay the
        same units because withdraw re-checks the balance under the lock.
        """
        balance = self._ledger.balance_by_id(employee_id)
        result = self.withdraw(caller, employee_id, balance)
        if not result.is_paid:
            logger.info("payout_nothing_due", extra={"employee_id": employee_id})
        return result
