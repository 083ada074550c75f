"""
Employee records held by the payroll ledger.

``EmployeeRecord`` is the ledger's private, mutable row. Callers only ever
receive ``EmployeeInfo`` snapshots, so nothing outside the ledger can change
a balance or a pay period without going through its guards.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class EmployeeRecord:
    """Mutable employee row. Owned by PayrollLedger, never handed out."""

    id: int
    account: str
    salary: int
    pay_period: int
    balance: int = 0

    def to_info(self) -> "EmployeeInfo":
        return EmployeeInfo(
            id=self.id,
            account=self.account,
            salary=self.salary,
            pay_period=self.pay_period,
            balance=self.balance,
        )


@dataclass(frozen=True, slots=True)
class EmployeeInfo:
    """
    Immutable snapshot of one active employee.

    Attributes:
        id: Sequential employee id (never reused).
        account: Account entitled to claim this employee's pay.
        salary: Amount credited per claimed period.
        pay_period: Next period this employee may claim.
        balance: Cumulative claimed amount not yet withdrawn.
    """

    id: int
    account: str
    salary: int
    pay_period: int
    balance: int

    def as_tuple(self) -> tuple[str, int, int, int]:
        """(account, salary, pay_period, balance) in lookup order."""
        return (self.account, self.salary, self.pay_period, self.balance)
