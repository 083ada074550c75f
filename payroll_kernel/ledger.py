"""
PayrollLedger -- the payroll register state machine.

Responsibility:
    Holds the fixed token pool, the employee roster and every employee's
    pay-period cursor and accrued balance. Decides who may change what,
    and when.

Architecture position:
    Kernel -- the single stateful object of the system. Collaborators
    (EventJournal, TokenTransfer, Clock) are injected; nothing is global.

Invariants enforced:
    ACCOUNT_BINDING     -- account -> id is a bijection over active employees.
    ID_RETIREMENT       -- ids are sequential from 1 and never reused.
    SUPPLY_CONSERVATION -- cumulative claimed amount <= total_supply.
    PERIOD_MONOTONICITY -- a claim advances pay_period by exactly one.
    OWNER_AUTHORITY     -- roster mutations require the owner.
    ATOMICITY           -- all guards run before any field is written.

Failure modes:
    UnauthorizedError, InvalidAccountError, DuplicateEmployeeError,
    EmployeeNotFoundError, WrongPeriodError, InsufficientFundsError,
    InvalidAmountError. Every one is raised before the first mutation, so a
    failed call leaves the ledger exactly as it was.

Concurrency:
    One re-entrant lock serializes every operation, reads included. All
    operations are O(1) (except ``employees()`` and ``verify_invariants()``)
    and never wait on anything but that lock.

Usage::

    ledger = PayrollLedger(owner="0xowner")
    employee_id = ledger.add_employee("0xowner", "0xalice", salary=10, pay_period=1)
    ledger.claim("0xalice", employee_id, requested_period=1)
    assert ledger.balance_by_id(employee_id) == 10
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from payroll_kernel.domain.clock import Clock
from payroll_kernel.domain.employee import EmployeeInfo, EmployeeRecord
from payroll_kernel.domain.values import (
    DEFAULT_TOTAL_SUPPLY,
    normalize_account,
    normalize_caller,
    require_quantity,
)
from payroll_kernel.exceptions import (
    DuplicateEmployeeError,
    EmployeeNotFoundError,
    InsufficientFundsError,
    LedgerInvariantViolationError,
    PayrollKernelError,
    UnauthorizedError,
    WrongPeriodError,
)
from payroll_kernel.invariants import LedgerInvariant
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_kernel.services.event_journal import EventJournal, LedgerAction
from payroll_kernel.services.token_transfer import TokenTransfer

logger = get_logger("ledger")


class PayrollLedger:
    """
    Owner-administered payroll register over a fixed token pool.

    Contract:
        Every mutating method takes the caller identity as its first
        argument. The owner is fixed at construction. Employees may only
        ``claim`` and ``withdraw`` against the id bound to their account.

    Guarantees:
        - ``employee_count()`` is always the number of active bindings.
        - Lookups on a removed id or account raise EmployeeNotFoundError.
        - ``claim`` credits ``salary`` and advances ``pay_period`` together.
        - ``set_employee_address`` moves the binding without touching the
          record's salary, pay period or balance.
    """

    def __init__(
        self,
        owner: str,
        total_supply: int | None = None,
        *,
        clock: Clock | None = None,
        journal: EventJournal | None = None,
    ):
        """
        Args:
            owner: Account allowed to administer the roster. Never changes.
            total_supply: Pool size in base units. Defaults to
                10000 tokens at 18 decimals.
            clock: Clock for the default journal's timestamps.
            journal: Event journal to append to. A fresh one is created
                when omitted.
        """
        self._owner = normalize_account(owner)
        self._total_supply = (
            DEFAULT_TOTAL_SUPPLY
            if total_supply is None
            else require_quantity("total_supply", total_supply)
        )
        self._journal = journal if journal is not None else EventJournal(clock=clock)
        self._lock = threading.RLock()

        self._employees: dict[int, EmployeeRecord] = {}
        self._ids_by_account: dict[str, int] = {}
        self._last_id = 0

        # Pool accounting
        self._distributed = 0
        self._withdrawn = 0
        self._forfeited = 0
        self._received = 0

        logger.info(
            "ledger_created",
            extra={"owner": self._owner, "total_supply": self._total_supply},
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _operation(
        self, name: str, caller: object, employee_id: object = None
    ) -> Iterator[str | None]:
        """Serialize one operation and log any refusal it raises."""
        who = normalize_caller(caller)
        subject = None if employee_id is None else str(employee_id)
        with self._lock, LogContext.bind(operation=name, caller=who, employee_id=subject):
            try:
                yield who
            except PayrollKernelError as exc:
                logger.warning(
                    "operation_rejected",
                    extra={"error_code": exc.code, "detail": str(exc)},
                )
                raise

    def _require_owner(self, who: str | None, operation: str) -> None:
        if who is None or who != self._owner:
            raise UnauthorizedError(who, operation, "owner")

    def _require_bound(self, who: str | None, record: EmployeeRecord, operation: str) -> None:
        if who is None or who != record.account:
            raise UnauthorizedError(
                who, operation, f"account bound to employee {record.id}"
            )

    def _record(self, employee_id: object) -> EmployeeRecord:
        if isinstance(employee_id, bool) or not isinstance(employee_id, int):
            raise EmployeeNotFoundError(employee_id)
        record = self._employees.get(employee_id)
        if record is None:
            raise EmployeeNotFoundError(employee_id)
        return record

    def _record_by_account(self, account: object) -> EmployeeRecord:
        key = normalize_caller(account)
        employee_id = self._ids_by_account.get(key) if key is not None else None
        if employee_id is None:
            raise EmployeeNotFoundError(account)
        return self._employees[employee_id]

    # ------------------------------------------------------------------
    # Owner operations
    # ------------------------------------------------------------------

    def add_employee(
        self, caller: str, account: str, salary: int, pay_period: int
    ) -> int:
        """
        Register a new employee.

        Raises:
            UnauthorizedError: caller is not the owner.
            InvalidAccountError: account is null / zero.
            DuplicateEmployeeError: account already bound.
            InvalidAmountError: salary or pay_period is not a non-negative int.

        Returns:
            The newly allocated employee id.
        """
        with self._operation("add_employee", caller) as who:
            self._require_owner(who, "add_employee")
            account = normalize_account(account)
            if account in self._ids_by_account:
                raise DuplicateEmployeeError(account, self._ids_by_account[account])
            require_quantity("salary", salary)
            require_quantity("pay_period", pay_period)

            # INVARIANT: ID_RETIREMENT -- ids only ever count up
            self._last_id += 1
            employee_id = self._last_id
            self._employees[employee_id] = EmployeeRecord(
                id=employee_id,
                account=account,
                salary=salary,
                pay_period=pay_period,
            )
            self._ids_by_account[account] = employee_id

            self._journal.append(
                LedgerAction.EMPLOYEE_ADDED,
                who,
                employee_id,
                {"account": account, "salary": salary, "pay_period": pay_period},
            )
            logger.info(
                "employee_added",
                extra={"employee_id": employee_id, "account": account, "salary": salary},
            )
            return employee_id

    def remove_employee(self, caller: str, employee_id: int) -> None:
        """
        Remove an employee. The id is retired for good.

        Any unwithdrawn balance is forfeited: it stays counted against the
        pool but no longer belongs to anyone.
        """
        with self._operation("remove_employee", caller, employee_id) as who:
            self._require_owner(who, "remove_employee")
            record = self._record(employee_id)

            del self._employees[record.id]
            del self._ids_by_account[record.account]
            self._forfeited += record.balance

            self._journal.append(
                LedgerAction.EMPLOYEE_REMOVED,
                who,
                record.id,
                {"account": record.account, "forfeited": record.balance},
            )
            logger.info(
                "employee_removed",
                extra={"employee_id": record.id, "forfeited": record.balance},
            )

    def set_employee_salary(self, caller: str, employee_id: int, salary: int) -> None:
        """Change the per-period salary of an active employee."""
        with self._operation("set_employee_salary", caller, employee_id) as who:
            self._require_owner(who, "set_employee_salary")
            record = self._record(employee_id)
            require_quantity("salary", salary)

            previous = record.salary
            record.salary = salary

            self._journal.append(
                LedgerAction.SALARY_CHANGED,
                who,
                record.id,
                {"previous": previous, "salary": salary},
            )
            logger.info(
                "salary_changed",
                extra={"employee_id": record.id, "previous": previous, "salary": salary},
            )

    def set_employee_payday(self, caller: str, account: str, pay_period: int) -> None:
        """Move the pay-period cursor of the employee bound to ``account``."""
        with self._operation("set_employee_payday", caller) as who:
            self._require_owner(who, "set_employee_payday")
            record = self._record_by_account(account)
            require_quantity("pay_period", pay_period)

            previous = record.pay_period
            record.pay_period = pay_period

            self._journal.append(
                LedgerAction.PAYDAY_CHANGED,
                who,
                record.id,
                {"previous": previous, "pay_period": pay_period},
            )
            logger.info(
                "payday_changed",
                extra={"employee_id": record.id, "previous": previous, "pay_period": pay_period},
            )

    def set_employee_address(self, caller: str, employee_id: int, new_account: str) -> None:
        """
        Rebind an employee to a different account.

        Only the identity changes: salary, pay period and balance carry over,
        so the new account claims from wherever the old one left off.

        Raises:
            DuplicateEmployeeError: ``new_account`` is already bound,
                including to this same employee.
        """
        with self._operation("set_employee_address", caller, employee_id) as who:
            self._require_owner(who, "set_employee_address")
            record = self._record(employee_id)
            new_account = normalize_account(new_account)
            if new_account in self._ids_by_account:
                raise DuplicateEmployeeError(
                    new_account, self._ids_by_account[new_account]
                )

            old_account = record.account
            del self._ids_by_account[old_account]
            self._ids_by_account[new_account] = record.id
            record.account = new_account

            self._journal.append(
                LedgerAction.ACCOUNT_REBOUND,
                who,
                record.id,
                {"previous": old_account, "account": new_account},
            )
            logger.info(
                "account_rebound",
                extra={"employee_id": record.id, "previous": old_account, "account": new_account},
            )

    # ------------------------------------------------------------------
    # Self-service operations
    # ------------------------------------------------------------------

    def claim(self, caller: str, employee_id: int, requested_period: int) -> EmployeeInfo:
        """
        Claim one period of pay.

        ``requested_period`` must equal the employee's current pay period:
        periods are claimed strictly in order, each exactly once.

        Raises:
            EmployeeNotFoundError: no active employee has this id.
            UnauthorizedError: caller is not the account bound to the id.
            InvalidAmountError: requested_period is negative or not an int.
            WrongPeriodError: period is not the current cursor.
            InsufficientFundsError: salary exceeds remaining pool capacity.

        Returns:
            Snapshot of the employee after the claim.
        """
        with self._operation("claim", caller, employee_id) as who:
            record = self._record(employee_id)
            self._require_bound(who, record, "claim")
            require_quantity("requested_period", requested_period)
            if requested_period != record.pay_period:
                raise WrongPeriodError(record.id, requested_period, record.pay_period)

            # INVARIANT: SUPPLY_CONSERVATION -- reject up front, never pay partially
            remaining = self._total_supply - self._distributed
            if record.salary > remaining:
                raise InsufficientFundsError(record.salary, remaining)

            record.balance += record.salary
            record.pay_period += 1
            self._distributed += record.salary

            self._journal.append(
                LedgerAction.PAY_CLAIMED,
                who,
                record.id,
                {"period": requested_period, "amount": record.salary},
            )
            logger.info(
                "pay_claimed",
                extra={
                    "employee_id": record.id,
                    "period": requested_period,
                    "amount": record.salary,
                    "balance": record.balance,
                },
            )
            return record.to_info()

    def withdraw(
        self,
        caller: str,
        employee_id: int,
        amount: int,
        transfer: TokenTransfer,
    ) -> EmployeeInfo:
        """
        Pay ``amount`` of an employee's accrued balance out through ``transfer``.

        The balance is debited before the transfer runs, so a transfer that
        calls back into the ledger only sees what is left. If the transfer
        raises, the debit is undone and the exception propagates.

        Raises:
            EmployeeNotFoundError: no active employee has this id.
            UnauthorizedError: caller is not the account bound to the id.
            InsufficientFundsError: amount exceeds the employee's balance.
        """
        with self._operation("withdraw", caller, employee_id) as who:
            record = self._record(employee_id)
            self._require_bound(who, record, "withdraw")
            require_quantity("amount", amount)
            if amount > record.balance:
                raise InsufficientFundsError(amount, record.balance, source="balance")

            record.balance -= amount
            self._withdrawn += amount
            try:
                transfer.transfer(record.account, amount)
            except BaseException:
                record.balance += amount
                self._withdrawn -= amount
                raise

            self._journal.append(
                LedgerAction.FUNDS_WITHDRAWN,
                who,
                record.id,
                {"amount": amount, "recipient": record.account},
            )
            logger.info(
                "funds_withdrawn",
                extra={"employee_id": record.id, "amount": amount, "balance": record.balance},
            )
            return record.to_info()

    def deposit(self, sender: str, amount: int) -> int:
        """
        Accept funds sent to the ledger by any account.

        Deposits are tracked separately and never change the token pool.

        Returns:
            Cumulative amount received.
        """
        with self._operation("deposit", sender):
            sender = normalize_account(sender)
            require_quantity("amount", amount)
            self._received += amount

            self._journal.append(
                LedgerAction.FUNDS_DEPOSITED, sender, None, {"amount": amount}
            )
            logger.info("funds_deposited", extra={"sender": sender, "amount": amount})
            return self._received

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def journal(self) -> EventJournal:
        return self._journal

    def employee_count(self) -> int:
        with self._lock:
            return len(self._ids_by_account)

    def total_supply(self) -> int:
        return self._total_supply

    def employee_by_id(self, employee_id: int) -> EmployeeInfo:
        with self._lock:
            return self._record(employee_id).to_info()

    def id_by_account(self, account: str) -> int:
        with self._lock:
            return self._record_by_account(account).id

    def account_by_id(self, employee_id: int) -> str:
        with self._lock:
            return self._record(employee_id).account

    def salary_by_account(self, account: str) -> int:
        with self._lock:
            return self._record_by_account(account).salary

    def payday_by_account(self, account: str) -> int:
        with self._lock:
            return self._record_by_account(account).pay_period

    def balance_by_id(self, employee_id: int) -> int:
        with self._lock:
            return self._record(employee_id).balance

    def employees(self) -> list[EmployeeInfo]:
        """Snapshots of all active employees, ordered by id."""
        with self._lock:
            return [self._employees[i].to_info() for i in sorted(self._employees)]

    def remaining_capacity(self) -> int:
        """Base units still claimable from the pool."""
        with self._lock:
            return self._total_supply - self._distributed

    def distributed(self) -> int:
        """Cumulative base units credited by claims."""
        with self._lock:
            return self._distributed

    def withdrawn(self) -> int:
        with self._lock:
            return self._withdrawn

    def forfeited(self) -> int:
        with self._lock:
            return self._forfeited

    def received_funds(self) -> int:
        with self._lock:
            return self._received

    # ------------------------------------------------------------------
    # Integrity
    # ------------------------------------------------------------------

    def verify_invariants(self) -> None:
        """
        Recompute the structural invariants from scratch.

        Raises:
            LedgerInvariantViolationError: on the first invariant that fails.
        """
        with self._lock:
            if len(self._ids_by_account) != len(self._employees):
                raise LedgerInvariantViolationError(
                    LedgerInvariant.ACCOUNT_BINDING.value,
                    f"{len(self._ids_by_account)} bindings for "
                    f"{len(self._employees)} records",
                )
            for account, employee_id in self._ids_by_account.items():
                record = self._employees.get(employee_id)
                if record is None or record.account != account:
                    raise LedgerInvariantViolationError(
                        LedgerInvariant.ACCOUNT_BINDING.value,
                        f"account {account} does not map back to employee {employee_id}",
                    )

            for employee_id in self._employees:
                if not 1 <= employee_id <= self._last_id:
                    raise LedgerInvariantViolationError(
                        LedgerInvariant.ID_RETIREMENT.value,
                        f"employee id {employee_id} outside 1..{self._last_id}",
                    )

            held = sum(r.balance for r in self._employees.values())
            accounted = held + self._withdrawn + self._forfeited
            if accounted != self._distributed:
                raise LedgerInvariantViolationError(
                    LedgerInvariant.SUPPLY_CONSERVATION.value,
                    f"balances {held} + withdrawn {self._withdrawn} + forfeited "
                    f"{self._forfeited} != distributed {self._distributed}",
                )
            if self._distributed > self._total_supply:
                raise LedgerInvariantViolationError(
                    LedgerInvariant.SUPPLY_CONSERVATION.value,
                    f"distributed {self._distributed} exceeds supply {self._total_supply}",
                )
