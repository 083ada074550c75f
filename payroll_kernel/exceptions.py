"""
Typed Exception Hierarchy for the Payroll Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

A payroll ledger has to tell its callers *why* an operation was refused.
A caller that gets ``WrongPeriodError`` can try again next period; a caller
that gets ``UnauthorizedError`` never will succeed. Parsing message strings
to tell these apart is fragile, so every failure:

  1. Has its own exception CLASS (catch by type, not message)
  2. Carries a CODE attribute (machine-readable, API-safe)
  3. Stores the offending values as structured ATTRIBUTES

Example:
    try:
        ledger.claim(caller, employee_id, period)
    except WrongPeriodError as e:
        schedule_retry(expected=e.expected)
    except UnauthorizedError as e:
        deny(code=e.code)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollKernelError (base)
    |
    +-- AuthorizationError
    |   +-- UnauthorizedError
    |
    +-- EmployeeError
    |   +-- InvalidAccountError
    |   +-- DuplicateEmployeeError
    |   +-- EmployeeNotFoundError
    |
    +-- PaymentError
    |   +-- WrongPeriodError
    |   +-- InsufficientFundsError
    |   +-- InvalidAmountError
    |
    +-- IntegrityError
        +-- LedgerInvariantViolationError
        +-- AuditChainBrokenError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                 | When Raised
----------------|----------------------|------------------------------------------
Authorization   | UNAUTHORIZED         | Caller is not the owner / bound account
----------------|----------------------|------------------------------------------
Employee        | INVALID_ACCOUNT      | Null or all-zero account supplied
                | DUPLICATE_EMPLOYEE   | Account already bound to an employee
                | NOT_FOUND            | Id or account has no active binding
----------------|----------------------|------------------------------------------
Payment         | WRONG_PERIOD         | Claim period != employee's cursor
                | INSUFFICIENT_FUNDS   | Pool (or balance) cannot cover amount
                | INVALID_AMOUNT       | Negative or non-integer quantity
----------------|----------------------|------------------------------------------
Integrity       | INVARIANT_VIOLATION  | Recomputed ledger totals disagree
                | AUDIT_CHAIN_BROKEN   | Event journal hash chain tampered

Every failure is raised before any state is touched: the ledger is left
exactly as it was.
"""


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Authorization exceptions


class AuthorizationError(PayrollKernelError):
    """Base exception for privilege failures."""

    code: str = "AUTHORIZATION_ERROR"


class UnauthorizedError(AuthorizationError):
    """Caller lacks the privilege the operation requires."""

    code: str = "UNAUTHORIZED"

    def __init__(self, caller: str | None, operation: str, required: str):
        self.caller = caller
        self.operation = operation
        self.required = required
        super().__init__(
            f"Caller {caller!r} may not {operation}: requires {required}"
        )


# Employee exceptions


class EmployeeError(PayrollKernelError):
    """Base exception for roster errors."""

    code: str = "EMPLOYEE_ERROR"


class InvalidAccountError(EmployeeError):
    """A null or zero account was supplied where a real one is required."""

    code: str = "INVALID_ACCOUNT"

    def __init__(self, account: object):
        self.account = account
        super().__init__(f"Invalid account: {account!r}")


class DuplicateEmployeeError(EmployeeError):
    """Account is already bound to an active employee."""

    code: str = "DUPLICATE_EMPLOYEE"

    def __init__(self, account: str, employee_id: int):
        self.account = account
        self.employee_id = employee_id
        super().__init__(
            f"Account {account} is already bound to employee {employee_id}"
        )


class EmployeeNotFoundError(EmployeeError):
    """Id or account does not reference an active employee."""

    code: str = "NOT_FOUND"

    def __init__(self, key: object):
        self.key = key
        super().__init__(f"No active employee for {key!r}")


# Payment exceptions


class PaymentError(PayrollKernelError):
    """Base exception for claim and payout errors."""

    code: str = "PAYMENT_ERROR"


class WrongPeriodError(PaymentError):
    """
    Claimed period is not the employee's current pay period.

    Periods must be claimed in order, exactly once each.
    """

    code: str = "WRONG_PERIOD"

    def __init__(self, employee_id: int, requested: int, expected: int):
        self.employee_id = employee_id
        self.requested = requested
        self.expected = expected
        super().__init__(
            f"Employee {employee_id} cannot claim period {requested}: "
            f"next claimable period is {expected}"
        )


class InsufficientFundsError(PaymentError):
    """The pool (or an employee balance) cannot cover the requested amount."""

    code: str = "INSUFFICIENT_FUNDS"

    def __init__(self, requested: int, available: int, source: str = "pool"):
        self.requested = requested
        self.available = available
        self.source = source
        super().__init__(
            f"Insufficient {source} funds: requested {requested}, "
            f"available {available}"
        )


class InvalidAmountError(PaymentError):
    """A monetary or period quantity is not a non-negative integer."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid {field}: {value!r} (must be a non-negative integer)"
        )


# Integrity exceptions


class IntegrityError(PayrollKernelError):
    """Base exception for internal consistency failures."""

    code: str = "INTEGRITY_ERROR"


class LedgerInvariantViolationError(IntegrityError):
    """
    Recomputed ledger state disagrees with a declared invariant.

    This indicates a kernel bug or memory tampering, never a caller mistake.
    """

    code: str = "INVARIANT_VIOLATION"

    def __init__(self, invariant: str, detail: str):
        self.invariant = invariant
        self.detail = detail
        super().__init__(f"Invariant {invariant} violated: {detail}")


class AuditChainBrokenError(IntegrityError):
    """Event journal hash chain validation failed."""

    code: str = "AUDIT_CHAIN_BROKEN"

    def __init__(self, seq: int, expected_hash: str, actual_hash: str):
        self.seq = seq
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
        super().__init__(
            f"Journal chain broken at seq {seq}: "
            f"expected {expected_hash}, got {actual_hash}"
        )
