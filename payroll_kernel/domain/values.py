"""
Values -- account identities and token quantities.

Responsibility:
    Normalizes external account identities and validates the non-negative
    integer quantities (salaries, periods, token amounts) the ledger works in.
    Also converts between whole tokens and base units.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Accounts are compared in normalized form (stripped, lower-cased), so
      ``"0xABC"`` and ``"0xabc"`` are the same identity.
    - The zero account (``None``, ``""``, ``"0x0"``, ``"0x000..."``) is never
      a valid account.
    - Quantities are plain ``int`` >= 0. ``bool`` is rejected even though it
      subclasses ``int``.

Failure modes:
    - InvalidAccountError for null / zero / non-string accounts.
    - InvalidAmountError for negative, non-integer or boolean quantities.
"""

from __future__ import annotations

from payroll_kernel.exceptions import InvalidAccountError, InvalidAmountError

# Token scale of the reference deployment: 18 decimals, 10000 whole tokens.
DEFAULT_DECIMALS = 18
DEFAULT_INITIAL_SUPPLY = 10_000


def is_zero_account(value: object) -> bool:
    """Return True if ``value`` is the null / zero identity."""
    if value is None:
        return True
    if not isinstance(value, str):
        return False
    text = value.strip().lower()
    if not text:
        return True
    if text.startswith("0x"):
        digits = text[2:]
        return digits == "" or set(digits) == {"0"}
    return False


def normalize_account(value: object) -> str:
    """
    Validate and normalize an account identity.

    Raises:
        InvalidAccountError: if ``value`` is not a string or is the zero account.
    """
    if not isinstance(value, str) or is_zero_account(value):
        raise InvalidAccountError(value)
    return value.strip().lower()


def normalize_caller(value: object) -> str | None:
    """
    Normalize a caller identity for privilege comparison.

    Unlike ``normalize_account`` this never raises: an unusable caller simply
    matches nobody and is refused by the authorization check.
    """
    if not isinstance(value, str) or is_zero_account(value):
        return None
    return value.strip().lower()


def require_quantity(field: str, value: object) -> int:
    """
    Return ``value`` if it is a non-negative ``int``.

    Raises:
        InvalidAmountError: otherwise.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidAmountError(field, value)
    return value


def to_base_units(whole_tokens: int, decimals: int = DEFAULT_DECIMALS) -> int:
    """Convert whole tokens to base units (``whole_tokens * 10**decimals``)."""
    require_quantity("whole_tokens", whole_tokens)
    require_quantity("decimals", decimals)
    return whole_tokens * 10**decimals


def format_base_units(units: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """
    Render base units as a decimal token string.

    >>> format_base_units(1_500_000_000_000_000_000)
    '1.5'
    """
    require_quantity("units", units)
    require_quantity("decimals", decimals)
    if decimals == 0:
        return str(units)
    whole, frac = divmod(units, 10**decimals)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_text}" if frac_text else str(whole)


DEFAULT_TOTAL_SUPPLY = to_base_units(DEFAULT_INITIAL_SUPPLY, DEFAULT_DECIMALS)
