"""
Pure domain layer.

This module contains value helpers, employee records and the clock
abstraction with NO dependencies on:
- Logging
- Locks
- I/O (except SystemClock)
"""

from payroll_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from payroll_kernel.domain.employee import EmployeeInfo, EmployeeRecord
from payroll_kernel.domain.values import (
    DEFAULT_DECIMALS,
    DEFAULT_INITIAL_SUPPLY,
    DEFAULT_TOTAL_SUPPLY,
    format_base_units,
    is_zero_account,
    normalize_account,
    normalize_caller,
    require_quantity,
    to_base_units,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "EmployeeInfo",
    "EmployeeRecord",
    "DEFAULT_DECIMALS",
    "DEFAULT_INITIAL_SUPPLY",
    "DEFAULT_TOTAL_SUPPLY",
    "format_base_units",
    "is_zero_account",
    "normalize_account",
    "normalize_caller",
    "require_quantity",
    "to_base_units",
]
