"""
Token transfer boundary.

The ledger does not settle tokens itself. ``PayrollLedger.withdraw`` hands
the actual movement of tokens to a ``TokenTransfer`` implementation and only
debits the employee balance once the transfer has gone through.

``InMemoryTokenVault`` is the reference implementation: a reserve of base
units (the pool the owner minted at deployment) paid out into per-account
wallets.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from payroll_kernel.domain.values import normalize_account, require_quantity
from payroll_kernel.exceptions import InsufficientFundsError
from payroll_kernel.logging_config import get_logger

logger = get_logger("services.token_transfer")


class TokenTransfer(ABC):
    """
    Settlement collaborator.

    Contract:
        ``transfer`` either moves exactly ``amount`` base units to
        ``recipient`` and returns, or raises and moves nothing.
    """

    @abstractmethod
    def transfer(self, recipient: str, amount: int) -> None:
        ...


class InMemoryTokenVault(TokenTransfer):
    """Reserve-backed wallets held in memory."""

    def __init__(self, reserve: int):
        self._reserve = require_quantity("reserve", reserve)
        self._wallets: dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def reserve(self) -> int:
        """Base units still held by the vault."""
        with self._lock:
            return self._reserve

    def wallet_balance(self, account: str) -> int:
        """Base units paid out to ``account`` so far."""
        with self._lock:
            return self._wallets.get(normalize_account(account), 0)

    def transfer(self, recipient: str, amount: int) -> None:
        recipient = normalize_account(recipient)
        require_quantity("amount", amount)
        with self._lock:
            if amount > self._reserve:
                raise InsufficientFundsError(amount, self._reserve, source="vault")
            self._reserve -= amount
            self._wallets[recipient] = self._wallets.get(recipient, 0) + amount

        logger.info(
            "tokens_transferred",
            extra={"recipient": recipient, "amount": amount},
        )
