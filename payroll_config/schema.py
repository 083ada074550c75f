"""
LedgerConfig schema.

The human-authored, reviewable description of a payroll pool. YAML files in
``payroll_config/sets/`` are parsed into these types by the loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique


@unique
class ConfigStatus(str, Enum):
    """Lifecycle status for a ledger configuration."""

    DRAFT = "draft"
    PUBLISHED = "published"
    SUPERSEDED = "superseded"


@dataclass(frozen=True)
class LedgerConfig:
    """
    Pool parameters for one payroll ledger.

    Attributes:
        config_id: Name of the configuration set.
        version: Monotonic version of this set.
        token_symbol: Display symbol of the payroll token.
        decimals: Base-unit scale; one token is ``10**decimals`` units.
        initial_supply: Pool size in whole tokens.
        status: Lifecycle status. Only PUBLISHED sets are served.
        checksum: SHA-256 of the source document.
    """

    config_id: str
    version: int
    token_symbol: str
    decimals: int
    initial_supply: int
    status: ConfigStatus = ConfigStatus.PUBLISHED
    checksum: str = ""

    @property
    def total_supply(self) -> int:
        """Pool size in base units."""
        return self.initial_supply * 10**self.decimals
