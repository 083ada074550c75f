"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads a YAML ledger configuration file and parses it into a typed
``LedgerConfig``. The public runtime entry point is
``payroll_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Wrong types or negative values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import ConfigStatus, LedgerConfig


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _non_negative_int(data: dict[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{key} must be a non-negative integer, got {value!r}")
    return value


def parse_ledger_config(data: dict[str, Any]) -> LedgerConfig:
    """
    Parse a ``LedgerConfig`` from a dict.

    Expected shape::

        config_id: default
        version: 1
        status: published
        token:
          symbol: PAYROLL
          decimals: 18
          initial_supply: 10000

    Raises:
        KeyError: if required keys are missing.
        ValueError: if values have the wrong type or sign.
    """
    token = data["token"]
    if not isinstance(token, dict):
        raise ValueError(f"token must be a mapping, got {token!r}")

    return LedgerConfig(
        config_id=str(data["config_id"]),
        version=_non_negative_int(data, "version"),
        token_symbol=str(token.get("symbol", "PAYROLL")),
        decimals=_non_negative_int(token, "decimals"),
        initial_supply=_non_negative_int(token, "initial_supply"),
        status=ConfigStatus(data.get("status", ConfigStatus.PUBLISHED.value)),
        checksum=compute_checksum(data),
    )


def load_ledger_config(path: Path) -> LedgerConfig:
    """Load and parse one configuration file."""
    return parse_ledger_config(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
