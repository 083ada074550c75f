"""
payroll_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the ONLY way to obtain pool configuration at runtime through
    ``get_active_config()``. YAML loading is internal tooling and never
    exposed to the kernel.

Architecture position:
    Configuration -- YAML-driven. This package sits above
    ``payroll_kernel``; the kernel MUST NEVER import from
    ``payroll_config``. ``payroll_config.bridges`` turns a config into
    kernel objects.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set with the requested id.
    - ``KeyError`` / ``ValueError`` -- the set is malformed or not published.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``PAYROLL_CONFIG_TRACE`` log entry with config_id, version, checksum
    and total supply, tying a ledger back to the exact configuration that
    sized its pool.
"""

from __future__ import annotations

import logging
from pathlib import Path

from payroll_config.loader import load_ledger_config
from payroll_config.schema import ConfigStatus, LedgerConfig

__all__ = ["ConfigStatus", "LedgerConfig", "get_active_config"]

_logger = logging.getLogger("payroll_kernel.config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_active_config(
    config_id: str = "default",
    config_dir: Path | None = None,
) -> LedgerConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_id: Name of the set; resolves to ``<config_dir>/<config_id>.yaml``.
        config_dir: Override path to configuration sets directory.
            Defaults to payroll_config/sets/.

    Returns:
        The parsed, published ``LedgerConfig``.

    Raises:
        FileNotFoundError: If the configuration set does not exist.
        KeyError: If required keys are missing.
        ValueError: If values are invalid or the set is not PUBLISHED.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{config_id}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"Configuration set not found: {path}")

    config = load_ledger_config(path)
    if config.config_id != config_id:
        raise ValueError(
            f"Configuration file {path} declares config_id "
            f"{config.config_id!r}, expected {config_id!r}"
        )
    if config.status != ConfigStatus.PUBLISHED:
        raise ValueError(
            f"Configuration set {config_id!r} is {config.status.value}, "
            "only published sets may be used"
        )

    _logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_set_version": config.version,
            "checksum": config.checksum,
            "token_symbol": config.token_symbol,
            "total_supply": config.total_supply,
        },
    )
    return config
