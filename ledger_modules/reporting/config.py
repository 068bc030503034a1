"""
Reporting Configuration Schema.

Presentation options for the statutory reports.  Classification itself is
fixed by the BAS number ranges in ``ledger_kernel.domain.account_classifier``
and is deliberately not configurable.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Self

import yaml

from ledger_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")

SUPPORTED_LANGUAGES = ("sv", "en")


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    Controls report labels, zero-balance filtering and whether the
    period result is shown inside equity on the balance sheet.
    """

    # Entity name shown on reports
    entity_name: str = "Company"

    # Reporting currency; the ledger is single-currency
    currency: str = "SEK"

    # Language of ReportGroup.name_localized ("sv" or "en")
    language: str = "sv"

    # Whether to include accounts with zero balance in report groups
    include_zero_balances: bool = False

    # Add a synthetic "Årets resultat" line under non-restricted equity
    include_period_result_in_equity: bool = False

    def __post_init__(self):
        if len(self.currency) != 3:
            raise ValueError("currency must be a 3-letter ISO 4217 code")
        if self.language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"language must be one of {', '.join(SUPPORTED_LANGUAGES)}"
            )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """
        Create config from a dictionary.

        Raises:
            ValueError: unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown reporting config keys: {', '.join(unknown)}")
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Self:
        """
        Load config from a YAML file.

        The file may hold the options at top level or under a
        ``reporting:`` key.

        Raises:
            FileNotFoundError: missing file.
            yaml.YAMLError: malformed YAML.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Reporting config in {path} must be a mapping")
        if "reporting" in data and isinstance(data["reporting"], dict):
            data = data["reporting"]
        return cls.from_dict(data)
