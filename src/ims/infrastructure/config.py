"""Runtime configuration read from the environment (and an optional .env)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

STORE_BACKENDS = ("json", "memory")


class ConfigError(Exception):
    """An environment variable holds an unusable value."""


def _parse_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "t", "yes", "y", "on")


@dataclass(frozen=True)
class Settings:
    store: str = "json"
    data_dir: Path = Path("data")
    tax_rate: Decimal = Decimal("0.18")
    log_level: str = "WARNING"
    seed_on_start: bool = False

    @staticmethod
    def from_env(env_file: Path | None = None) -> Settings:
        """Build settings from ``IMS_*`` variables.

        A ``.env`` file (``env_file`` or one found from the working
        directory) is loaded first without overriding variables that are
        already set.
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)
        else:
            load_dotenv(find_dotenv(usecwd=True), override=False)

        store = os.getenv("IMS_STORE", "json").strip().lower()
        if store not in STORE_BACKENDS:
            raise ConfigError(f"IMS_STORE must be one of {', '.join(STORE_BACKENDS)}, got '{store}'")

        raw_rate = os.getenv("IMS_TAX_RATE", "0.18")
        try:
            tax_rate = Decimal(raw_rate)
        except InvalidOperation as exc:
            raise ConfigError(f"IMS_TAX_RATE is not a number: '{raw_rate}'") from exc
        if not tax_rate.is_finite() or tax_rate < 0:
            raise ConfigError(f"IMS_TAX_RATE must be a non-negative number, got '{raw_rate}'")

        log_level = os.getenv("IMS_LOG_LEVEL", "WARNING").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"IMS_LOG_LEVEL is not a logging level: '{log_level}'")

        return Settings(
            store=store,
            data_dir=Path(os.getenv("IMS_DATA_DIR", "data")).expanduser(),
            tax_rate=tax_rate,
            log_level=log_level,
            seed_on_start=_parse_bool(os.getenv("IMS_SEED_ON_START"), default=False),
        )
