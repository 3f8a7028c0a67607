"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from .services.debts import ProjectionSettings

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default: float, cast=float):
    """Read a numeric environment variable, failing loudly on garbage."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return cast(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "PayoffSage"
    LOG_FILENAME = "payoffsage.log"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("PAYOFFSAGE_DEV_MODE", default=True)
        self.LOG_LEVEL = os.getenv("PAYOFFSAGE_LOG_LEVEL", "INFO").strip().upper()
        self.MAX_MONTHS = _env_number("PAYOFFSAGE_MAX_MONTHS", 360, cast=int)
        self.MINIMUM_PAYMENT_FLOOR = _env_number("PAYOFFSAGE_MINIMUM_PAYMENT_FLOOR", 25.0)
        self.MINIMUM_PAYMENT_RATE = _env_number("PAYOFFSAGE_MINIMUM_PAYMENT_RATE", 0.02)
        if self.MAX_MONTHS <= 0:
            raise ValueError("PAYOFFSAGE_MAX_MONTHS must be positive.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where log files live."""

        data_root = os.getenv("PAYOFFSAGE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def projection_settings(self) -> ProjectionSettings:
        """Expose engine knobs for the projector to consume."""

        return ProjectionSettings(
            max_months=self.MAX_MONTHS,
            minimum_payment_floor=self.MINIMUM_PAYMENT_FLOOR,
            minimum_payment_rate=self.MINIMUM_PAYMENT_RATE,
        )


class DevConfig(BaseConfig):
    """Development configuration with verbose console output."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite."""

    __test__ = False

    DEBUG = False
    TESTING = True
