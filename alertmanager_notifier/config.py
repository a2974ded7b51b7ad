"""Central configuration for alertmanager_notifier."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_PAYLOAD_MODES = {"fan_out", "single"}


@dataclass
class Settings:
    """Configuration settings for alertmanager_notifier.

    All settings are loaded from environment variables with sensible defaults.
    """

    ALERTMANAGER_URL: str | None
    ALERT_PAYLOAD_MODE: str
    WEBHOOK_TIMEOUT_S: float
    APP_URL: str
    LOG_LEVEL: str


def _read_settings() -> Settings:
    """Read all configuration from environment variables.

    Returns:
        Settings object with all configuration values.

    Note:
        Invalid numeric values and unknown payload modes fall back to
        defaults.
    """
    am_url = os.environ.get("ALERTMANAGER_URL") or None

    mode = (os.environ.get("ALERT_PAYLOAD_MODE") or "fan_out").strip().lower()
    if mode not in _PAYLOAD_MODES:
        mode = "fan_out"

    try:
        timeout = float(os.environ.get("WEBHOOK_TIMEOUT_S", "30") or "30")
    except Exception:
        timeout = 30.0
    if timeout <= 0:
        timeout = 30.0

    app_url = os.environ.get("APP_URL") or "http://localhost:3000/"
    log_level = (os.environ.get("LOG_LEVEL") or "INFO").upper()

    return Settings(
        ALERTMANAGER_URL=am_url,
        ALERT_PAYLOAD_MODE=mode,
        WEBHOOK_TIMEOUT_S=timeout,
        APP_URL=app_url,
        LOG_LEVEL=log_level,
    )


settings = _read_settings()


def validate_settings() -> None:
    """Log warnings for configuration that will make sends fail."""
    if settings.ALERTMANAGER_URL is None:
        logger.warning(
            "ALERTMANAGER_URL is not set; pass --url when sending alerts."
        )


# Exported constants
ALERTMANAGER_URL: str | None = settings.ALERTMANAGER_URL
ALERT_PAYLOAD_MODE: str = settings.ALERT_PAYLOAD_MODE
WEBHOOK_TIMEOUT_S: float = settings.WEBHOOK_TIMEOUT_S
APP_URL: str = settings.APP_URL
