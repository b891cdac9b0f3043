"""
Centralized configuration with environment variable overrides.

Timing-policy durations, the fallback working window, slot granularity
rules and consent policy are configurable here. Engine modules read
``settings`` instead of hardcoding these values.
"""

import logging
import os
import re
from dataclasses import dataclass, field

from dotenv import load_dotenv

from slotengine.logging_context import CommitIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_int_tuple(env_var: str, default: str) -> tuple[int, ...]:
    """Parse a comma-separated list of integers from an env var."""
    raw = os.getenv(env_var, default)
    try:
        return tuple(sorted({int(part) for part in raw.split(",") if part.strip()}))
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer list for {env_var}: {raw!r}"
        ) from None


def _str_tuple(env_var: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(env_var, default)
    return tuple(part.strip().upper() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class TimingConfig:
    """Booking creation and cancellation windows, in minutes."""

    min_booking_lead_minutes: int = _safe_int("MIN_BOOKING_LEAD_MINUTES", "120")
    cancellation_limit_minutes: int = _safe_int("CANCELLATION_LIMIT_MINUTES", "1380")
    reminder_grace_minutes: int = _safe_int("REMINDER_GRACE_MINUTES", "60")


@dataclass(frozen=True)
class ScheduleConfig:
    """Fallback working window and slot quantization rules."""

    default_open_time: str = os.getenv("DEFAULT_OPEN_TIME", "08:00")
    default_close_time: str = os.getenv("DEFAULT_CLOSE_TIME", "19:00")
    default_granularity_minutes: int = _safe_int("DEFAULT_SLOT_GRANULARITY", "60")
    allowed_granularities: tuple[int, ...] = _safe_int_tuple(
        "ALLOWED_GRANULARITIES", "15,30,45,60"
    )
    default_timezone: str = os.getenv("DEFAULT_TIMEZONE", "Europe/Bucharest")


@dataclass(frozen=True)
class PolicyConfig:
    """Business-type and role policies consulted at commit time."""

    consent_required_types: tuple[str, ...] = _str_tuple(
        "CONSENT_REQUIRED_TYPES", "STOMATOLOGIE,OFTALMOLOGIE,PSIHOLOGIE,TERAPIE,BEAUTY"
    )
    elevated_roles: tuple[str, ...] = _str_tuple(
        "ELEVATED_ROLES", "BUSINESS,EMPLOYEE,SUPERADMIN"
    )


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    timing: TimingConfig = field(default_factory=TimingConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    timing = config.timing
    for name, value in [
        ("MIN_BOOKING_LEAD_MINUTES", timing.min_booking_lead_minutes),
        ("CANCELLATION_LIMIT_MINUTES", timing.cancellation_limit_minutes),
        ("REMINDER_GRACE_MINUTES", timing.reminder_grace_minutes),
    ]:
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")

    schedule = config.schedule
    for name, value in [
        ("DEFAULT_OPEN_TIME", schedule.default_open_time),
        ("DEFAULT_CLOSE_TIME", schedule.default_close_time),
    ]:
        if not _HHMM.match(value):
            raise ValueError(f"{name} must be HH:MM, got {value!r}")
    if schedule.default_open_time >= schedule.default_close_time:
        raise ValueError(
            "DEFAULT_OPEN_TIME must be before DEFAULT_CLOSE_TIME, "
            f"got {schedule.default_open_time}-{schedule.default_close_time}"
        )
    if schedule.default_granularity_minutes < 1:
        raise ValueError(
            "DEFAULT_SLOT_GRANULARITY must be >= 1, "
            f"got {schedule.default_granularity_minutes}"
        )
    if not schedule.allowed_granularities or min(schedule.allowed_granularities) < 1:
        raise ValueError(
            f"ALLOWED_GRANULARITIES must be positive integers, got {schedule.allowed_granularities}"
        )


LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s [%(commit_id)s]: %(message)s"


def _log_handler() -> logging.Handler:
    """Console handler that stamps every record with the commit id it renders."""
    handler = logging.StreamHandler()
    handler.addFilter(CommitIdFilter())
    return handler


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[_log_handler()],
    )
    logger.debug(
        "Configuration loaded: lead=%dm cancel=%dm grace=%dm",
        config.timing.min_booking_lead_minutes,
        config.timing.cancellation_limit_minutes,
        config.timing.reminder_grace_minutes,
    )
    return config


# Singleton instance
settings = load_config()
