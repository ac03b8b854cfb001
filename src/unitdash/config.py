import os
from dataclasses import dataclass, replace
from typing import Optional

from dbus_next import BusType

from .errors import ValidationError
from .models import FilterMode


DEFAULT_PAGE_SIZE = 10
FILTER_MODES: tuple[str, ...] = ("live", "confirm")
BUS_NAMES: tuple[str, ...] = ("system", "user")


@dataclass(frozen=True)
class Settings:
    page_size: int = DEFAULT_PAGE_SIZE
    bus: str = "system"  # "system" or "user"
    unit_type: Optional[str] = None
    filter_mode: FilterMode = "live"
    refresh_interval: float = 0.0
    log_file: Optional[str] = None
    log_level: str = "INFO"

    @property
    def bus_type(self) -> BusType:
        return BusType.SESSION if self.bus == "user" else BusType.SYSTEM

    def override(self, **changes) -> "Settings":
        """Apply CLI overrides; ``None`` means "not given on the command line"."""
        given = {k: v for k, v in changes.items() if v is not None}
        return validate(replace(self, **given))


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got '{raw}'") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got '{raw}'") from None


def settings_from_env() -> Settings:
    """Read UNITDASH_* variables; unset ones keep their defaults."""
    settings = Settings(
        page_size=_env_int("UNITDASH_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        bus=os.getenv("UNITDASH_BUS", "system").strip().lower() or "system",
        unit_type=os.getenv("UNITDASH_UNIT_TYPE", "").strip() or None,
        filter_mode=os.getenv("UNITDASH_FILTER_MODE", "live").strip().lower() or "live",  # type: ignore[arg-type]
        refresh_interval=_env_float("UNITDASH_REFRESH_INTERVAL", 0.0),
        log_file=os.getenv("UNITDASH_LOG_FILE") or None,
        log_level=os.getenv("UNITDASH_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
    return validate(settings)


def validate(settings: Settings) -> Settings:
    """Check ranges and normalise; returns the settings to use."""
    if settings.unit_type is not None:
        # ".service" and "service" name the same type
        settings = replace(settings, unit_type=settings.unit_type.strip().lstrip(".") or None)
    if settings.page_size <= 0:
        raise ValidationError(f"page size must be positive, got {settings.page_size}")
    if settings.bus not in BUS_NAMES:
        raise ValidationError(f"bus must be one of {', '.join(BUS_NAMES)}, got '{settings.bus}'")
    if settings.filter_mode not in FILTER_MODES:
        raise ValidationError(
            f"filter mode must be one of {', '.join(FILTER_MODES)}, got '{settings.filter_mode}'"
        )
    if settings.refresh_interval < 0:
        raise ValidationError("refresh interval cannot be negative")
    return settings
