"""Configuration management for Cyclical."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.grid import Weekday
from .core.markers import DEFAULT_DAY_COUNT, DEFAULT_TAG

logger = logging.getLogger(__name__)

CYCLICAL_HOME = Path(os.environ.get("CYCLICAL_HOME", Path.home() / "cyclical"))
CONFIG_FILE = CYCLICAL_HOME / "config" / "cyclical.conf"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Config:
    """Cyclical configuration."""

    first_weekday: str = "Sunday"
    marker_tag: str = DEFAULT_TAG
    marker_days: int = DEFAULT_DAY_COUNT
    pad_weeks: bool = False
    timezone: str = ""
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)
    telegram_calendar_time: str = ""

    @property
    def first_weekday_number(self) -> int:
        return parse_weekday(self.first_weekday)


def parse_weekday(value: str | int) -> int:
    """
    Parse a weekday name or number into 1=Sunday .. 7=Saturday.

    Accepts "Sunday", "sun", "SU" or "1".."7".
    """
    text = str(value).strip()
    if text.isdigit():
        number = int(text)
        if 1 <= number <= 7:
            return number
        raise ValueError(f"Weekday number must be 1..7, got {number}")

    lowered = text.lower()
    if len(lowered) >= 2:
        for day in Weekday:
            if day.name.lower().startswith(lowered):
                return int(day)
    raise ValueError(f"Unknown weekday: {value!r}")


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from cyclical.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "first_weekday":
                try:
                    parse_weekday(value)
                    config.first_weekday = value
                except ValueError as e:
                    logger.warning(f"Ignoring FIRST_WEEKDAY: {e}")
            case "marker_tag":
                if value:
                    config.marker_tag = value
            case "marker_days":
                try:
                    days = int(value)
                    if days < 0:
                        raise ValueError("must be >= 0")
                    config.marker_days = days
                except ValueError as e:
                    logger.warning(f"Ignoring MARKER_DAYS={value!r}: {e}")
            case "pad_weeks":
                config.pad_weeks = value.lower() in _TRUE_VALUES
            case "timezone":
                config.timezone = value
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_allowed_users":
                try:
                    config.telegram_allowed_users = [
                        int(u.strip()) for u in value.split(",") if u.strip()
                    ]
                except ValueError as e:
                    logger.warning(f"Ignoring TELEGRAM_ALLOWED_USERS: {e}")
            case "telegram_calendar_time":
                config.telegram_calendar_time = value

    return config
