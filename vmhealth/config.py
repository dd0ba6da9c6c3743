import math
import os
import re
import threading
from functools import lru_cache
from typing import Optional, Union

from pydantic import BaseModel, Field

from vmhealth.models.health import ThresholdPolicy

DEFAULT_THRESHOLD = "60"
DEFAULT_INTERVAL = "1"

_THRESHOLD_PATTERN = re.compile(r"^[0-9]+([.][0-9]+)?$")
_INTERVAL_PATTERN = re.compile(r"^[0-9]+$")
_TRUTHY = {"1", "true", "yes", "on"}


class ConfigurationError(ValueError):
    """Raised for malformed threshold or interval values."""


class Settings(BaseModel):
    # Raw values; parse_policy() validates them right before a run.
    threshold: str = Field(
        default=DEFAULT_THRESHOLD,
        description="Threshold percent; a metric below it counts as healthy",
    )
    interval: str = Field(
        default=DEFAULT_INTERVAL,
        description="CPU sample interval in whole seconds",
    )
    explain: bool = Field(
        default=False,
        description="Attach an explanation to every report",
    )
    log_level: str = Field(
        default="WARNING",
        description="Level name for the root logger, e.g. INFO or DEBUG",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        raw_explain = os.getenv("VMHEALTH_EXPLAIN", "")

        return cls(
            threshold=os.getenv("VMHEALTH_THRESHOLD", DEFAULT_THRESHOLD).strip(),
            interval=os.getenv("VMHEALTH_INTERVAL", DEFAULT_INTERVAL).strip(),
            explain=raw_explain.strip().lower() in _TRUTHY,
            log_level=os.getenv("VMHEALTH_LOG_LEVEL", "WARNING").strip().upper(),
        )

    def policy(self) -> ThresholdPolicy:
        return parse_policy(self.threshold, self.interval)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def parse_threshold(raw: Union[str, float, int]) -> float:
    """
    Parse a threshold percent such as "60" or "72.5".

    Only plain non-negative decimals are accepted; signs, exponents, "nan" and
    "inf" are rejected with ConfigurationError.
    """
    text = str(raw).strip()
    if not _THRESHOLD_PATTERN.match(text):
        raise ConfigurationError(f"Invalid threshold: {raw}")
    value = float(text)
    if not math.isfinite(value):
        raise ConfigurationError(f"Invalid threshold: {raw}")
    return value


def parse_interval(raw: Union[str, int]) -> int:
    """Parse a whole number of seconds, no longer than the platform can sleep."""
    text = str(raw).strip()
    if not _INTERVAL_PATTERN.match(text):
        raise ConfigurationError(f"Invalid sample interval: {raw}")
    try:
        value = int(text)
    except ValueError as exc:
        # int() refuses very long digit strings on current interpreters.
        raise ConfigurationError(f"Invalid sample interval: {raw}") from exc
    if value > threading.TIMEOUT_MAX:
        raise ConfigurationError(f"Invalid sample interval: {raw}")
    return value


def parse_policy(
    threshold: Optional[Union[str, float, int]] = None,
    interval: Optional[Union[str, int]] = None,
) -> ThresholdPolicy:
    """
    Build a ThresholdPolicy from raw user input.

    Missing values fall back to the defaults (60 percent, 1 second).
    """
    if threshold is None:
        threshold = DEFAULT_THRESHOLD
    if interval is None:
        interval = DEFAULT_INTERVAL

    return ThresholdPolicy(
        threshold_percent=parse_threshold(threshold),
        sample_interval_seconds=parse_interval(interval),
        threshold_text=str(threshold).strip(),
    )
