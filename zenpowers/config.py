from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Optional

TIMEOUT_ENV_VAR = "ZENPOWERS_WAIT_TIMEOUT"
POLL_INTERVAL_ENV_VAR = "ZENPOWERS_POLL_INTERVAL"
TIMEOUT_SCALE_ENV_VAR = "ZENPOWERS_WAIT_TIMEOUT_SCALE"

DEFAULT_TIMEOUT = 5.0
DEFAULT_POLL_INTERVAL = 0.01


@dataclass(frozen=True)
class WaitDefaults:
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout_scale: float = 1.0

    def resolve_timeout(self, requested: Optional[float]) -> float:
        """Apply the default and the environment-wide scale to a timeout."""
        base = self.timeout if requested is None else requested
        return base * self.timeout_scale

    def resolve_poll_interval(self, requested: Optional[float]) -> float:
        return self.poll_interval if requested is None else requested


def _read_float(name: str, fallback: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return fallback
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {raw!r}")
    return value


def load_wait_defaults() -> WaitDefaults:
    """Build wait defaults from the environment, falling back to built-ins."""
    timeout = _read_float(TIMEOUT_ENV_VAR, DEFAULT_TIMEOUT)
    poll_interval = _read_float(POLL_INTERVAL_ENV_VAR, DEFAULT_POLL_INTERVAL)
    scale = _read_float(TIMEOUT_SCALE_ENV_VAR, 1.0)
    if scale <= 0:
        raise ValueError(f"{TIMEOUT_SCALE_ENV_VAR} must be positive, got {scale}")
    return WaitDefaults(
        timeout=timeout,
        poll_interval=poll_interval,
        timeout_scale=scale,
    )
