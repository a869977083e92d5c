"""Run-time configuration for the autopilot, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from common.types import Axis

DEFAULT_TIME_STEP = 10.0 / 60.0  # one tick every 10 host frames at 60 Hz


@dataclass(frozen=True)
class PIDGains:
    kp: float = 5.0
    ki: float = 0.0
    kd: float = 0.0


def _default_gains() -> Dict[Axis, PIDGains]:
    return {axis: PIDGains() for axis in Axis}


@dataclass(frozen=True)
class AutopilotConfig:
    time_step: float = DEFAULT_TIME_STEP
    gains: Mapping[Axis, PIDGains] = field(default_factory=_default_gains)
    trim_limit: float = 44.0
    target: str = "bench"

    def __post_init__(self):
        if not self.time_step > 0.0:
            raise ValueError(f"time_step must be positive, got {self.time_step}")
        if not self.trim_limit > 0.0:
            raise ValueError(f"trim_limit must be positive, got {self.trim_limit}")
        missing = [axis.value for axis in Axis if axis not in self.gains]
        if missing:
            raise ValueError(f"missing gains for: {', '.join(missing)}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AutopilotConfig":
        """
        Build a config from AUTOPILOT_* variables:
        AUTOPILOT_TARGET, AUTOPILOT_TIME_STEP, AUTOPILOT_KP/KI/KD (shared by all axes).
        """
        env = os.environ if environ is None else environ
        defaults = PIDGains()
        gains = PIDGains(
            kp=_float(env, "AUTOPILOT_KP", defaults.kp),
            ki=_float(env, "AUTOPILOT_KI", defaults.ki),
            kd=_float(env, "AUTOPILOT_KD", defaults.kd),
        )
        return cls(
            time_step=_float(env, "AUTOPILOT_TIME_STEP", DEFAULT_TIME_STEP),
            gains={axis: gains for axis in Axis},
            target=(env.get("AUTOPILOT_TARGET") or "bench").lower(),
        )


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None
