"""
Control surface groups and trim dispatch.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from common.interface import ControlSurface
from common.types import Axis

TRIM_PROPERTY = "Draygo.ControlSurface.Trim"
TRIM_LIMIT = 44.0


@dataclass(frozen=True)
class SurfaceGroup:
    """A named device group driven by one axis, with its per-device inversion flag."""

    axis: Axis
    group_name: str
    invert_property: str
    kind: str


SURFACE_GROUPS = (
    SurfaceGroup(Axis.PITCH, "Elevators", "Draygo.ControlSurface.InvertPitch", "elevators"),
    # Roll surfaces expose a plain "Invert" flag rather than "InvertRoll"
    SurfaceGroup(Axis.ROLL, "Ailerons", "Draygo.ControlSurface.Invert", "ailerons"),
    SurfaceGroup(Axis.BEARING, "Rudders", "Draygo.ControlSurface.InvertYaw", "rudders"),
)


def map_trim(command: float, invert: bool, limit: float = TRIM_LIMIT) -> Optional[float]:
    """
    Clamp a control value to [-limit, limit] and apply inversion.
    Returns None for NaN/Infinity, which must never be written.
    """
    if math.isnan(command) or math.isinf(command):
        return None
    trim = max(-limit, min(limit, float(command)))
    if trim != 0 and invert:
        trim = -trim
    return trim


def apply_trim(surface: ControlSurface, command: float, invert_property: str, limit: float = TRIM_LIMIT) -> Optional[float]:
    """
    Write a trim command to one surface. The inversion flag is read from the
    device only when the command is non-zero. Returns the value written, if any.
    """
    trim = map_trim(command, False, limit)
    if trim is None:
        return None
    if trim != 0 and surface.get_property(invert_property):
        trim = -trim
    surface.set_property(TRIM_PROPERTY, trim)
    return trim


def apply_trim_multiple(surfaces: Iterable[ControlSurface], command: float, invert_property: str, limit: float = TRIM_LIMIT) -> None:
    """Fan the same command out to every surface of a group."""
    for surface in surfaces:
        apply_trim(surface, command, invert_property, limit)


__all__ = [
    "SurfaceGroup",
    "SURFACE_GROUPS",
    "TRIM_PROPERTY",
    "TRIM_LIMIT",
    "map_trim",
    "apply_trim",
    "apply_trim_multiple",
]
