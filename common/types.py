"""
Shared data structures for autopilot ↔ board ↔ host boundaries.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

import numpy as np

from common.math import Vector3, vec3


class Axis(enum.Enum):
    """Controlled attitude axes. The set is closed."""

    PITCH = "pitch"
    ROLL = "roll"
    BEARING = "bearing"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, name: str) -> Optional["Axis"]:
        """Case-insensitive lookup; returns None for unknown names."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True, eq=False)
class OrientationFrame:
    """
    Vehicle pose in world space at one instant.

    ``matrix`` rows are the world-space right, up and backward axes of the
    vehicle (local +X right, +Y up, +Z backward).
    """

    matrix: np.ndarray

    @classmethod
    def from_forward_up(cls, forward, up) -> "OrientationFrame":
        """Build an orthonormal frame from forward and (approximate) up vectors."""
        f = vec3(forward)
        u = vec3(up)
        f = f / np.linalg.norm(f)
        right = np.cross(f, u)
        norm = np.linalg.norm(right)
        if norm == 0.0:
            raise ValueError("forward and up must not be parallel")
        right = right / norm
        u = np.cross(right, f)
        return cls(np.vstack([right, u, -f]))

    @classmethod
    def from_rotation(cls, rotation: np.ndarray) -> "OrientationFrame":
        """Frame of a body rotated by ``rotation`` (3x3, body → world)."""
        m = np.asarray(rotation, dtype=float)
        if m.shape != (3, 3):
            raise ValueError(f"expected a 3x3 rotation, got shape {m.shape}")
        if not np.all(np.isfinite(m)):
            raise ValueError("rotation has non-finite entries")
        return cls(m.T.copy())

    @property
    def right(self) -> Vector3:
        return self.matrix[0]

    @property
    def up(self) -> Vector3:
        return self.matrix[1]

    @property
    def backward(self) -> Vector3:
        return self.matrix[2]

    @property
    def forward(self) -> Vector3:
        return -self.matrix[2]

    def to_local(self, v: Vector3) -> Vector3:
        """Express a world-space direction in the vehicle's local axes."""
        return self.matrix @ v


@dataclass(frozen=True, eq=False)
class PoseSample:
    """One orientation + gravity sample consumed per tick."""

    frame: OrientationFrame
    gravity: Vector3

    def is_finite(self) -> bool:
        """False when gravity or the frame carries NaN or infinite components."""
        return bool(np.isfinite(self.gravity).all() and np.isfinite(self.frame.matrix).all())


@dataclass(frozen=True)
class Attitude:
    """Pitch, roll and bearing in degrees."""

    pitch: float
    roll: float
    bearing: float

    def __getitem__(self, axis: Axis) -> float:
        return getattr(self, axis.value)


@dataclass(frozen=True)
class AxisReport:
    """Per-axis outcome of one tick, rendered as a status line."""

    axis: Axis
    current: float
    target: Optional[float]
    command: float

    def status_line(self) -> str:
        target = "" if self.target is None else self.target
        return f"{self.axis.label}: C:{self.current} T:{target} PID:{self.command}"
