"""
Vector primitives used to derive attitude scalars from 3D vectors.
All functions are pure and operate on numpy arrays of shape (3,).
"""

from __future__ import annotations

import math
from typing import Iterable, Union

import numpy as np

Vector3 = np.ndarray
VectorLike = Union[Vector3, Iterable[float]]

UNIT_EPSILON = 1e-6

# Local axes: +X right, +Y up, +Z backward
RIGHT = np.array([1.0, 0.0, 0.0])
UP = np.array([0.0, 1.0, 0.0])
BACKWARD = np.array([0.0, 0.0, 1.0])
FORWARD = -BACKWARD
DOWN = -UP
ZERO = np.zeros(3)


def vec3(*components) -> Vector3:
    """
    Build a finite 3-vector from three scalars or a single iterable.
    Raises ValueError for wrong shapes or NaN/Infinity components.
    """
    if len(components) == 1:
        components = tuple(components[0])
    v = np.asarray(components, dtype=float)
    if v.shape != (3,):
        raise ValueError(f"expected 3 components, got shape {v.shape}")
    if not np.all(np.isfinite(v)):
        raise ValueError(f"vector has non-finite components: {v.tolist()}")
    return v


def is_zero(v: Vector3) -> bool:
    return not np.any(v)


def is_unit(v: Vector3) -> bool:
    return abs(1.0 - float(np.dot(v, v))) < UNIT_EPSILON


def cos_between(a: Vector3, b: Vector3) -> float:
    """Cosine of the angle between a and b, clamped to [-1, 1]."""
    if is_zero(a) or is_zero(b):
        return 0.0
    cos = float(np.dot(a, b)) / math.sqrt(float(np.dot(a, a)) * float(np.dot(b, b)))
    return min(1.0, max(-1.0, cos))


def angle_between(a: Vector3, b: Vector3) -> float:
    """Angle between a and b in radians, 0 if either is the zero vector."""
    if is_zero(a) or is_zero(b):
        return 0.0
    return math.acos(cos_between(a, b))


def projection(a: Vector3, b: Vector3) -> Vector3:
    """Project a onto b."""
    if is_zero(a) or is_zero(b):
        return ZERO.copy()
    if is_unit(b):
        return float(np.dot(a, b)) * b
    return float(np.dot(a, b)) / float(np.dot(b, b)) * b


def rejection(a: Vector3, b: Vector3) -> Vector3:
    """Component of a orthogonal to b."""
    if is_zero(a) or is_zero(b):
        return ZERO.copy()
    return a - projection(a, b)


def scalar_projection(a: Vector3, b: Vector3) -> float:
    """Signed length of the projection of a onto b."""
    if is_zero(a) or is_zero(b):
        return 0.0
    if is_unit(b):
        return float(np.dot(a, b))
    return float(np.dot(a, b)) / float(np.linalg.norm(b))


def wrap_degrees(angle: float) -> float:
    """Wrap an angle in degrees into [-180, 180)."""
    return angle - 360.0 * math.floor((angle + 180.0) / 360.0)


__all__ = [
    "Vector3",
    "vec3",
    "is_zero",
    "is_unit",
    "cos_between",
    "angle_between",
    "projection",
    "rejection",
    "scalar_projection",
    "wrap_degrees",
    "RIGHT",
    "UP",
    "BACKWARD",
    "FORWARD",
    "DOWN",
    "ZERO",
]
