"""Attitude extraction: pitch, roll and bearing from an orientation frame and gravity."""

from __future__ import annotations

import math

import numpy as np

from common.math import DOWN, RIGHT, UP, Vector3, angle_between, rejection
from common.types import Attitude, OrientationFrame, PoseSample

# Bearings this close under 360 read as due north
BEARING_SNAP_DEG = 359.5


def _sign(x: float) -> float:
    return float(np.sign(x))


def _degrees(radians: float) -> float:
    # Adding 0.0 turns -0.0 into 0.0 for status output
    return round(math.degrees(radians), 2) + 0.0


def get_pitch(frame: OrientationFrame, gravity: Vector3) -> float:
    """Angle of the nose above (+) or below (-) the horizon, in degrees."""
    forward = frame.forward
    up = -gravity
    left = np.cross(up, forward)
    leveled_forward = np.cross(left, up)

    pitch = angle_between(leveled_forward, forward) * _sign(np.dot(up, forward))
    return _degrees(pitch)


def get_roll(frame: OrientationFrame, gravity: Vector3) -> float:
    """
    Bank angle in degrees.

    World up is expressed in the vehicle's local axes and its local
    forward/backward component dropped; the roll is the angle of what is
    left against local up, positive when world up leans towards local right.
    """
    local_up = frame.to_local(-gravity)
    flattened_up = np.array([local_up[0], local_up[1], 0.0])

    roll = angle_between(flattened_up, UP) * _sign(np.dot(RIGHT, flattened_up))
    return _degrees(roll)


def get_bearing(frame: OrientationFrame, gravity: Vector3) -> float:
    """Compass bearing of the nose in [0, 360) degrees, clockwise from north."""
    forward = frame.forward
    east = np.cross(gravity, DOWN)
    north = np.cross(east, gravity)
    heading = rejection(forward, gravity)

    bearing = math.degrees(angle_between(heading, north))
    if np.dot(forward, east) < 0:
        bearing = 360.0 - bearing

    if bearing >= BEARING_SNAP_DEG:
        bearing = 0.0

    return round(bearing, 2)


def extract_attitude(sample: PoseSample) -> Attitude:
    """
    Read pitch, roll and bearing from one pose sample.
    A zero gravity vector yields defined but meaningless angles.
    """
    return Attitude(
        pitch=get_pitch(sample.frame, sample.gravity),
        roll=get_roll(sample.frame, sample.gravity),
        bearing=get_bearing(sample.frame, sample.gravity),
    )


__all__ = ["get_pitch", "get_roll", "get_bearing", "extract_attitude"]
