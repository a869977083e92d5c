"""
Control module: discrete-time PID and the per-axis attitude hold loop.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Optional

from common.interface import Controller
from common.math import wrap_degrees
from common.types import Attitude, Axis, AxisReport


class PIDController:
    """
    Discrete-time PID controller with a fixed (or caller-updated) time step.
    Accepts pre-computed error; does not handle setpoints or angle wrapping.
    """

    def __init__(self, kp: float, ki: float, kd: float, time_step: float):
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self._time_step = 0.0
        self._inverse_time_step = 0.0
        self.time_step = time_step
        self._error_sum = 0.0
        self._last_error = 0.0
        self._first_run = True
        self._value = 0.0

    @property
    def time_step(self) -> float:
        return self._time_step

    @time_step.setter
    def time_step(self, time_step: float) -> None:
        if not time_step > 0.0:
            raise ValueError(f"time_step must be positive, got {time_step}")
        self._time_step = float(time_step)
        self._inverse_time_step = 1.0 / self._time_step

    @property
    def value(self) -> float:
        """Output of the most recent control() call."""
        return self._value

    @property
    def integral(self) -> float:
        return self._error_sum

    def integral_step(self, error, error_sum, time_step):
        """Rectangular sum, no clamping."""
        return error_sum + error * time_step

    def control(self, error: float, time_step: Optional[float] = None) -> float:
        """
        Compute the control signal for ``error``.
        If ``time_step`` differs from the stored one it replaces it first.
        """
        if time_step is not None and time_step != self._time_step:
            self.time_step = time_step

        derivative = (error - self._last_error) * self._inverse_time_step
        if self._first_run:
            # No history yet: suppress the spike a stale last error would cause
            derivative = 0.0
            self._first_run = False

        self._error_sum = self.integral_step(error, self._error_sum, self._time_step)
        self._last_error = error

        self._value = self.kp * error + self.ki * self._error_sum + self.kd * derivative
        return self._value

    def reset(self) -> None:
        """Clear integral and derivative history; gains and time step are kept."""
        self._error_sum = 0.0
        self._last_error = 0.0
        self._first_run = True


class SetpointStore:
    """
    Optional per-axis targets in degrees. An absent target means the axis is not held.
    Offsets applied to an absent target start from zero.
    """

    def __init__(self):
        self._targets: Dict[Axis, Optional[float]] = {axis: None for axis in Axis}

    def get(self, axis: Axis) -> Optional[float]:
        return self._targets[axis]

    def set(self, axis: Axis, value: Optional[float]) -> None:
        self._targets[axis] = None if value is None else float(value)

    def add(self, axis: Axis, offset: float) -> None:
        current = self._targets[axis]
        self._targets[axis] = float(offset) if current is None else current + offset

    def subtract(self, axis, offset):
        self.add(axis, -offset)

    def reset(self, axis: Optional[Axis] = None) -> None:
        """Clear one axis, or every axis when ``axis`` is None."""
        axes = list(Axis) if axis is None else [axis]
        for a in axes:
            self._targets[a] = None

    def snapshot(self):
        return MappingProxyType(dict(self._targets))


def bearing_error(desired, current):
    """Wrapped into [-180, 180)."""
    return wrap_degrees(desired - current)


class AttitudeHoldController(Controller):
    """
    Runs one PIDController per axis against the setpoint store.
    Pitch and roll PIDs take the raw error; the bearing PID takes the negated wrapped error.
    Unheld axes command zero and leave their PID untouched.
    """

    def __init__(self, pids, setpoints):
        missing = [axis.value for axis in Axis if axis not in pids]
        if missing:
            raise ValueError(f"missing PID controllers for: {', '.join(missing)}")
        self.pids = MappingProxyType({axis: pids[axis] for axis in Axis})
        self.setpoints = setpoints

    def axis_error(self, axis, desired, current):
        if axis is Axis.BEARING:
            return -bearing_error(desired, current)
        return desired - current

    def update(self, attitude: Attitude, time_step: Optional[float] = None) -> List[AxisReport]:
        targets = self.setpoints.snapshot()
        reports = []
        for axis in Axis:
            current = attitude[axis]
            target = targets[axis]
            command = 0.0
            if target is not None:
                command = self.pids[axis].control(self.axis_error(axis, target, current), time_step)
            reports.append(AxisReport(axis=axis, current=current, target=target, command=command))
        return reports
