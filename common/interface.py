"""
Interface definitions for the host collaborators: pose providers, control surfaces,
command sources and controllers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from common.math import Vector3
from common.types import Attitude, AxisReport, OrientationFrame, PoseSample


class ShipController(ABC):
    """Abstract base for a block that knows the vehicle pose (cockpit, remote control)."""

    name: str = "controller"
    is_main_cockpit: bool = False
    is_under_control: bool = False

    @property
    @abstractmethod
    def frame(self) -> OrientationFrame:
        """World-space orientation of the controller."""

    @abstractmethod
    def natural_gravity(self) -> Vector3:
        """Local gravity vector in world space (zero vector when there is none)."""

    def read(self) -> PoseSample:
        """Sample orientation and gravity together."""
        return PoseSample(frame=self.frame, gravity=self.natural_gravity())


class ControlSurface(ABC):
    """Abstract base for a device exposing named terminal properties."""

    name: str = "surface"

    @abstractmethod
    def property_ids(self) -> Iterable[str]:
        """Ids of every property the device exposes."""

    def property_types(self) -> Dict[str, str]:
        """Map of property id to a type name, used for diagnostics."""
        return {pid: type(self.get_property(pid)).__name__ for pid in self.property_ids()}

    def has_property(self, prop_id: str) -> bool:
        return prop_id in set(self.property_ids())

    @abstractmethod
    def get_property(self, prop_id: str) -> Any:
        """Read a property value."""

    @abstractmethod
    def set_property(self, prop_id: str, value: Any) -> None:
        """Write a property value."""


class CommandSource(ABC):
    """Abstract base for out-of-band textual command input."""

    @abstractmethod
    def poll(self) -> List[str]:
        """Return every command received since the last poll (non-blocking)."""

    def close(self) -> None:
        return None


class Controller(ABC):
    """Abstract base for control algorithms."""

    @abstractmethod
    def update(self, attitude: Attitude, time_step: Optional[float] = None) -> List[AxisReport]:
        """Compute one report per axis for the current attitude."""
