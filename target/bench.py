"""
In-memory bench board: a static pose and property-backed control surfaces.
Used for dry runs of the loop without a host and as the test double for the autopilot.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional

from common.interface import ControlSurface, ShipController
from common.logger import get_logger
from common.math import Vector3, vec3
from common.types import OrientationFrame
from autopilot.board import Board
from autopilot.surfaces import SURFACE_GROUPS, TRIM_PROPERTY

logger = get_logger("bench")

STANDARD_GRAVITY = 9.81
ECHO_HISTORY = 512


class BenchController(ShipController):
    """Ship controller with a pose that tests and operators set directly."""

    def __init__(
        self,
        name: str = "Cockpit",
        frame: Optional[OrientationFrame] = None,
        gravity=(0.0, -STANDARD_GRAVITY, 0.0),
        is_main_cockpit: bool = False,
        is_under_control: bool = False,
    ):
        self.name = name
        self._frame = frame or OrientationFrame.from_forward_up((0.0, 0.0, -1.0), (0.0, 1.0, 0.0))
        self._gravity = vec3(gravity)
        self.is_main_cockpit = is_main_cockpit
        self.is_under_control = is_under_control

    @property
    def frame(self) -> OrientationFrame:
        return self._frame

    def natural_gravity(self) -> Vector3:
        return self._gravity.copy()

    def set_pose(self, frame: OrientationFrame, gravity=None) -> None:
        self._frame = frame
        if gravity is not None:
            self._gravity = vec3(gravity)


class BenchDevice(ControlSurface):
    """Device backed by a property dictionary."""

    def __init__(self, name: str, properties: Dict[str, Any]):
        self.name = name
        self.properties = dict(properties)
        self.writes: List[Any] = []

    def property_ids(self) -> Iterable[str]:
        return list(self.properties)

    def get_property(self, prop_id: str) -> Any:
        return self.properties[prop_id]

    def set_property(self, prop_id: str, value: Any) -> None:
        if prop_id not in self.properties:
            raise KeyError(f"{self.name} has no property '{prop_id}'")
        self.properties[prop_id] = value
        if prop_id == TRIM_PROPERTY:
            self.writes.append(value)

    @property
    def trim(self) -> float:
        return self.properties[TRIM_PROPERTY]


def make_surface(name: str, invert: bool = False) -> BenchDevice:
    """A control surface exposing trim plus every inversion flag, all set to ``invert``."""
    properties: Dict[str, Any] = {"OnOff": True, TRIM_PROPERTY: 0.0}
    for group in SURFACE_GROUPS:
        properties[group.invert_property] = invert
    return BenchDevice(name, properties)


class BenchBoard(Board):
    """Board whose controllers and device groups are plain Python objects."""

    def __init__(self, controllers: Optional[List[ShipController]] = None, groups: Optional[Dict[str, List[ControlSurface]]] = None):
        self.controllers = list(controllers or [])
        self.groups = dict(groups or {})
        self.echoed: Deque[str] = deque(maxlen=ECHO_HISTORY)
        self.custom_data = ""

    @classmethod
    def default(cls, surfaces_per_group: int = 2) -> "BenchBoard":
        """A level cockpit with every surface group populated, plus one non-surface device."""
        groups: Dict[str, List[ControlSurface]] = {}
        for group in SURFACE_GROUPS:
            groups[group.group_name] = [
                make_surface(f"{group.group_name[:-1]} {i + 1}") for i in range(surfaces_per_group)
            ]
        groups[SURFACE_GROUPS[0].group_name].append(BenchDevice("Light", {"OnOff": True}))
        return cls(controllers=[BenchController(is_main_cockpit=True)], groups=groups)

    def find_controllers(self) -> List[ShipController]:
        return list(self.controllers)

    def has_group(self, group_name: str) -> bool:
        return group_name in self.groups

    def find_devices_with_capability(self, group_name: str, capability: str) -> List[ControlSurface]:
        return [d for d in self.groups.get(group_name, []) if d is not None and d.has_property(capability)]

    def echo(self, text: str) -> None:
        self.echoed.append(text)
        logger.info(text)

    def set_custom_data(self, text: str) -> None:
        self.custom_data = text


__all__ = ["BenchBoard", "BenchController", "BenchDevice", "make_surface"]
