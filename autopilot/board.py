"""
Board interface defining the abstraction between the autopilot and its host.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from common.interface import ControlSurface, ShipController


class Board(ABC):
    """
    Abstract interface that every host target must implement.
    The board enumerates pose providers and devices and receives status output.
    The autopilot talks only to this interface.
    """

    @abstractmethod
    def find_controllers(self) -> List[ShipController]:
        """Every ship controller on the vehicle, in discovery order."""

    @abstractmethod
    def find_devices_with_capability(self, group_name: str, capability: str) -> List[ControlSurface]:
        """
        Devices of the named group exposing ``capability``.
        Returns an empty list when the group does not exist.
        """

    @abstractmethod
    def has_group(self, group_name: str) -> bool:
        """Whether a device group with this name exists."""

    @abstractmethod
    def echo(self, text: str) -> None:
        """Show a status line to the operator."""

    def set_custom_data(self, text: str) -> None:
        """Optional hook for diagnostic dumps."""
        return None

    def close(self) -> None:
        """Optional cleanup hook."""
        return None
