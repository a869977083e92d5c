#!/usr/bin/env python3
"""
Entry point: load configuration, set up the board, and run the attitude hold loop.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from autopilot.attitude import extract_attitude
from autopilot.board import Board
from autopilot.config import AutopilotConfig
from autopilot.control import AttitudeHoldController, PIDController, SetpointStore
from autopilot.input import (
    DISABLE_VERBS,
    ENABLE_VERBS,
    SETPOINT_VERBS,
    Command,
    StdinCommandSource,
    parse_command,
    parse_value,
)
from autopilot.surfaces import SURFACE_GROUPS, TRIM_PROPERTY, apply_trim_multiple
from common.interface import CommandSource, ControlSurface, ShipController
from common.logger import get_logger
from common.math import is_zero
from common.realtime import RateKeeper
from common.types import Axis, AxisReport

logger = get_logger("autopilot")

NO_GRAVITY_MESSAGE = "Error: No gravity reference!"
BAD_POSE_MESSAGE = "Error: Invalid pose sample!"


def init_board(target_name: Optional[str]) -> Board:
    """Instantiate the host board for the named target."""
    target = (target_name or "bench").lower()
    if target == "bench":
        from target.bench import BenchBoard

        return BenchBoard.default()
    raise NotImplementedError(f"Unsupported target '{target}'")


def select_primary(controllers: List[ShipController]) -> Optional[ShipController]:
    """Main cockpit or controlled cockpit, whichever comes first; else the first found."""
    if not controllers:
        return None
    for controller in controllers:
        if controller.is_main_cockpit or controller.is_under_control:
            return controller
    return controllers[0]


class Autopilot:
    """Tick-driven loop: setup() -> tick() per period, handle_command() between ticks."""

    def __init__(self, board: Board, config: AutopilotConfig | None = None):
        self.board = board
        self.config = config or AutopilotConfig()
        self.setpoints = SetpointStore()
        pids = {
            axis: PIDController(gains.kp, gains.ki, gains.kd, self.config.time_step)
            for axis, gains in self.config.gains.items()
        }
        self.controller = AttitudeHoldController(pids, self.setpoints)
        self.enabled = False
        self.primary: Optional[ShipController] = None
        self.surfaces: Dict[Axis, List[ControlSurface]] = {group.axis: [] for group in SURFACE_GROUPS}
        self._initialized = False
        self._last_problem: Optional[str] = None

    # -- Discovery -----------------------------------------------------------

    def setup(self) -> None:
        """Discover devices once, and again after a refresh."""
        if self._initialized:
            return
        self._initialized = True
        self.discover()

    def discover(self) -> None:
        self.primary = select_primary(self.board.find_controllers())
        for devices in self.surfaces.values():
            devices.clear()
        if self.primary is None:
            logger.warning("No ship controller found")
            return
        logger.info(f"Primary controller: {self.primary.name}")

        for group in SURFACE_GROUPS:
            if not self.board.has_group(group.group_name):
                # Later groups stay empty, matching the tick precondition order
                logger.warning(f"Device group '{group.group_name}' not found")
                return
            found = self.board.find_devices_with_capability(group.group_name, TRIM_PROPERTY)
            self.surfaces[group.axis] = list(found)
            logger.info(f"Found {len(found)} {group.kind} in '{group.group_name}'")

    def request_refresh(self) -> None:
        self._initialized = False

    # -- Tick ----------------------------------------------------------------

    def precondition_error(self) -> Optional[str]:
        if self.primary is None:
            return "Error: Could not find a cockpit block!"
        for group in SURFACE_GROUPS:
            if not self.surfaces[group.axis]:
                return f"Error: Could not find any {group.kind}!"
        return None

    def tick(self) -> List[AxisReport]:
        """
        Run one control step. Returns the per-axis reports, or an empty list when
        the step was skipped (missing devices, disabled, or an unusable pose sample).
        """
        self.setup()

        problem = self.precondition_error()
        if problem is not None:
            self._skip(problem)
            return []

        if not self.enabled:
            self._skip("Status: Disabled", warn=False)
            return []

        sample = self.primary.read()
        if not sample.is_finite():
            self._skip(BAD_POSE_MESSAGE)
            return []
        if is_zero(sample.gravity):
            self._skip(NO_GRAVITY_MESSAGE)
            return []

        self._last_problem = None
        self.board.echo("Status: Enabled")

        attitude = extract_attitude(sample)
        reports = self.controller.update(attitude)
        self.publish(reports)
        for report in reports:
            self.board.echo(report.status_line())
        return reports

    def publish(self, reports: List[AxisReport]) -> None:
        """Fan each axis command out to its surface group."""
        commands = {report.axis: report.command for report in reports}
        for group in SURFACE_GROUPS:
            apply_trim_multiple(
                self.surfaces[group.axis],
                commands.get(group.axis, 0.0),
                group.invert_property,
                self.config.trim_limit,
            )

    def _skip(self, message: str, warn: bool = True) -> None:
        self.board.echo(message)
        if warn and message != self._last_problem:
            logger.warning(message)
        self._last_problem = message

    # -- Commands ------------------------------------------------------------

    def handle_command(self, text: str) -> None:
        """Apply one textual command. Malformed or unknown commands are ignored."""
        self.setup()
        command = parse_command(text)
        if command is None:
            return

        verb = command.verb
        if verb in ENABLE_VERBS:
            self.enabled = True
            logger.info("Autopilot enabled")
        elif verb in DISABLE_VERBS:
            self.enabled = False
            self.publish([])
            logger.info("Autopilot disabled")
        elif verb == "refresh":
            self.request_refresh()
            logger.info("Device refresh requested")
        elif verb in SETPOINT_VERBS:
            self.update_setpoint(command)
        elif verb == "debug":
            self.dump_surface_properties()
        else:
            logger.debug(f"Ignoring unknown command '{verb}'")

    def update_setpoint(self, command: Command) -> None:
        name = command.arg(0)
        if not name:
            return

        if command.verb == "reset":
            if name.lower() == "all":
                self.setpoints.reset()
                return
            axis = Axis.parse(name)
            if axis is not None:
                self.setpoints.reset(axis)
            return

        axis = Axis.parse(name)
        value = parse_value(command.arg(1))
        if axis is None or value is None:
            logger.debug(f"Ignoring setpoint command {command.verb} {command.args}")
            return

        if command.verb == "set":
            self.setpoints.set(axis, value)
        elif command.verb == "add":
            self.setpoints.add(axis, value)
        else:
            self.setpoints.subtract(axis, value)
        logger.debug(f"{axis.label} target now {self.setpoints.get(axis)}")

    def dump_surface_properties(self) -> None:
        """Write the property listing of the first elevator to the board's custom data."""
        elevators = self.surfaces[Axis.PITCH]
        if not elevators:
            return
        types = elevators[0].property_types()
        self.board.set_custom_data("".join(f"{pid}:{tname}\n" for pid, tname in types.items()))


def run(autopilot: Autopilot, commands: CommandSource, ticks: int | None = None, rate_keeper: RateKeeper | None = None) -> None:
    """Drain pending commands, tick, keep time; forever unless ``ticks`` is given."""
    rk = rate_keeper or RateKeeper(autopilot.config.time_step)
    count = 0
    while ticks is None or count < ticks:
        try:
            pending = commands.poll()
        except Exception as exc:
            logger.warning(f"Command source poll failed: {exc}")
            pending = []
        for text in pending:
            autopilot.handle_command(text)
        autopilot.tick()
        rk.keep_time()
        count += 1


def main():
    config = AutopilotConfig.from_env()
    board = init_board(config.target)
    logger.info(f"Board initialized ({type(board).__name__}), tick period {config.time_step:.3f}s")
    commands = StdinCommandSource()
    try:
        run(Autopilot(board, config), commands)
    except KeyboardInterrupt:
        logger.info("Stopping autopilot")
    finally:
        commands.close()
        board.close()


if __name__ == "__main__":
    main()
