from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from cosirob.protocol.catalog import CommandCatalog
from cosirob.protocol.commands import CommandEncoder
from cosirob.protocol.position import (
    Pose,
    PoseTracker,
    apply_optimistic,
    home_or_zero,
    move_command,
    pose_from_reply,
)
from cosirob.protocol.types import Axis, BackendResponse
from cosirob.services.backend_client import BackendClient
from cosirob.services.event_log import EventLog

logger = logging.getLogger(__name__)

PoseObserver = Callable[[PoseTracker], None]


class RobotSession:
    """
    One operator driving one device through the backend.

    Encodes intent, sends it, and reconciles the tracked pose with whatever
    the device replies. Concurrent moves are not serialized: the last pose
    written wins.
    """

    def __init__(
        self,
        client: BackendClient,
        encoder: CommandEncoder,
        events: EventLog,
        tracker: PoseTracker | None = None,
        channel: str = "00",
        read_slot: int = 1,
        auto_read_after_move: bool = True,
    ) -> None:
        self.client = client
        self.encoder = encoder
        self.events = events
        self.tracker = tracker or PoseTracker()
        self.channel = channel
        self.read_slot = read_slot
        self.auto_read_after_move = auto_read_after_move
        self._pose_observers: list[PoseObserver] = []

    @property
    def catalog(self) -> CommandCatalog:
        return self.encoder.catalog

    @property
    def pose(self) -> Pose:
        return self.tracker.current

    def on_pose_change(self, observer: PoseObserver) -> None:
        self._pose_observers.append(observer)

    # ---- sending ----

    async def send_line(self, line: str) -> BackendResponse:
        res = await self.client.send(line)
        self._reconcile(res)
        return res

    async def send_command(
        self, code: str, parameters: Sequence[str] = (), channel: str | None = None
    ) -> BackendResponse:
        """Compose a catalog command and send it. Raises ValidationError on bad input."""
        cmd = self.encoder.compose(code, channel or self.channel, parameters)
        return await self.send_line(cmd.line)

    async def send_raw(self, text: str) -> BackendResponse:
        """Send a free-form line; a missing channel prefix only warns."""
        line = text.strip()
        self.encoder.check_raw(line)
        return await self.send_line(line)

    async def send_program(self, program: str) -> BackendResponse:
        """Send a multi-line program buffer as one request."""
        for line in program.splitlines():
            if line.strip():
                self.encoder.check_raw(line.strip())
        return await self.send_line(program)

    # ---- motion ----

    async def step(self, axis: Axis, delta: float) -> BackendResponse:
        target = apply_optimistic(self.tracker.current, axis, delta)
        res = await self._move(target)
        if res.ok and self.auto_read_after_move:
            await self.read_position(self.read_slot)
        return res

    async def go_to(self, x: float, y: float, z: float) -> BackendResponse:
        return await self._move(Pose(x, y, z))

    async def go_home(self) -> BackendResponse:
        """Home via the catalog's home command, or zero each axis in turn."""
        res = BackendResponse()
        for cmd, expected in home_or_zero(self.catalog, self.channel, self.tracker.current):
            self._propose(expected)
            res = await self.send_line(cmd.line)
            if not res.ok:
                logger.warning("Homing stopped at %r: %s", cmd.line, res.error)
                break
        return res

    async def read_position(self, slot: int) -> BackendResponse:
        res = await self.client.send_read_request(slot)
        self._reconcile(res)
        return res

    async def _move(self, target: Pose) -> BackendResponse:
        self._propose(target)
        return await self.send_line(move_command(target, self.channel).line)

    # ---- pose bookkeeping ----

    def _propose(self, pose: Pose) -> None:
        self.tracker.propose(pose)
        self._notify_pose()

    def _reconcile(self, res: BackendResponse) -> None:
        if not res.ok or not res.serial_reply:
            return
        pose = pose_from_reply(res.serial_reply)
        if pose is None:
            return
        self.tracker.confirm(pose)
        self._notify_pose()

    def _notify_pose(self) -> None:
        for observer in list(self._pose_observers):
            try:
                observer(self.tracker)
            except Exception as e:
                logger.error("Pose observer failed: %s", e)
