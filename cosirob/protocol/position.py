from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .catalog import CommandCatalog
from .parsing import extract_triple, format_coord, round_coord
from .types import Axis, ComposedCommand

logger = logging.getLogger(__name__)

MOVE_CODE = "mv"
HOME_CODE = "ho"
AXES: tuple[Axis, ...] = ("x", "y", "z")


@dataclass(slots=True, frozen=True)
class Pose:
    """Cartesian position in mm, rounded on construction."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", round_coord(self.x))
        object.__setattr__(self, "y", round_coord(self.y))
        object.__setattr__(self, "z", round_coord(self.z))

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


ORIGIN = Pose()


def pose_from_reply(text: str) -> Pose | None:
    triple = extract_triple(text)
    return Pose(*triple) if triple else None


def apply_optimistic(pose: Pose, axis: Axis, delta: float) -> Pose:
    """New pose with one axis incremented by delta (rounded)."""
    if axis not in AXES:
        raise ValueError(f"Unknown axis: {axis!r}")
    return replace(pose, **{axis: getattr(pose, axis) + delta})


def move_command(pose: Pose, channel: str) -> ComposedCommand:
    """Absolute move; orientation is not tracked so rx/ry/rz are always 0."""
    params = tuple(format_coord(v) for v in pose.as_tuple()) + ("0", "0", "0")
    return ComposedCommand(channel=channel, code=MOVE_CODE, parameters=params)


def to_move_command(pose: Pose, channel: str) -> str:
    return move_command(pose, channel).line


def home_or_zero(
    catalog: CommandCatalog, channel: str, pose: Pose
) -> list[tuple[ComposedCommand, Pose]]:
    """
    Steps that bring the robot to the origin, each paired with the pose
    expected once it completes.

    Uses the catalog's home command when defined, otherwise three absolute
    moves zeroing x, then y, then z.
    """
    if HOME_CODE in catalog:
        return [(ComposedCommand(channel=channel, code=catalog.mnemonic(HOME_CODE)), ORIGIN)]

    steps: list[tuple[ComposedCommand, Pose]] = []
    current = pose
    for axis in AXES:
        current = apply_optimistic(current, axis, -getattr(current, axis))
        steps.append((move_command(current, channel), current))
    return steps


class PoseTracker:
    """
    Two-phase pose: an optimistic proposal and the last confirmed value.

    A proposal is made before a move is acknowledged so the UI stays
    responsive; a parsed device reply confirms and clears it. While a
    proposal is outstanding ``pending`` is True, which shows when a reply
    never arrived or carried no coordinates.
    """

    def __init__(self, initial: Pose = ORIGIN) -> None:
        self.confirmed: Pose = initial
        self.proposed: Pose | None = None

    @property
    def current(self) -> Pose:
        return self.proposed if self.proposed is not None else self.confirmed

    @property
    def pending(self) -> bool:
        return self.proposed is not None

    @property
    def diverged(self) -> bool:
        return self.proposed is not None and self.proposed != self.confirmed

    def propose(self, pose: Pose) -> Pose:
        self.proposed = pose
        return pose

    def confirm(self, pose: Pose) -> Pose:
        if self.proposed is not None and self.proposed != pose:
            logger.info(
                "Device pose %s differs from proposed %s",
                pose.as_tuple(),
                self.proposed.as_tuple(),
            )
        self.confirmed = pose
        self.proposed = None
        return pose

    def reset(self, pose: Pose = ORIGIN) -> None:
        self.confirmed = pose
        self.proposed = None
