from __future__ import annotations

from nicegui import binding

from cosirob.protocol.position import PoseTracker


# Shared state singletons for cross-page UI bindings
@binding.bindable_dataclass
class RobotState:
    x: float = 0.0  # mm
    y: float = 0.0  # mm
    z: float = 0.0  # mm
    pending: bool = False  # optimistic pose not yet confirmed by the device
    confirmed_x: float = 0.0
    confirmed_y: float = 0.0
    confirmed_z: float = 0.0


@binding.bindable_dataclass
class ConnectionState:
    connected: bool = False
    port_name: str = ""


def mirror_pose(tracker: PoseTracker) -> None:
    """Copy tracked pose into the bindable robot_state."""
    cur = tracker.current
    robot_state.x, robot_state.y, robot_state.z = cur.as_tuple()
    conf = tracker.confirmed
    robot_state.confirmed_x, robot_state.confirmed_y, robot_state.confirmed_z = conf.as_tuple()
    robot_state.pending = tracker.pending


# Module-level singletons
robot_state = RobotState()
connection_state = ConnectionState()
