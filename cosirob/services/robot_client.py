from __future__ import annotations

from cosirob.constants import BACKEND_TIMEOUT_S, BACKEND_URL, DEFAULT_CHANNEL, DEFAULT_READ_SLOT
from cosirob.protocol.catalog import load_catalog
from cosirob.protocol.commands import CommandEncoder
from cosirob.protocol.types import ConnectionStatus
from cosirob.services.backend_client import BackendClient
from cosirob.services.event_log import EventLog
from cosirob.services.session import RobotSession
from cosirob.state import connection_state, mirror_pose


def _on_connection(status: ConnectionStatus) -> None:
    connection_state.connected = status.connected
    if status.port:
        connection_state.port_name = status.port


# Shared instances, injected into every page that emits or observes traffic
event_log = EventLog()
catalog = load_catalog()
encoder = CommandEncoder(catalog, event_log)
client = BackendClient(
    BACKEND_URL, event_log, timeout=BACKEND_TIMEOUT_S, on_connection=_on_connection
)
session = RobotSession(
    client, encoder, event_log, channel=DEFAULT_CHANNEL, read_slot=DEFAULT_READ_SLOT
)
session.on_pose_change(mirror_pose)
