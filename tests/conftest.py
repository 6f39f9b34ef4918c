from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx
import pytest

# Constants are read at import time, so point the webapp at an address nothing
# listens on before any cosirob module loads
os.environ.setdefault("COSIROB_BACKEND_URL", "http://127.0.0.1:9")
os.environ.setdefault("COSIROB_LOG_LEVEL", "WARNING")

from cosirob.protocol.catalog import CommandCatalog, load_catalog
from cosirob.protocol.commands import CommandEncoder
from cosirob.services.backend_client import BackendClient
from cosirob.services.event_log import EventLog
from cosirob.services.session import RobotSession

pytest_plugins = ["nicegui.testing.user_plugin"]


if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class FakeBackend:
    """
    Scripted stand-in for the serial backend behind an httpx.MockTransport.

    Each queued reply is (status, body); dict bodies are sent as JSON, str
    bodies as plain text, and an Exception instance is raised as a transport
    failure. When the queue is empty a bare {"serial_written": n} is returned.
    """

    replies: list[tuple[int, Any] | Exception] = field(default_factory=list)
    requests: list[tuple[str, str, Any]] = field(default_factory=list)

    def reply(self, status: int = 200, body: Any = None) -> FakeBackend:
        self.replies.append((status, body if body is not None else {}))
        return self

    def fail(self, exc: Exception) -> FakeBackend:
        self.replies.append(exc)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, body))
        if not self.replies:
            program = (body or {}).get("program", "")
            return httpx.Response(200, json={"serial_written": len(program)})
        item = self.replies.pop(0)
        if isinstance(item, Exception):
            raise item
        status, payload = item
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    @property
    def sent_programs(self) -> list[str]:
        return [b["program"] for _, path, b in self.requests if path == "/api/program/send"]


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture(scope="session")
def catalog() -> CommandCatalog:
    return load_catalog()


@pytest.fixture
def encoder(catalog: CommandCatalog, events: EventLog) -> CommandEncoder:
    return CommandEncoder(catalog, events)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_client(events: EventLog) -> Callable[..., BackendClient]:
    def _make(fake: FakeBackend, **kwargs: Any) -> BackendClient:
        return BackendClient(
            "http://backend.test",
            events,
            transport=httpx.MockTransport(fake.handler),
            **kwargs,
        )

    return _make


@pytest.fixture
async def session(
    backend: FakeBackend,
    make_client: Callable[..., BackendClient],
    encoder: CommandEncoder,
    events: EventLog,
):
    client = make_client(backend)
    async with client:
        yield RobotSession(client, encoder, events, auto_read_after_move=False)

