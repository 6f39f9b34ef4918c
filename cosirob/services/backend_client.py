"""
HTTP client for the Cosirob backend.

The backend owns the serial port: it writes each program line to the device
and returns whatever the device answered. Every protocol round trip goes
through ``send`` or ``send_read_request`` and is recorded in the event log:

- tx before the request, with the exact line
- error on a non-2xx status (body text) or when the backend is unreachable
- info for connection/byte-count details, or the raw body when it is not JSON
- rx with the trimmed device reply

Failures are returned as ``BackendResponse.error`` rather than raised, so
callers can branch on them. The passthrough helpers (program buffer, serial
config, environment discovery) raise ``httpx.HTTPError`` instead.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

import httpx

from cosirob.config import SerialConfig
from cosirob.protocol.commands import CHANNEL_SYSTEM
from cosirob.protocol.types import BackendResponse, ConnectionStatus, ErrorKind
from cosirob.services.event_log import EventLog

logger = logging.getLogger(__name__)

SEND_PATH = "/api/program/send"
READ_POSITION_PATH = "/api/position/read"
PROGRAM_PATH = "/api/program"
CONFIG_PATH = "/api/config"
SYSTEM_OS_PATH = "/api/system/os"
SERIAL_PORTS_PATH = "/api/serial/ports"
HEALTH_PATH = "/api/health"

ConnectionObserver = Callable[[ConnectionStatus], None]


class BackendClient:
    """Async client for the backend RPC contract."""

    def __init__(
        self,
        base_url: str,
        events: EventLog,
        timeout: float | None = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
        on_connection: ConnectionObserver | None = None,
    ) -> None:
        self.base_url = base_url
        self.events = events
        self.timeout = timeout
        self.on_connection = on_connection
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    # ---- lifecycle ----

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None and not self._http.is_closed:
            await self._http.aclose()
        self._http = None

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- protocol round trips ----

    async def send(self, command_line: str) -> BackendResponse:
        """Send one command line (or program buffer) to the device."""
        self.events.tx(command_line)
        return await self._post_protocol(SEND_PATH, {"program": command_line})

    async def send_read_request(self, slot: int) -> BackendResponse:
        """Ask the backend to read a stored position slot (rd on channel 00)."""
        self.events.tx(f"{CHANNEL_SYSTEM} rd {slot}")
        return await self._post_protocol(READ_POSITION_PATH, {"slot": slot})

    async def _post_protocol(self, path: str, body: dict[str, Any]) -> BackendResponse:
        try:
            res = await self.http.post(path, json=body)
        except httpx.RequestError as e:
            message = str(e) or type(e).__name__
            self.events.error(f"Network error: {message}")
            logger.warning("Backend unreachable at %s%s: %s", self.base_url, path, message)
            self._notify_connection(None, False)
            return BackendResponse.failure(ErrorKind.UNREACHABLE, message)

        if not res.is_success:
            text = res.text
            self.events.error(f"Send failed: {text}")
            logger.warning("Backend rejected %s (%s): %s", path, res.status_code, text)
            self._notify_connection(None, False)
            return BackendResponse.failure(ErrorKind.REJECTED, text, res.status_code)

        try:
            data = res.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            text = res.text
            self.events.info(f"Backend response: {text}")
            return BackendResponse(raw_text=text)

        if not isinstance(data, dict):
            self.events.info(f"Backend response: {res.text}")
            return BackendResponse(raw_text=res.text)

        return self._interpret(data)

    def _interpret(self, data: dict[str, Any]) -> BackendResponse:
        port = data.get("serial_port") or None
        written = data.get("serial_written")
        reply = data.get("serial_reply")

        if port:
            self.events.info(f"Connected to {port}")
            self._notify_connection(str(port), True)
        if written:
            self.events.info(f"Sent {written} bytes")
        if reply:
            reply = str(reply).strip()
            self.events.rx(reply)

        return BackendResponse(
            serial_port=str(port) if port else None,
            serial_written=int(written) if isinstance(written, (int, float)) else None,
            serial_reply=reply or None,
        )

    def _notify_connection(self, port: str | None, connected: bool) -> None:
        if self.on_connection is None:
            return
        try:
            self.on_connection(ConnectionStatus(port=port, connected=connected))
        except Exception as e:
            logger.error("Connection observer failed: %s", e)

    # ---- passthrough endpoints ----

    async def get_program(self) -> str:
        res = await self.http.get(PROGRAM_PATH)
        res.raise_for_status()
        program = res.json().get("program") or ""
        self.events.info("Loaded program from backend")
        return program

    async def save_program(self, program: str) -> None:
        res = await self.http.post(PROGRAM_PATH, json={"program": program})
        res.raise_for_status()
        self.events.info("Program saved to backend")

    async def get_config(self) -> SerialConfig:
        res = await self.http.get(CONFIG_PATH)
        res.raise_for_status()
        return SerialConfig.from_dict(res.json())

    async def update_config(self, cfg: SerialConfig) -> None:
        cfg.validate()
        res = await self.http.post(CONFIG_PATH, json=cfg.to_dict())
        res.raise_for_status()
        logger.info("Serial config updated: %s", cfg)

    async def get_system_os(self) -> str:
        res = await self.http.get(SYSTEM_OS_PATH)
        res.raise_for_status()
        return str(res.json().get("os", ""))

    async def list_serial_ports(self) -> list[str]:
        res = await self.http.get(SERIAL_PORTS_PATH)
        res.raise_for_status()
        return [str(p) for p in res.json().get("ports") or []]

    async def health(self) -> bool:
        try:
            res = await self.http.get(HEALTH_PATH)
        except httpx.RequestError:
            return False
        return res.is_success
