from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

Parity = Literal["none", "even", "odd"]
FlowControl = Literal["none", "rts_cts", "xon_xoff"]

PARITY_OPTIONS: list[str] = ["none", "even", "odd"]
FLOW_CONTROL_OPTIONS: list[str] = ["none", "rts_cts", "xon_xoff"]
BAUD_RATES: list[int] = [9600, 19200, 38400, 57600, 115200]


@dataclass
class SerialConfig:
    """Serial link settings owned by the backend (GET/POST /api/config)."""

    port_name: str = "COM1"
    baud_rate: int = 9600
    data_bits: int = 8
    parity: Parity = "none"
    stop_bits: int = 1
    flow_control: FlowControl = "none"

    def validate(self) -> None:
        """Raise ValueError with the same rules the backend applies."""
        if self.baud_rate <= 0:
            raise ValueError(f"invalid baud rate: {self.baud_rate}")
        if self.data_bits < 5 or self.data_bits > 8:
            raise ValueError(f"invalid data bits: {self.data_bits} (must be 5-8)")
        if self.stop_bits not in (1, 2):
            raise ValueError(f"invalid stop bits: {self.stop_bits} (must be 1 or 2)")
        if self.parity not in PARITY_OPTIONS:
            raise ValueError(f"invalid parity: {self.parity}")
        if self.flow_control not in FLOW_CONTROL_OPTIONS:
            raise ValueError(f"invalid flow control: {self.flow_control}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SerialConfig":
        defaults = cls()
        return cls(
            port_name=str(data.get("port_name") or defaults.port_name),
            baud_rate=int(data.get("baud_rate") or defaults.baud_rate),
            data_bits=int(data.get("data_bits") or defaults.data_bits),
            parity=str(data.get("parity") or defaults.parity),
            stop_bits=int(data.get("stop_bits") or defaults.stop_bits),
            flow_control=str(data.get("flow_control") or defaults.flow_control),
        )
