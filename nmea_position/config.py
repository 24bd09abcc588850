"""
config.py

Receiver configuration: which port to open, how to talk to it, and how the
decode loop behaves.  Can be loaded from and saved to YAML files.

Example YAML::

    receiver:
      port: /dev/ttyS0
      baudrate: 9600
      bytesize: 8
      timeout: null
      talker_id: GP
      poll_interval: 1.0
      max_transport_failures: null
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

_VALID_BYTESIZES = (5, 6, 7, 8)


@dataclass
class ReceiverConfig:
    """Settings for a GPS receiver and the position decode loop.

    Attributes:
        port: Serial device path or any pyserial URL (e.g. ``"loop://"``).
        baudrate: Line speed in baud.
        bytesize: Data bits per character (5–8).
        timeout: Read timeout in seconds; ``None`` blocks indefinitely.
        talker_id: Two-character talker ID of the position sentence.
        poll_interval: Seconds between readings in the driver loop.
        max_transport_failures: Consecutive transport failures tolerated by
            the decoder before giving up; ``None`` never gives up.
    """

    port: str = "/dev/ttyS0"
    baudrate: int = 9600
    bytesize: int = 8
    timeout: Optional[float] = None
    talker_id: str = "GP"
    poll_interval: float = 1.0
    max_transport_failures: Optional[int] = None

    def __post_init__(self) -> None:
        if self.baudrate <= 0:
            raise ValueError(f"baudrate must be positive, got {self.baudrate}.")
        if self.bytesize not in _VALID_BYTESIZES:
            raise ValueError(f"bytesize must be one of {_VALID_BYTESIZES}, got {self.bytesize}.")
        if self.timeout is not None and self.timeout < 0:
            raise ValueError(f"timeout must be non-negative, got {self.timeout}.")
        if len(self.talker_id) != 2:
            raise ValueError(f"talker_id must be 2 characters, got {self.talker_id!r}.")
        if self.poll_interval < 0:
            raise ValueError(f"poll_interval must be non-negative, got {self.poll_interval}.")
        if self.max_transport_failures is not None and self.max_transport_failures < 1:
            raise ValueError(
                f"max_transport_failures must be positive, got {self.max_transport_failures}."
            )

    @property
    def position_tag(self) -> str:
        """Sentence tag carrying position fixes, e.g. ``"GPGGA"``."""
        return self.talker_id + "GGA"

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "receiver": {
                "port": self.port,
                "baudrate": int(self.baudrate),
                "bytesize": int(self.bytesize),
                "timeout": None if self.timeout is None else float(self.timeout),
                "talker_id": self.talker_id,
                "poll_interval": float(self.poll_interval),
                "max_transport_failures": self.max_transport_failures,
            }
        }

    def to_yaml(self, path: str | os.PathLike) -> None:
        """Write the configuration to a YAML file."""
        Path(path).write_text(yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False))

    @classmethod
    def from_dict(cls, data: dict) -> "ReceiverConfig":
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Receiver config must be a mapping, got {type(data).__name__}.")
        receiver = data.get("receiver") or {}
        if not isinstance(receiver, dict):
            raise ValueError(
                f"'receiver' section must be a mapping, got {type(receiver).__name__}."
            )
        timeout = receiver.get("timeout")
        max_failures = receiver.get("max_transport_failures")
        try:
            return cls(
                port=str(receiver.get("port", cls.port)),
                baudrate=int(receiver.get("baudrate", cls.baudrate)),
                bytesize=int(receiver.get("bytesize", cls.bytesize)),
                timeout=None if timeout is None else float(timeout),
                talker_id=str(receiver.get("talker_id", cls.talker_id)),
                poll_interval=float(receiver.get("poll_interval", cls.poll_interval)),
                max_transport_failures=None if max_failures is None else int(max_failures),
            )
        except TypeError as exc:
            raise ValueError(f"Invalid receiver config value: {exc}") from exc

    @classmethod
    def from_yaml(cls, path: str | os.PathLike) -> "ReceiverConfig":
        """Load a ReceiverConfig from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Receiver config not found: {path}")
        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as exc:
            raise ValueError(f"Malformed receiver config {path}: {exc}") from exc
        return cls.from_dict(data)
