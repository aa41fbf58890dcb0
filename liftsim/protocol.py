"""Wire format of the messages exchanged between clients and the server.

Every message is a packed little-endian record with no padding:

* an elevator message holds type, direction, source floor and destination
  floor as single bytes followed by a 32-bit timestamp (8 bytes);
* a status message holds type and current floor as single bytes followed by
  a 32-bit timestamp (6 bytes).
"""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar


class MessageType(IntEnum):
    """Kind of a message."""

    START = 0x01
    REQUEST = 0x02
    STATUS = 0x03


class Direction(IntEnum):
    """Direction of travel requested by a passenger or taken by the elevator."""

    STAY = 0x00
    UP = 0x01
    DOWN = 0x02


def now_timestamp() -> int:
    """Return the current time in whole seconds since the epoch, as a 32-bit value."""
    return int(time.time()) & 0xFFFFFFFF


def _message_type(value: int) -> MessageType:
    try:
        return MessageType(value)
    except ValueError:
        raise ValueError(f"unknown message type 0x{value:02x}") from None


def _direction(value: int) -> Direction:
    try:
        return Direction(value)
    except ValueError:
        raise ValueError(f"unknown direction 0x{value:02x}") from None


def _check_length(data: bytes, expected: int, what: str) -> None:
    if len(data) != expected:
        raise ValueError(f"{what} needs {expected} bytes, got {len(data)}")


@dataclass
class ElevatorMessage:
    """A start signal or an elevator request sent over the wire.

    Messages order by timestamp, so the oldest request comes first.
    """

    type: MessageType
    dir: Direction
    src_floor: int
    dst_floor: int
    timestamp: int = field(default_factory=now_timestamp)

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<BBBBI")
    SIZE: ClassVar[int] = FORMAT.size

    def __lt__(self, other: ElevatorMessage) -> bool:
        if not isinstance(other, ElevatorMessage):
            return NotImplemented
        return self.timestamp < other.timestamp

    def pack(self) -> bytes:
        """Encode the message into its 8-byte wire form."""
        return self.FORMAT.pack(
            int(self.type),
            int(self.dir),
            self.src_floor & 0xFF,
            self.dst_floor & 0xFF,
            self.timestamp & 0xFFFFFFFF,
        )

    @classmethod
    def unpack(cls, data: bytes) -> ElevatorMessage:
        """Decode a message from exactly 8 bytes."""
        _check_length(data, cls.SIZE, "elevator message")
        kind, direction, src, dst, timestamp = cls.FORMAT.unpack(data)
        return cls(_message_type(kind), _direction(direction), src, dst, timestamp)

    def stamp(self) -> None:
        """Set the timestamp to the current time."""
        self.timestamp = now_timestamp()


@dataclass
class StatusMessage:
    """Report of the elevator's current floor, broadcast to every client."""

    type: MessageType
    current_floor: int
    timestamp: int = 0

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<BBI")
    SIZE: ClassVar[int] = FORMAT.size

    def pack(self) -> bytes:
        """Encode the status into its 6-byte wire form."""
        return self.FORMAT.pack(
            int(self.type), self.current_floor & 0xFF, self.timestamp & 0xFFFFFFFF
        )

    @classmethod
    def unpack(cls, data: bytes) -> StatusMessage:
        """Decode a status from exactly 6 bytes."""
        _check_length(data, cls.SIZE, "status message")
        kind, floor, timestamp = cls.FORMAT.unpack(data)
        return cls(_message_type(kind), floor, timestamp)