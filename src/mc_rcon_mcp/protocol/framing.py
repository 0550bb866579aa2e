"""Packet builder and parser for the RCON wire format.

Packet layout (all integers are signed 32-bit little-endian)::

    +--------+------------+--------+------------------+------------+
    | Length | Request ID |  Type  |     Payload      | Terminator |
    | 4 bytes|  4 bytes   | 4 bytes|  variable length |  2 bytes   |
    +--------+------------+--------+------------------+------------+

- Length: number of bytes that follow (excludes itself)
- Request ID: the session's correlation id, echoed by the server
- Type: 3 = login, 2 = command; responses are not validated
- Terminator: two zero bytes, never part of the payload
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .errors import ProtocolDecodeError

LENGTH_PREFIX_SIZE = 4
TERMINATOR = b"\x00\x00"
MIN_PACKET_LENGTH = 10  # request_id(4) + type(4) + terminator(2)
MAX_COMMAND_PAYLOAD = 1446
MAX_RESPONSE_PAYLOAD = 4096
MAX_PACKET_LENGTH = MAX_RESPONSE_PAYLOAD + MIN_PACKET_LENGTH


class PacketType(IntEnum):
    """Packet type identifiers."""

    RESPONSE = 0
    COMMAND = 2
    LOGIN = 3


@dataclass
class Packet:
    """A decoded protocol packet."""

    request_id: int
    type: int
    payload: bytes = b""

    @property
    def length(self) -> int:
        return MIN_PACKET_LENGTH + len(self.payload)

    def __repr__(self) -> str:
        return (
            f"Packet(request_id={self.request_id}, type={self.type}, "
            f"payload={self.payload!r})"
        )


def _int32(value: int) -> bytes:
    return value.to_bytes(4, "little", signed=True)


def build_packet(request_id: int, packet_type: int, payload: bytes = b"") -> bytes:
    """Build a complete packet, length prefix included.

    Args:
        request_id: Correlation id for the session.
        packet_type: ``PacketType.LOGIN`` or ``PacketType.COMMAND``.
        payload: Raw password or command bytes, without terminator.

    Returns:
        The bytes to write to the socket.
    """
    body = _int32(request_id) + _int32(packet_type) + payload + TERMINATOR
    return _int32(len(body)) + body


def parse_length(prefix: bytes) -> int:
    """Decode the length prefix and check it is within protocol bounds."""
    if len(prefix) != LENGTH_PREFIX_SIZE:
        raise ProtocolDecodeError(
            f"Length prefix must be {LENGTH_PREFIX_SIZE} bytes, got {len(prefix)}"
        )
    length = int.from_bytes(prefix, "little", signed=True)
    if not MIN_PACKET_LENGTH <= length <= MAX_PACKET_LENGTH:
        raise ProtocolDecodeError(
            f"Packet length {length} outside {MIN_PACKET_LENGTH}-{MAX_PACKET_LENGTH}"
        )
    return length


def parse_body(body: bytes) -> Packet:
    """Decode the bytes that follow the length prefix."""
    if len(body) < MIN_PACKET_LENGTH:
        raise ProtocolDecodeError(
            f"Packet body must be at least {MIN_PACKET_LENGTH} bytes, got {len(body)}"
        )
    if body[-2:] != TERMINATOR:
        raise ProtocolDecodeError(f"Missing packet terminator: {body[-2:].hex(' ')}")

    request_id = int.from_bytes(body[0:4], "little", signed=True)
    packet_type = int.from_bytes(body[4:8], "little", signed=True)
    return Packet(request_id=request_id, type=packet_type, payload=body[8:-2])


def parse_packet(data: bytes) -> Packet:
    """Decode a complete packet, length prefix included."""
    length = parse_length(data[:LENGTH_PREFIX_SIZE])
    body = data[LENGTH_PREFIX_SIZE:]
    if len(body) != length:
        raise ProtocolDecodeError(
            f"Length prefix declares {length} bytes, {len(body)} present"
        )
    return parse_body(body)
