"""Protocol layer: packet framing, errors, command builders, and response parsing."""

from .errors import (
    AuthenticationFailure,
    CorrelationMismatch,
    PacketTooLarge,
    ProtocolDecodeError,
    RconError,
    SessionClosed,
    TransportError,
    UnexpectedResponse,
)
from .framing import Packet, PacketType, build_packet, parse_packet
from .commands import Command, GameMode, build_command
from .parser import parse_listing
