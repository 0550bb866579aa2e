"""Minecraft RCON client with an MCP server front."""

from .client import RconClient
from .config import RconSettings
from .protocol.errors import (
    AuthenticationFailure,
    CorrelationMismatch,
    PacketTooLarge,
    ProtocolDecodeError,
    RconError,
    SessionClosed,
    TransportError,
    UnexpectedResponse,
)
from .transport.tcp_connection import RconSession, open_session

__version__ = "0.1.0"
