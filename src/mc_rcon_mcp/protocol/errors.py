"""Exceptions raised by the RCON session and the command facade."""

from __future__ import annotations


class RconError(Exception):
    """Base class for all RCON errors."""


class TransportError(RconError, ConnectionError):
    """The socket failed: refused, reset, timed out or closed underneath us."""


class ProtocolDecodeError(TransportError):
    """A packet could not be decoded (bad length, missing terminator, truncated)."""


class AuthenticationFailure(RconError):
    """The server did not accept the login exchange."""

    def __init__(self, expected: int, received: int, payload: bytes = b"") -> None:
        self.expected = expected
        self.received = received
        self.payload = payload
        if received == -1:
            reason = "server rejected the password"
        elif received != expected:
            reason = f"login response carried request id {received}, expected {expected}"
        else:
            reason = f"login response carried an unexpected payload of {len(payload)} bytes"
        super().__init__(f"Authentication failed: {reason}")


class CorrelationMismatch(RconError):
    """A command response did not echo the session's request id.

    The stream has no resynchronization marker, so the session that
    raised this is closed and must be replaced.
    """

    def __init__(self, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f"Response request id {received} does not match session id {expected}"
        )


class SessionClosed(RconError, ConnectionError):
    """The session is not open, was closed, or broke on an earlier error."""


class PacketTooLarge(RconError, ValueError):
    """A command does not fit in a single request packet."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Command payload is {size} bytes, limit is {limit}")


class UnexpectedResponse(RconError):
    """A state-changing command answered with text instead of nothing."""

    def __init__(self, command: str, response: str) -> None:
        self.command = command
        self.response = response
        super().__init__(f"Command {command!r} returned {response!r}")
