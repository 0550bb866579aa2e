"""Authenticated TCP session to a game server's RCON port.

One ``RconSession`` owns one socket. Opening it connects and performs the
login exchange; every later exchange sends one Command packet and reads
exactly one response. The protocol has no multiplexing, so a single lock
covers the whole write-then-read cycle and concurrent callers queue up
behind it.
"""

from __future__ import annotations

import logging
import random
import socket
import threading

from ..protocol.errors import (
    AuthenticationFailure,
    CorrelationMismatch,
    PacketTooLarge,
    ProtocolDecodeError,
    RconError,
    SessionClosed,
    TransportError,
)
from ..protocol.framing import (
    LENGTH_PREFIX_SIZE,
    MAX_COMMAND_PAYLOAD,
    Packet,
    PacketType,
    build_packet,
    parse_body,
    parse_length,
)

logger = logging.getLogger(__name__)

DEFAULT_PORT = 25575
ENCODING = "utf-8"
REJECTED_REQUEST_ID = -1
MIN_REQUEST_ID = -(2**31)
MAX_REQUEST_ID = 2**31 - 1


def generate_request_id() -> int:
    """Pick a random signed 32-bit correlation id.

    ``-1`` is what servers echo for a rejected login, so it is never used.
    """
    while True:
        request_id = random.randint(MIN_REQUEST_ID, MAX_REQUEST_ID)
        if request_id != REJECTED_REQUEST_ID:
            return request_id


class RconSession:
    """A single authenticated RCON connection.

    Usage::

        session = RconSession("127.0.0.1", 25575, "secret")
        session.open()
        print(session.execute("list"))
        session.close()

    A session is opened once. After ``close()``, or after any transport,
    decode or correlation error, it stays closed and a new session must
    be created.
    """

    def __init__(
        self,
        host: str,
        port: int,
        password: str,
        timeout: float | None = None,
        request_id: int | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._password = password
        self._timeout = timeout
        if request_id is None:
            request_id = generate_request_id()
        elif not MIN_REQUEST_ID <= request_id <= MAX_REQUEST_ID:
            raise ValueError(f"Request id must be a signed 32-bit integer, got {request_id}")
        elif request_id == REJECTED_REQUEST_ID:
            raise ValueError(f"Request id {REJECTED_REQUEST_ID} is reserved for rejected logins")
        self._request_id = request_id
        self._sock: socket.socket | None = None
        self._lock = threading.Lock()
        self._authenticated = False
        self._closed = False
        self._aborted = False

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def request_id(self) -> int:
        return self._request_id

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open" if self._authenticated else "new"
        return (
            f"RconSession(host={self._host!r}, port={self._port}, "
            f"request_id={self._request_id}, state={state})"
        )

    def __enter__(self) -> RconSession:
        if not self._authenticated:
            self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self) -> RconSession:
        """Connect and authenticate.

        Returns:
            This session, now authenticated.

        Raises:
            TransportError: If the connection cannot be established or
                breaks during login.
            AuthenticationFailure: If the server rejects the password.
            SessionClosed: If the session was already closed.
        """
        with self._lock:
            if self._closed:
                raise SessionClosed("Session is closed; create a new one")
            if self._sock is not None:
                raise RconError("Session is already open")

            try:
                sock = socket.create_connection(
                    (self._host, self._port), timeout=self._timeout
                )
            except OSError as e:
                self._closed = True
                raise TransportError(
                    f"Could not connect to {self._host}:{self._port}: {e}"
                ) from e

            self._sock = sock
            if self._aborted:
                self._release()
                raise SessionClosed("Session was aborted while connecting")

            logger.debug("Connected to %s:%d, logging in", self._host, self._port)
            try:
                self._login()
            except BaseException:
                self._release()
                raise

        logger.info("Authenticated with %s:%d", self._host, self._port)
        return self

    def execute(self, command: str) -> str:
        """Send one command and return the server's response text.

        Args:
            command: A complete command line, e.g. ``"ban Steve"``.

        Returns:
            The response payload decoded as text (empty for most
            state-changing commands).

        Raises:
            PacketTooLarge: If the encoded command exceeds the request limit.
            SessionClosed: If the session is not open.
            TransportError: If the socket fails or the stream is truncated.
            CorrelationMismatch: If the response carries another request id.
        """
        payload = command.encode(ENCODING)
        if len(payload) > MAX_COMMAND_PAYLOAD:
            raise PacketTooLarge(len(payload), MAX_COMMAND_PAYLOAD)

        with self._lock:
            if self._closed:
                raise SessionClosed("Session is closed")
            if self._sock is None or not self._authenticated:
                raise SessionClosed("Session is not open; call open() first")

            try:
                response = self._exchange(PacketType.COMMAND, payload)
                if response.request_id != self._request_id:
                    raise CorrelationMismatch(self._request_id, response.request_id)
            except BaseException:
                self._release()
                raise

        return response.payload.decode(ENCODING, errors="replace")

    def close(self) -> None:
        """Close the socket. Safe to call any number of times."""
        with self._lock:
            was_open = self._sock is not None
            self._release()
        if was_open:
            logger.info("Disconnected from %s:%d", self._host, self._port)

    def abort(self) -> None:
        """Shut the socket down without waiting for an exchange in progress.

        A caller blocked in ``execute`` gets a ``TransportError`` and the
        session ends up closed.
        """
        self._aborted = True
        sock = self._sock
        if sock is not None:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                logger.debug("Shutdown of aborted socket failed: %s", e)

        if self._lock.acquire(blocking=False):
            try:
                self._release()
            finally:
                self._lock.release()

    def _login(self) -> None:
        response = self._exchange(PacketType.LOGIN, self._password.encode(ENCODING))
        if response.request_id != self._request_id or response.payload:
            raise AuthenticationFailure(
                self._request_id, response.request_id, response.payload
            )
        self._authenticated = True

    def _exchange(self, packet_type: PacketType, payload: bytes) -> Packet:
        """Write one packet and read one response. Caller holds the lock."""
        self._send(build_packet(self._request_id, packet_type, payload))
        length = parse_length(self._recv_exactly(LENGTH_PREFIX_SIZE))
        response = parse_body(self._recv_exactly(length))
        logger.debug(
            "%s exchange: sent %d bytes, received %r",
            packet_type.name,
            len(payload),
            response,
        )
        return response

    def _send(self, data: bytes) -> None:
        try:
            self._sock.sendall(data)
        except OSError as e:
            raise TransportError(
                f"Write to {self._host}:{self._port} failed: {e}"
            ) from e

    def _recv_exactly(self, size: int) -> bytes:
        buffer = bytearray()
        while len(buffer) < size:
            try:
                chunk = self._sock.recv(size - len(buffer))
            except OSError as e:
                raise TransportError(
                    f"Read from {self._host}:{self._port} failed: {e}"
                ) from e
            if not chunk:
                raise ProtocolDecodeError(
                    f"Connection closed after {len(buffer)} of {size} bytes"
                )
            buffer += chunk
        return bytes(buffer)

    def _release(self) -> None:
        """Close the socket and mark the session unusable. Caller holds the lock."""
        self._closed = True
        self._authenticated = False
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)


def open_session(
    host: str,
    port: int,
    password: str,
    timeout: float | None = None,
) -> RconSession:
    """Create, connect and authenticate a session in one call."""
    return RconSession(host, port, password, timeout=timeout).open()
