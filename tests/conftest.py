"""A loopback RCON peer for exercising sessions over a real socket."""

from __future__ import annotations

import socket
import threading
from collections.abc import Callable

import pytest

from mc_rcon_mcp.protocol.framing import Packet, PacketType, build_packet, parse_packet

PASSWORD = "hunter2"
PEER_TIMEOUT = 5.0


def recv_packet(conn: socket.socket) -> Packet | None:
    """Read one packet, or None once the client has gone away."""
    prefix = _recv_exactly(conn, 4)
    if prefix is None:
        return None
    body = _recv_exactly(conn, int.from_bytes(prefix, "little", signed=True))
    if body is None:
        return None
    return parse_packet(prefix + body)


def _recv_exactly(conn: socket.socket, size: int) -> bytes | None:
    data = b""
    while len(data) < size:
        try:
            chunk = conn.recv(size - len(data))
        except OSError:
            return None
        if not chunk:
            return None
        data += chunk
    return data


def send_packet(
    conn: socket.socket,
    request_id: int,
    payload: bytes = b"",
    packet_type: int = PacketType.RESPONSE,
) -> None:
    conn.sendall(build_packet(request_id, packet_type, payload))


class FakeRconPeer:
    """Accepts one connection and hands it to ``handler(conn, peer)``.

    ``received`` collects the packets the handler read, ``saw_eof`` is set
    once the client closed its end.
    """

    def __init__(self, handler: Callable[[socket.socket, FakeRconPeer], None]) -> None:
        self._handler = handler
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(1)
        self._listener.settimeout(PEER_TIMEOUT)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self.received: list[Packet] = []
        self.saw_eof = False
        self.error: BaseException | None = None

    @property
    def port(self) -> int:
        return self._listener.getsockname()[1]

    def start(self) -> FakeRconPeer:
        self._thread.start()
        return self

    def wait(self, timeout: float = PEER_TIMEOUT) -> None:
        self._thread.join(timeout)
        assert not self._thread.is_alive(), "peer did not finish"

    def stop(self) -> None:
        self._listener.close()
        self._thread.join(PEER_TIMEOUT)

    def read(self, conn: socket.socket) -> Packet | None:
        packet = recv_packet(conn)
        if packet is None:
            self.saw_eof = True
        else:
            self.received.append(packet)
        return packet

    def _serve(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(PEER_TIMEOUT)
            try:
                self._handler(conn, self)
            except BaseException as e:
                self.error = e


def rcon_handler(
    responder: Callable[[str], str] = lambda command: "",
    password: str = PASSWORD,
    response_id: Callable[[int], int] = lambda request_id: request_id,
) -> Callable[[socket.socket, FakeRconPeer], None]:
    """A well-behaved server: checks the password, then answers each
    command with ``responder(command)``.

    ``response_id`` maps the request id of a command to the id echoed back.
    """

    def handle(conn: socket.socket, peer: FakeRconPeer) -> None:
        login = peer.read(conn)
        if login is None:
            return
        if login.payload.decode() == password:
            send_packet(conn, login.request_id, packet_type=PacketType.COMMAND)
        else:
            send_packet(conn, -1, packet_type=PacketType.COMMAND)

        while True:
            packet = peer.read(conn)
            if packet is None:
                return
            reply = responder(packet.payload.decode())
            send_packet(conn, response_id(packet.request_id), reply.encode())

    return handle


@pytest.fixture
def rcon_peer():
    """Factory fixture starting fake peers and stopping them afterwards."""
    peers: list[FakeRconPeer] = []

    def start(handler=None) -> FakeRconPeer:
        peer = FakeRconPeer(handler or rcon_handler()).start()
        peers.append(peer)
        return peer

    yield start
    for peer in peers:
        peer.stop()
