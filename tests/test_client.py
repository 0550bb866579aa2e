"""Tests for the command facade."""

from unittest.mock import MagicMock

import pytest

from conftest import PASSWORD, rcon_handler
from mc_rcon_mcp.client import RconClient
from mc_rcon_mcp.protocol.commands import GameMode
from mc_rcon_mcp.protocol.errors import UnexpectedResponse
from mc_rcon_mcp.protocol.framing import PacketType


def _client(response: str = "") -> tuple[RconClient, MagicMock]:
    session = MagicMock()
    session.execute.return_value = response
    return RconClient(session), session


def test_list_players():
    client, session = _client("There are 2/20 players online: Alice, Bob")
    assert client.list_players() == ["Alice", "Bob"]
    session.execute.assert_called_once_with("list")


def test_list_players_nobody_online():
    client, _ = _client("There are 0/20 players online:")
    assert client.list_players() == []


def test_ban_list_without_colon():
    """'There are no banned players' has no colon and means no names."""
    client, session = _client("There are no banned players")
    assert client.ban_list() == []
    session.execute.assert_called_once_with("banlist")


def test_ban_ip_list():
    client, session = _client("There are 2 total banned IP addresses: 10.0.0.1, 10.0.0.2")
    assert client.ban_ip_list() == ["10.0.0.1", "10.0.0.2"]
    session.execute.assert_called_once_with("banlist ips")


def test_whitelist():
    client, session = _client("There are 2 whitelisted players: Alice Bob")
    assert client.whitelist() == ["Alice", "Bob"]
    session.execute.assert_called_once_with("whitelist list")


def test_ban_empty_reply_is_success():
    client, session = _client("")
    client.ban("Steve")
    session.execute.assert_called_once_with("ban Steve")


def test_state_change_with_reply_raises():
    """State-changing commands succeed only with an empty reply."""
    client, _ = _client("Unknown command")
    with pytest.raises(UnexpectedResponse) as excinfo:
        client.kick("Steve")
    assert excinfo.value.command == "kick Steve"
    assert excinfo.value.response == "Unknown command"


@pytest.mark.parametrize(
    "call, expected",
    [
        (lambda c: c.ban_ip("10.0.0.7"), "ban-ip 10.0.0.7"),
        (lambda c: c.pardon("Steve"), "pardon Steve"),
        (lambda c: c.pardon_ip("10.0.0.7"), "pardon-ip 10.0.0.7"),
        (lambda c: c.op("Steve"), "op Steve"),
        (lambda c: c.deop("Steve"), "deop Steve"),
        (lambda c: c.gamemode("Steve", GameMode.SURVIVAL), "gamemode 0 Steve"),
        (lambda c: c.give("Steve", 264, 3), "give Steve 264 3 0"),
        (lambda c: c.tp("Alice", "Bob"), "tp Alice Bob"),
        (lambda c: c.xp("Steve", 100), "xp Steve 100"),
        (lambda c: c.say("hello"), "say hello"),
        (lambda c: c.tell("Alex", "hi there"), "tell Alex hi there"),
        (lambda c: c.save_all(), "save-all"),
        (lambda c: c.save_off(), "save-off"),
        (lambda c: c.save_on(), "save-on"),
        (lambda c: c.stop(), "stop"),
        (lambda c: c.time_add(1000), "time add 1000"),
        (lambda c: c.time_set(6000), "time set 6000"),
        (lambda c: c.toggle_downfall(), "toggledownfall"),
        (lambda c: c.whitelist_add("Alex"), "whitelist add Alex"),
        (lambda c: c.whitelist_remove("Alex"), "whitelist remove Alex"),
        (lambda c: c.whitelist_on(), "whitelist on"),
        (lambda c: c.whitelist_off(), "whitelist off"),
        (lambda c: c.whitelist_reload(), "whitelist reload"),
    ],
)
def test_command_lines(call, expected):
    client, session = _client("")
    call(client)
    session.execute.assert_called_once_with(expected)


def test_validation_happens_before_sending():
    client, session = _client("")
    with pytest.raises(ValueError):
        client.time_set(30000)
    session.execute.assert_not_called()


def test_execute_passthrough():
    client, session = _client("Weather set to clear")
    assert client.execute("weather clear") == "Weather set to clear"


def test_close_closes_session():
    client, session = _client()
    with client:
        pass
    session.close.assert_called_once()


def test_ban_over_the_wire(rcon_peer):
    """ban('Steve') sends a command packet with payload 'ban Steve'."""
    peer = rcon_peer()
    with RconClient.connect("127.0.0.1", peer.port, PASSWORD, timeout=5.0) as client:
        client.ban("Steve")
    peer.wait()

    command = peer.received[1]
    assert command.type == PacketType.COMMAND
    assert command.payload == b"ban Steve"


def test_list_over_the_wire(rcon_peer):
    replies = {"list": "There are 2/20 players online: Alice, Bob"}
    peer = rcon_peer(rcon_handler(lambda command: replies.get(command, "")))
    with RconClient.connect("127.0.0.1", peer.port, PASSWORD, timeout=5.0) as client:
        assert client.list_players() == ["Alice", "Bob"]
