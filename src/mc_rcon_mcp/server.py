"""MCP server entry point for Minecraft server administration over RCON.

Exposes tools via the Model Context Protocol using the official Python
MCP SDK with stdio transport. Connection settings default to the
``RCON_*`` environment variables.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from mcp.server.fastmcp import FastMCP

from .client import RconClient
from .config import RconSettings
from .protocol.commands import GameMode
from .protocol.errors import CorrelationMismatch, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

mcp = FastMCP(
    "minecraft-rcon",
    instructions="Administer a Minecraft server through its RCON port",
)

# Global connection state
_client: RconClient | None = None

WHITELIST_ACTIONS = ("list", "add", "remove", "on", "off", "reload")


def _get_client() -> RconClient:
    """Get the active client, raising if not connected."""
    if _client is None or _client.session.closed:
        raise RuntimeError(
            "Not connected to a server. Use the 'connect' tool first."
        )
    return _client


def _drop_client() -> None:
    global _client
    if _client is not None:
        _client.close()
    _client = None


def _run(action: Callable[[RconClient], T]) -> T:
    """Run an action on the active client, forgetting the session if it broke."""
    client = _get_client()
    try:
        return action(client)
    except (TransportError, CorrelationMismatch):
        logger.warning("Session to %s:%d is unusable, dropping it",
                       client.session.host, client.session.port)
        _drop_client()
        raise


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(host: str | None = None, port: int | None = None) -> dict[str, Any]:
    """Open an authenticated RCON session to the server.

    The password always comes from the RCON_PASSWORD environment variable.

    Args:
        host: Server address (default RCON_HOST or 127.0.0.1).
        port: RCON port (default RCON_PORT or 25575).
    """
    global _client
    if _client is not None and not _client.session.closed:
        return {
            "connected": True,
            "message": "Already connected",
            "host": _client.session.host,
            "port": _client.session.port,
        }

    settings = RconSettings.from_env()
    host = host or settings.host
    port = port or settings.port
    _client = RconClient.connect(host, port, settings.password, timeout=settings.timeout)
    return {"connected": True, "host": host, "port": port}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the RCON session."""
    _drop_client()
    return {"disconnected": True}


@mcp.tool()
def execute_command(command: str) -> dict[str, Any]:
    """Run any console command and return the server's raw reply.

    Args:
        command: Command line without a leading slash, e.g. 'weather clear'.
    """
    command = command.strip().removeprefix("/")
    if not command:
        return {"error": "Command must not be empty"}
    response = _run(lambda client: client.execute(command))
    return {"command": command, "response": response}


# ─── PLAYER TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def list_players() -> dict[str, Any]:
    """List the players currently online."""
    players = _run(lambda client: client.list_players())
    return {"players": players, "count": len(players)}


@mcp.tool()
def banned_players() -> dict[str, Any]:
    """List banned player names and banned hosts."""
    players = _run(lambda client: client.ban_list())
    hosts = _run(lambda client: client.ban_ip_list())
    return {"players": players, "ips": hosts}


def _player_action(
    player: str, action: Callable[[RconClient, str], None], key: str
) -> dict[str, Any]:
    try:
        _run(lambda client: action(client, player))
    except ValueError as e:
        return {"error": str(e)}
    return {key: True, "player": player}


@mcp.tool()
def ban_player(player: str, by_ip: bool = False) -> dict[str, Any]:
    """Ban a player by name, or a host by address when by_ip is set.

    Args:
        player: Player name, or host address when by_ip is true.
        by_ip: Ban the address instead of the name.
    """
    action = RconClient.ban_ip if by_ip else RconClient.ban
    return _player_action(player, action, "banned")


@mcp.tool()
def pardon_player(player: str, by_ip: bool = False) -> dict[str, Any]:
    """Lift a ban on a player name, or on a host when by_ip is set."""
    action = RconClient.pardon_ip if by_ip else RconClient.pardon
    return _player_action(player, action, "pardoned")


@mcp.tool()
def kick_player(player: str) -> dict[str, Any]:
    """Disconnect a player from the server."""
    return _player_action(player, RconClient.kick, "kicked")


@mcp.tool()
def op_player(player: str) -> dict[str, Any]:
    """Grant operator status to a player."""
    return _player_action(player, RconClient.op, "opped")


@mcp.tool()
def deop_player(player: str) -> dict[str, Any]:
    """Revoke a player's operator status."""
    return _player_action(player, RconClient.deop, "deopped")


@mcp.tool()
def set_game_mode(player: str, mode: str) -> dict[str, Any]:
    """Change the game mode of an online player.

    Args:
        player: Player name.
        mode: survival, creative, adventure or spectator.
    """
    try:
        game_mode = GameMode[mode.strip().upper()]
    except KeyError:
        return {"error": f"Unknown mode '{mode}'. Valid: {[m.name.lower() for m in GameMode]}"}
    try:
        _run(lambda client: client.gamemode(player, game_mode))
    except ValueError as e:
        return {"error": str(e)}
    return {"player": player, "mode": game_mode.name.lower()}


# ─── CHAT TOOLS ───────────────────────────────────────────────────────

@mcp.tool()
def broadcast(message: str) -> dict[str, Any]:
    """Send a message to every player."""
    try:
        _run(lambda client: client.say(message))
    except ValueError as e:
        return {"error": str(e)}
    return {"sent": True}


@mcp.tool()
def whisper(player: str, message: str) -> dict[str, Any]:
    """Send a private message that only one player sees."""
    try:
        _run(lambda client: client.tell(player, message))
    except ValueError as e:
        return {"error": str(e)}
    return {"sent": True, "player": player}


# ─── WORLD TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def set_time(time: int, relative: bool = False) -> dict[str, Any]:
    """Set the world time, or shift it when relative is true.

    Args:
        time: 0-24000 (0 dawn, 6000 midday, 12000 dusk, 18000 midnight),
              or an offset when relative is true.
        relative: Add to the current time instead of replacing it.
    """
    try:
        if relative:
            _run(lambda client: client.time_add(time))
        else:
            _run(lambda client: client.time_set(time))
    except ValueError as e:
        return {"error": str(e)}
    return {"time": time, "relative": relative}


@mcp.tool()
def save_world(flush: bool = True, autosave: bool | None = None) -> dict[str, Any]:
    """Write pending world changes to disk and optionally toggle autosave.

    Args:
        flush: Run save-all.
        autosave: True runs save-on, False runs save-off, None leaves it alone.
    """
    if autosave is True:
        _run(lambda client: client.save_on())
    elif autosave is False:
        _run(lambda client: client.save_off())
    if flush:
        _run(lambda client: client.save_all())
    return {"saved": flush, "autosave": autosave}


@mcp.tool()
def whitelist(action: str = "list", player: str | None = None) -> dict[str, Any]:
    """Inspect or change the whitelist.

    Args:
        action: list, add, remove, on, off or reload.
        player: Player name for add and remove.
    """
    if action not in WHITELIST_ACTIONS:
        return {"error": f"Unknown action '{action}'. Valid: {list(WHITELIST_ACTIONS)}"}
    if action == "list":
        return {"players": _run(lambda client: client.whitelist())}
    if action in ("add", "remove"):
        if not player:
            return {"error": f"'{action}' needs a player"}
        method = RconClient.whitelist_add if action == "add" else RconClient.whitelist_remove
        result = _player_action(player, method, "updated")
        if "error" not in result:
            result["action"] = action
        return result

    methods = {
        "on": RconClient.whitelist_on,
        "off": RconClient.whitelist_off,
        "reload": RconClient.whitelist_reload,
    }
    _run(methods[action])
    return {"action": action, "updated": True}


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    settings = RconSettings.from_env()
    logging.basicConfig(level=settings.log_level)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
