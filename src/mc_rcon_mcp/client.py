"""High-level server administration on top of an ``RconSession``.

Every method builds one command line, sends it through
``RconSession.execute`` and interprets the reply. State-changing commands
succeed with an empty reply; listing commands return the parsed names.
"""

from __future__ import annotations

import logging

from .protocol import commands
from .protocol.commands import GameMode
from .protocol.errors import UnexpectedResponse
from .protocol.parser import WHITELIST_SEPARATOR, parse_listing
from .transport.tcp_connection import RconSession, open_session

logger = logging.getLogger(__name__)


class RconClient:
    """Named server commands over a single session.

    Usage::

        with RconClient.connect("127.0.0.1", 25575, "secret") as client:
            print(client.list_players())
            client.ban("Steve")
    """

    def __init__(self, session: RconSession) -> None:
        self._session = session

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        password: str,
        timeout: float | None = None,
    ) -> RconClient:
        """Open an authenticated session and wrap it."""
        return cls(open_session(host, port, password, timeout=timeout))

    @property
    def session(self) -> RconSession:
        return self._session

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> RconClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def execute(self, command: str) -> str:
        """Send an arbitrary command line and return the raw reply."""
        return self._session.execute(command)

    def _run(self, command: str) -> None:
        response = self._session.execute(command)
        if response:
            logger.debug("Command %r answered %r", command, response)
            raise UnexpectedResponse(command, response)

    def list_players(self) -> list[str]:
        """Names of all connected players."""
        return parse_listing(self._session.execute(commands.build_list()))

    def ban_list(self) -> list[str]:
        """Names of all banned players."""
        return parse_listing(self._session.execute(commands.build_ban_list()))

    def ban_ip_list(self) -> list[str]:
        """All banned hosts."""
        return parse_listing(self._session.execute(commands.build_ban_ip_list()))

    def whitelist(self) -> list[str]:
        """Names of all whitelisted players."""
        response = self._session.execute(commands.build_whitelist_list())
        return parse_listing(response, WHITELIST_SEPARATOR)

    def ban(self, player: str) -> None:
        self._run(commands.build_ban(player))

    def ban_ip(self, host: str) -> None:
        self._run(commands.build_ban_ip(host))

    def pardon(self, player: str) -> None:
        self._run(commands.build_pardon(player))

    def pardon_ip(self, host: str) -> None:
        self._run(commands.build_pardon_ip(host))

    def kick(self, player: str) -> None:
        self._run(commands.build_kick(player))

    def op(self, player: str) -> None:
        self._run(commands.build_op(player))

    def deop(self, player: str) -> None:
        self._run(commands.build_deop(player))

    def gamemode(self, player: str, mode: GameMode | int) -> None:
        """Change one player's game mode. The player must be online."""
        self._run(commands.build_gamemode(player, mode))

    def give(self, player: str, item: int | str, amount: int = 1, damage: int = 0) -> None:
        self._run(commands.build_give(player, item, amount, damage))

    def tp(self, player: str, target: str) -> None:
        self._run(commands.build_tp(player, target))

    def xp(self, player: str, amount: int) -> None:
        self._run(commands.build_xp(player, amount))

    def say(self, message: str) -> None:
        self._run(commands.build_say(message))

    def tell(self, player: str, message: str) -> None:
        self._run(commands.build_tell(player, message))

    def save_all(self) -> None:
        self._run(commands.build_save_all())

    def save_off(self) -> None:
        self._run(commands.build_save_off())

    def save_on(self) -> None:
        self._run(commands.build_save_on())

    def stop(self) -> None:
        """Gracefully shut the server down."""
        self._run(commands.build_stop())

    def time_add(self, amount: int) -> None:
        self._run(commands.build_time_add(amount))

    def time_set(self, time: int) -> None:
        self._run(commands.build_time_set(time))

    def toggle_downfall(self) -> None:
        self._run(commands.build_toggle_downfall())

    def whitelist_add(self, player: str) -> None:
        self._run(commands.build_whitelist_add(player))

    def whitelist_remove(self, player: str) -> None:
        self._run(commands.build_whitelist_remove(player))

    def whitelist_on(self) -> None:
        self._run(commands.build_whitelist_on())

    def whitelist_off(self) -> None:
        self._run(commands.build_whitelist_off())

    def whitelist_reload(self) -> None:
        """Reload the whitelist file after it was edited outside the server."""
        self._run(commands.build_whitelist_reload())
