"""Command verbs and builders for the server's console commands.

Each builder returns the single command line that is sent as the payload
of a Command packet. Builders only format text; they never talk to the
server.
"""

from __future__ import annotations

from enum import Enum, IntEnum

MAX_WORLD_TIME = 24000
MAX_XP_PER_COMMAND = 5000


class Command(str, Enum):
    """Console command verbs."""

    BAN = "ban"
    BAN_IP = "ban-ip"
    BAN_LIST = "banlist"
    BAN_IP_LIST = "banlist ips"
    DEOP = "deop"
    GAMEMODE = "gamemode"
    GIVE = "give"
    KICK = "kick"
    LIST = "list"
    OP = "op"
    PARDON = "pardon"
    PARDON_IP = "pardon-ip"
    SAVE_ALL = "save-all"
    SAVE_OFF = "save-off"
    SAVE_ON = "save-on"
    SAY = "say"
    STOP = "stop"
    TELL = "tell"
    TIME_ADD = "time add"
    TIME_SET = "time set"
    TOGGLE_DOWNFALL = "toggledownfall"
    TP = "tp"
    WHITELIST_LIST = "whitelist list"
    WHITELIST_ADD = "whitelist add"
    WHITELIST_OFF = "whitelist off"
    WHITELIST_ON = "whitelist on"
    WHITELIST_RELOAD = "whitelist reload"
    WHITELIST_REMOVE = "whitelist remove"
    XP = "xp"


class GameMode(IntEnum):
    """Game modes accepted by ``gamemode``."""

    SURVIVAL = 0
    CREATIVE = 1
    ADVENTURE = 2
    SPECTATOR = 3


def build_command(command: Command, *args: object) -> str:
    """Join a command verb and its arguments into one command line."""
    return " ".join([command.value, *(str(arg) for arg in args)])


def _check_name(value: str, what: str = "Player name") -> str:
    if not value or any(ch.isspace() for ch in value):
        raise ValueError(f"{what} must be non-empty without whitespace, got {value!r}")
    return value


def _check_text(value: str, what: str = "Message") -> str:
    if not value.strip():
        raise ValueError(f"{what} must not be empty")
    if "\n" in value or "\r" in value:
        raise ValueError(f"{what} must be a single line")
    return value


def build_ban(player: str) -> str:
    """Build a ``ban`` command. Bans supersede any whitelisting."""
    return build_command(Command.BAN, _check_name(player))


def build_ban_ip(host: str) -> str:
    return build_command(Command.BAN_IP, _check_name(host, "Host"))


def build_ban_list() -> str:
    return build_command(Command.BAN_LIST)


def build_ban_ip_list() -> str:
    return build_command(Command.BAN_IP_LIST)


def build_deop(player: str) -> str:
    return build_command(Command.DEOP, _check_name(player))


def build_gamemode(player: str, mode: GameMode | int) -> str:
    """Build a ``gamemode`` command for one player.

    Args:
        player: Player whose mode changes. Must be online.
        mode: A ``GameMode`` or its numeric value.
    """
    return build_command(Command.GAMEMODE, int(GameMode(mode)), _check_name(player))


def build_give(player: str, item: int | str, amount: int = 1, damage: int = 0) -> str:
    """Build a ``give`` command spawning items at the player's location.

    Args:
        player: Receiving player.
        item: Item data value or item id.
        amount: Number of items, at least 1.
        damage: Damage (data) value of the item.
    """
    if amount < 1:
        raise ValueError(f"Amount must be at least 1, got {amount}")
    return build_command(
        Command.GIVE, _check_name(player), _check_name(str(item), "Item"), amount, damage
    )


def build_kick(player: str) -> str:
    return build_command(Command.KICK, _check_name(player))


def build_list() -> str:
    return build_command(Command.LIST)


def build_op(player: str) -> str:
    return build_command(Command.OP, _check_name(player))


def build_pardon(player: str) -> str:
    return build_command(Command.PARDON, _check_name(player))


def build_pardon_ip(host: str) -> str:
    return build_command(Command.PARDON_IP, _check_name(host, "Host"))


def build_save_all() -> str:
    return build_command(Command.SAVE_ALL)


def build_save_off() -> str:
    return build_command(Command.SAVE_OFF)


def build_save_on() -> str:
    return build_command(Command.SAVE_ON)


def build_say(message: str) -> str:
    """Build a ``say`` broadcast to every player."""
    return build_command(Command.SAY, _check_text(message))


def build_stop() -> str:
    return build_command(Command.STOP)


def build_tell(player: str, message: str) -> str:
    """Build a ``tell`` whisper that only ``player`` sees."""
    return build_command(Command.TELL, _check_name(player), _check_text(message))


def build_time_add(amount: int) -> str:
    """Build a ``time add`` command. Negative amounts move the clock back."""
    return build_command(Command.TIME_ADD, amount)


def build_time_set(time: int) -> str:
    """Build a ``time set`` command.

    Args:
        time: World time 0-24000, where 0 is dawn, 6000 midday,
              12000 dusk and 18000 midnight.
    """
    if not 0 <= time <= MAX_WORLD_TIME:
        raise ValueError(f"Time must be 0-{MAX_WORLD_TIME}, got {time}")
    return build_command(Command.TIME_SET, time)


def build_toggle_downfall() -> str:
    return build_command(Command.TOGGLE_DOWNFALL)


def build_tp(player: str, target: str) -> str:
    """Build a ``tp`` command moving ``player`` to ``target``'s location."""
    return build_command(Command.TP, _check_name(player), _check_name(target))


def build_whitelist_list() -> str:
    return build_command(Command.WHITELIST_LIST)


def build_whitelist_add(player: str) -> str:
    return build_command(Command.WHITELIST_ADD, _check_name(player))


def build_whitelist_off() -> str:
    return build_command(Command.WHITELIST_OFF)


def build_whitelist_on() -> str:
    return build_command(Command.WHITELIST_ON)


def build_whitelist_reload() -> str:
    return build_command(Command.WHITELIST_RELOAD)


def build_whitelist_remove(player: str) -> str:
    return build_command(Command.WHITELIST_REMOVE, _check_name(player))


def build_xp(player: str, amount: int) -> str:
    """Build an ``xp`` command.

    Negative amounts remove experience progress but not levels.

    Args:
        player: Receiving player.
        amount: Orbs to give, at most 5000 either way.
    """
    if abs(amount) > MAX_XP_PER_COMMAND:
        raise ValueError(
            f"XP amount must be within +/-{MAX_XP_PER_COMMAND}, got {amount}"
        )
    return build_command(Command.XP, _check_name(player), amount)
