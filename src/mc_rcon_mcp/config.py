"""Connection settings read from ``RCON_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .transport.tcp_connection import DEFAULT_PORT

ENV_PREFIX = "RCON_"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_TIMEOUT = 10.0


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}PORT must be an integer, got {value!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"{ENV_PREFIX}PORT must be 1-65535, got {port}")
    return port


def _parse_timeout(value: str) -> float | None:
    if not value.strip():
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}TIMEOUT must be a number, got {value!r}") from None
    if timeout < 0:
        raise ValueError(f"{ENV_PREFIX}TIMEOUT must not be negative, got {timeout}")
    # 0 disables the timeout
    return timeout or None


@dataclass(frozen=True)
class RconSettings:
    """Where and how to connect."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    password: str = field(default="", repr=False)
    timeout: float | None = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RconSettings:
        """Build settings from ``RCON_HOST``, ``RCON_PORT``, ``RCON_PASSWORD``,
        ``RCON_TIMEOUT`` and ``RCON_LOG_LEVEL``, falling back to defaults."""
        env = os.environ if environ is None else environ
        kwargs: dict = {}
        if f"{ENV_PREFIX}HOST" in env:
            kwargs["host"] = env[f"{ENV_PREFIX}HOST"]
        if f"{ENV_PREFIX}PORT" in env:
            kwargs["port"] = _parse_port(env[f"{ENV_PREFIX}PORT"])
        if f"{ENV_PREFIX}PASSWORD" in env:
            kwargs["password"] = env[f"{ENV_PREFIX}PASSWORD"]
        if f"{ENV_PREFIX}TIMEOUT" in env:
            kwargs["timeout"] = _parse_timeout(env[f"{ENV_PREFIX}TIMEOUT"])
        if f"{ENV_PREFIX}LOG_LEVEL" in env:
            kwargs["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"].upper()
        return cls(**kwargs)
