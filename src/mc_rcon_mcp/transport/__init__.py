"""Transport layer: the TCP socket and the authenticated session around it."""

from .tcp_connection import DEFAULT_PORT, RconSession, open_session
