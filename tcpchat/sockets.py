"""Socket helpers shared by the echo and chat clients and servers."""

from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)

ANY_ADDRESS = "0.0.0.0"
DEFAULT_BACKLOG = 3


class ChatError(RuntimeError):
    """Raised when a socket operation fails."""


def check_error(test, message):
    """Log ``message`` and raise :class:`ChatError` if ``test`` is true."""
    if test:
        logger.error("%s", message)
        raise ChatError(message)


def create_socket():
    """Return a new IPv4 TCP socket."""
    try:
        return socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as exc:
        raise ChatError("Socket creation error") from exc


def create_address(port, ip=None):
    """Return an IPv4 ``(host, port)`` pair.

    Without ``ip`` the address is the wildcard address, as a server binds to.
    A given ``ip`` must be a dotted-quad IPv4 address.
    """
    if ip is None:
        return (ANY_ADDRESS, port)
    try:
        socket.inet_pton(socket.AF_INET, ip)
    except (OSError, TypeError, ValueError):
        check_error(True, "Invalid address/ Address not supported")
    return (ip, port)


def _set_socket_options(sock):
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        reuse_port = getattr(socket, "SO_REUSEPORT", None)
        if reuse_port is not None:
            sock.setsockopt(socket.SOL_SOCKET, reuse_port, 1)
    except OSError as exc:
        raise ChatError("setsockopt() error") from exc


def create_server_socket(port, backlog=DEFAULT_BACKLOG):
    """Return a TCP socket bound to every interface on ``port`` and listening."""
    sock = create_socket()
    try:
        _set_socket_options(sock)
        try:
            sock.bind(create_address(port))
        except (OSError, OverflowError) as exc:
            logger.error("bind failed")
            raise ChatError("bind failed") from exc
        try:
            sock.listen(backlog)
        except OSError as exc:
            logger.error("listen failed")
            raise ChatError("listen failed") from exc
    except ChatError:
        sock.close()
        raise
    return sock


def set_non_blocking(sock):
    """Put ``sock`` into non-blocking mode and return it."""
    try:
        sock.setblocking(False)
    except OSError as exc:
        logger.error("fcntl() error")
        raise ChatError("fcntl() error") from exc
    return sock