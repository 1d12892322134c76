"""Chat server: relay every message it reads to all connected clients."""

from __future__ import annotations

import logging
import selectors
import sys

from tcpchat.sockets import ChatError, check_error, create_server_socket, set_non_blocking

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
BUFFER_SIZE = 1024
MAX_CONNECTIONS = 32


class ChatServer:
    """A non-blocking TCP server that broadcasts each message to every client."""

    def __init__(self, port):
        self._socket = create_server_socket(port, MAX_CONNECTIONS)
        self._closed = False
        self._clients = set()
        try:
            set_non_blocking(self._socket)
            self._selector = selectors.DefaultSelector()
            self._selector.register(self._socket, selectors.EVENT_READ)
        except (ChatError, OSError):
            self._socket.close()
            raise
        print(f"Server listening on port {self.port}")

    @property
    def port(self):
        """The port the server is bound to."""
        return self._socket.getsockname()[1]

    def poll_once(self, timeout=None):
        """Wait up to ``timeout`` seconds for events and handle them.

        New connections are accepted and every message read is sent to all
        connected clients. Returns the messages relayed in this round, each
        cut at its first NUL byte.
        """
        check_error(self._closed, "epoll_wait() error")
        try:
            events = self._selector.select(timeout)
        except (OSError, ValueError):
            check_error(True, "epoll_wait() error")
        messages = []
        for key, _ in events:
            sock = key.fileobj
            if sock is self._socket:
                self._accept_pending()
            elif sock in self._clients:
                messages.extend(self._read_client(sock))
        return messages

    def _accept_pending(self):
        while True:
            try:
                conn, (host, port) = self._socket.accept()
            except BlockingIOError:
                return
            except OSError as exc:
                logger.warning("accept failed: %s", exc)
                return
            logger.info("connected with %s:%s on %s", host, port, conn.fileno())
            set_non_blocking(conn)
            self._selector.register(conn, selectors.EVENT_READ)
            self._clients.add(conn)

    def _read_client(self, conn):
        messages = []
        closing = False
        while True:
            try:
                data = conn.recv(BUFFER_SIZE)
            except BlockingIOError:
                break
            except OSError:
                closing = True
                break
            if not data:
                closing = True
                break
            text, _, _ = data.partition(b"\x00")
            logger.info("message: %s", text.decode("utf-8", errors="replace"))
            self._broadcast(text)
            messages.append(text)
        if closing:
            self._drop(conn)
        return messages

    def _broadcast(self, data):
        if not data:
            return
        for client in list(self._clients):
            try:
                client.send(data)
            except OSError as exc:
                logger.warning("write to %s failed: %s", client.fileno(), exc)

    def _drop(self, conn):
        logger.info("connection %s closed", conn.fileno())
        self._clients.discard(conn)
        try:
            self._selector.unregister(conn)
        except (KeyError, ValueError):
            pass
        conn.close()

    def handle_connections(self):
        """Relay messages until polling fails."""
        while True:
            self.poll_once(None)

    def close(self):
        """Disconnect every client and stop listening."""
        if self._closed:
            return
        self._closed = True
        for client in list(self._clients):
            self._drop(client)
        self._selector.close()
        self._socket.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def main(argv=None):
    """Run the chat server on the default port until interrupted."""
    if argv is None:
        argv = sys.argv[1:]
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        with ChatServer(DEFAULT_PORT) as server:
            server.handle_connections()
    except ChatError as exc:
        print(exc, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())