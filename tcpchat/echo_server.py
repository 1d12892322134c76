"""Echo server: read one message from each client and send it straight back."""

from __future__ import annotations

import logging
import sys

from tcpchat.sockets import ChatError, check_error, create_server_socket

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
BUFFER_SIZE = 1024
BACKLOG = 3


class EchoServer:
    """A listening TCP socket that echoes one message per connection."""

    def __init__(self, port):
        self._socket = create_server_socket(port, BACKLOG)
        print(f"Server listening on port {self.port}")

    @property
    def port(self):
        """The port the server is bound to."""
        return self._socket.getsockname()[1]

    def serve_one(self):
        """Accept one connection, echo its message and return what was read.

        Raises :class:`ChatError` if accepting fails, for instance once the
        server has been closed.
        """
        try:
            conn, _ = self._socket.accept()
        except OSError:
            check_error(True, "Accept error")
        return self.handle_accept(conn)

    def handle_accept(self, conn):
        """Read one message from ``conn``, send it back and close ``conn``.

        Returns the bytes read, ``b""`` if the client disconnected without
        sending anything, or ``None`` if the read failed.
        """
        try:
            try:
                data = conn.recv(BUFFER_SIZE)
            except OSError:
                logger.error("Read error on client socket %s", conn.fileno())
                return None
            if not data:
                logger.info("Client disconnected.")
                return b""
            text, _, _ = data.partition(b"\x00")
            logger.info("Received: %s", text.decode("utf-8", errors="replace"))
            conn.sendall(data)
            logger.info("Echo message sent")
            return data
        finally:
            conn.close()

    def handle_connections(self):
        """Serve clients one after another until accepting fails."""
        while True:
            self.serve_one()

    def close(self):
        """Stop listening."""
        self._socket.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def main(argv=None):
    """Run the echo server on the default port until interrupted."""
    if argv is None:
        argv = sys.argv[1:]
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        with EchoServer(DEFAULT_PORT) as server:
            server.handle_connections()
    except ChatError as exc:
        print(exc, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())