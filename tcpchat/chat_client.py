"""Interactive chat client: send typed lines and show what the server relays."""

from __future__ import annotations

import logging
import selectors
import sys

from tcpchat.sockets import ChatError, check_error, create_address, create_socket

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
DEFAULT_SERVER_ADDRESS = "127.0.0.1"
BUFFER_SIZE = 1024


class ChatClient:
    """A TCP connection to a chat server."""

    def __init__(self, port, server_address):
        self._socket = create_socket()
        try:
            address = create_address(port, server_address)
            try:
                self._socket.connect(address)
            except (OSError, OverflowError):
                check_error(True, "Connection Failed.")
            self._selector = selectors.DefaultSelector()
            self._selector.register(self._socket, selectors.EVENT_READ)
        except ChatError:
            self._socket.close()
            raise

    def send(self, message):
        """Send ``message`` followed by a NUL terminator."""
        self._socket.sendall(message.encode("utf-8") + b"\x00")

    def receive(self, timeout=None):
        """Wait up to ``timeout`` seconds and return the text the server sent.

        Returns ``""`` if nothing arrived in time. The text ends at the first
        NUL byte. Raises :class:`ChatError` if the read fails or the server
        has closed the connection.
        """
        events = self._selector.select(timeout)
        logger.info("queued_event_count: %s", len(events))
        if not events:
            return ""
        try:
            data = self._socket.recv(BUFFER_SIZE)
        except OSError:
            check_error(True, "read() error")
        check_error(not data, "Server closed connection.")
        text, _, _ = data.partition(b"\x00")
        return text.decode("utf-8", errors="replace")

    def handle_connections(self, lines=None, output=None):
        """Prompt for lines, send each one and write the reply to ``output``.

        Stops when ``lines`` is exhausted.
        """
        if lines is None:
            lines = sys.stdin
        if output is None:
            output = sys.stdout
        source = iter(lines)
        while True:
            output.write("input: ")
            output.flush()
            line = next(source, None)
            if line is None:
                return
            self.send(line[:-1] if line.endswith("\n") else line)
            reply = self.receive(None)
            output.write(f"msg: {reply}\n")
            output.flush()

    def close(self):
        """Close the connection."""
        self._selector.close()
        self._socket.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def main(argv=None):
    """Chat with the local server, reading lines from standard input."""
    if argv is None:
        argv = sys.argv[1:]
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")
    try:
        with ChatClient(DEFAULT_PORT, DEFAULT_SERVER_ADDRESS) as client:
            client.handle_connections(sys.stdin, sys.stdout)
    except ChatError as exc:
        print(exc, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())