"""Echo client: send one message to the server and print what comes back."""

from __future__ import annotations

import os
import socket
import sys

from tcpchat.sockets import ChatError, check_error, create_address, create_socket

DEFAULT_PORT = 8080
DEFAULT_SERVER_ADDRESS = "127.0.0.1"
BUFFER_SIZE = 1024

SERVER_CLOSED = "Server closed connection.\n"
READ_ERROR = "Read error.\n"


class EchoClient:
    """A TCP connection to an echo server."""

    def __init__(self, port, server_address):
        self._socket = create_socket()
        try:
            address = create_address(port, server_address)
            try:
                self._socket.connect(address)
            except (OSError, OverflowError):
                check_error(True, "Connection Failed.")
        except ChatError:
            self._socket.close()
            raise

    def send_and_receive_message(self, message):
        """Send ``message`` and return the server's reply as text.

        The reply is read in a single read of at most 1024 bytes and ends at
        the first NUL byte. A closed connection or a failed read is reported
        by the returned text rather than by an exception.
        """
        self._socket.sendall(message.encode("utf-8"))
        print(f"Sent: {message}")
        try:
            data = self._socket.recv(BUFFER_SIZE)
        except OSError:
            return READ_ERROR
        if not data:
            return SERVER_CLOSED
        text, _, _ = data.partition(b"\x00")
        return text.decode("utf-8", errors="replace")

    def close(self):
        """Close the connection."""
        self._socket.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def read_args(argv):
    """Return the message from ``argv`` (program name first).

    Without a message the usage is printed and the program exits with status 1.
    """
    if len(argv) <= 1:
        program = argv[0] if argv else "echo-client"
        print(f"Usage: {program} <message>")
        raise SystemExit(1)
    return argv[1]


def main(argv=None):
    """Send the message given on the command line to the local echo server."""
    if argv is None:
        argv = sys.argv[1:]
    program = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "echo-client"
    message = read_args([program, *argv])
    try:
        with EchoClient(DEFAULT_PORT, DEFAULT_SERVER_ADDRESS) as client:
            response = client.send_and_receive_message(message)
    except ChatError as exc:
        print(exc, file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Socket error: {exc}", file=sys.stderr)
        return 1
    print(f"Received: {response}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())