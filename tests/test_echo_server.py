import logging
import socket
import threading

import pytest

from tcpchat.echo_client import EchoClient
from tcpchat.echo_server import BUFFER_SIZE, EchoServer
from tcpchat.sockets import ChatError


@pytest.fixture
def server():
    srv = EchoServer(0)
    yield srv
    srv.close()


def _serve_in_thread(srv):
    result = {}

    def run():
        try:
            result["data"] = srv.serve_one()
        except ChatError as exc:
            result["error"] = exc

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread, result


def test_port_is_bound(server):
    port = server.port
    assert 0 < port < 65536


def test_prints_listening_message(capsys):
    with EchoServer(0) as srv:
        out = capsys.readouterr().out
        assert out == f"Server listening on port {srv.port}\n"


def test_echo_round_trip_with_client(server):
    thread, result = _serve_in_thread(server)
    with EchoClient(server.port, "127.0.0.1") as client:
        reply = client.send_and_receive_message("hello")
    thread.join(timeout=5)
    assert reply == "hello"
    assert result["data"] == b"hello"


def test_echo_raw_socket(server):
    thread, result = _serve_in_thread(server)
    with socket.create_connection(("127.0.0.1", server.port), timeout=5) as sock:
        sock.sendall(b"ping pong")
        reply = sock.recv(BUFFER_SIZE)
    thread.join(timeout=5)
    assert reply == b"ping pong"
    assert result["data"] == reply


def test_client_disconnect_returns_empty(server, caplog):
    caplog.set_level(logging.INFO, logger="tcpchat.echo_server")
    thread, result = _serve_in_thread(server)
    sock = socket.create_connection(("127.0.0.1", server.port), timeout=5)
    sock.close()
    thread.join(timeout=5)
    assert result["data"] == b""
    assert "Client disconnected." in caplog.messages


def test_logs_received_and_sent(server, caplog):
    caplog.set_level(logging.INFO, logger="tcpchat.echo_server")
    thread, _ = _serve_in_thread(server)
    with socket.create_connection(("127.0.0.1", server.port), timeout=5) as sock:
        sock.sendall(b"abc")
        sock.recv(BUFFER_SIZE)
    thread.join(timeout=5)
    assert "Received: abc" in caplog.messages
    assert "Echo message sent" in caplog.messages


def test_serve_one_after_close_raises():
    srv = EchoServer(0)
    srv.close()
    with pytest.raises(ChatError, match="Accept error"):
        srv.serve_one()


def test_invalid_port_raises_bind_failed():
    with pytest.raises(ChatError, match="bind failed"):
        EchoServer(70000)


class _FailingConn:
    def __init__(self):
        self.closed = False

    def recv(self, size):
        raise OSError("boom")

    def fileno(self):
        return 42

    def sendall(self, data):
        raise AssertionError("must not send")

    def close(self):
        self.closed = True


def test_handle_accept_read_error(server, caplog):
    caplog.set_level(logging.INFO, logger="tcpchat.echo_server")
    conn = _FailingConn()
    assert server.handle_accept(conn) is None
    assert conn.closed is True
    assert "Read error on client socket 42" in caplog.messages