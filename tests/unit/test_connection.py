"""
Unit tests for the Connection wrapper.
"""

import socket

import pytest

from rawhttp.core import Connection, ConnectionState


@pytest.fixture
def pair():
    client, server_side = socket.socketpair()
    client.settimeout(5.0)
    yield client, server_side
    client.close()
    server_side.close()


class TestConnection:

    def test_initial_state(self, pair):
        _, server_side = pair
        conn = Connection(socket=server_side, address=("10.0.0.1", 1234))

        assert conn.state is ConnectionState.ACCEPTED
        assert conn.client_ip == "10.0.0.1"
        assert len(conn.id) == 8
        assert not conn.closed

    def test_reader_is_buffered(self, pair):
        client, server_side = pair
        conn = Connection(socket=server_side, address=("", 0))

        client.sendall(b"GET / HT")
        client.sendall(b"TP/1.1\r\nrest")
        assert conn.reader.readline() == b"GET / HTTP/1.1\r\n"
        assert conn.reader.read(4) == b"rest"

    def test_send(self, pair):
        client, server_side = pair
        conn = Connection(socket=server_side, address=("", 0))

        conn.send(b"HTTP/1.1 200 OK\r\n\r\n")
        assert client.recv(1024) == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_close_is_idempotent(self, pair):
        client, server_side = pair
        conn = Connection(socket=server_side, address=("", 0))

        conn.close()
        conn.close()

        assert conn.closed
        assert server_side.fileno() == -1
        assert client.recv(1024) == b""  # peer sees EOF

    def test_context_manager_closes_on_error(self, pair):
        _, server_side = pair
        conn = Connection(socket=server_side, address=("", 0))

        with pytest.raises(RuntimeError):
            with conn:
                raise RuntimeError("handler blew up")

        assert conn.state is ConnectionState.CLOSED
        assert server_side.fileno() == -1

    def test_close_with_unread_input(self, pair):
        """Bytes the client sent but nobody read must not break close()."""
        client, server_side = pair
        conn = Connection(socket=server_side, address=("", 0))

        client.sendall(b"x" * 10000)
        conn.close()
        assert conn.closed

    def test_timeout_applied(self, pair):
        _, server_side = pair
        Connection(socket=server_side, address=("", 0), timeout=0.05)
        assert server_side.gettimeout() == 0.05

    def test_read_times_out(self, pair):
        _, server_side = pair
        conn = Connection(socket=server_side, address=("", 0), timeout=0.05)

        with pytest.raises(OSError):
            conn.reader.readline()
