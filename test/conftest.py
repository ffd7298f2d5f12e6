"""
Pytest configuration and shared fixtures for the NGP Nim server.
"""

import os
import socket
import sys

import pytest

# Add the project root to path for testing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ngp_nim.shared.protocols import MessageReader  # noqa: E402
from ngp_nim.server.models import PlayerSession  # noqa: E402


@pytest.fixture
def connection():
    """Factory for (server-side PlayerSession, client-side socket) pairs."""
    opened = []

    def _make(name=None):
        server_end, client_end = socket.socketpair()
        client_end.settimeout(5.0)
        server_end.settimeout(5.0)
        player = PlayerSession(server_end, ("test", len(opened)))
        if name is not None:
            player.set_name(name)
        opened.append((player, client_end))
        return player, client_end

    yield _make

    for player, client_end in opened:
        player.close()
        client_end.close()


@pytest.fixture
def read_messages():
    """Read every frame a client socket receives until the server closes it."""

    def _read(sock):
        reader = MessageReader()
        while True:
            try:
                data = sock.recv(4096)
            except OSError:
                break
            if not data:
                break
            reader.feed(data)
        messages = []
        while True:
            msg = reader.next_message()
            if msg is None:
                return messages
            messages.append(msg)

    return _read
