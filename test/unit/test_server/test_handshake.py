"""
Tests for the OPEN/WAIT handshake.
"""

import socket

from ngp_nim.shared.constants import (
    ERR_ALREADY_OPEN,
    ERR_INVALID,
    ERR_LONG_NAME,
    MSG_FAIL,
    MSG_WAIT,
)
from ngp_nim.shared.protocols import Message, error_text
from ngp_nim.server.network.handshake import SessionHandshake


def test_open_replies_wait(connection, read_messages):
    player, client = connection()
    handshake = SessionHandshake(player)
    assert handshake.handle(Message.open("Alice"))
    assert handshake.opened
    assert player.name == "Alice"
    player.close()
    assert [m.type for m in read_messages(client)] == [MSG_WAIT]


def test_second_open_is_already_open(connection, read_messages):
    player, client = connection()
    handshake = SessionHandshake(player)
    assert handshake.handle(Message.open("Alice"))
    assert not handshake.handle(Message.open("Bob"))
    assert player.name == "Alice"
    player.close()
    assert read_messages(client) == [Message.wait(), Message.fail(ERR_ALREADY_OPEN)]


def test_non_open_is_invalid(connection, read_messages):
    player, client = connection()
    handshake = SessionHandshake(player)
    assert not handshake.handle(Message.move(1, 1))
    assert not handshake.opened
    player.close()
    assert read_messages(client) == [Message.fail(ERR_INVALID)]


def test_non_open_after_open_is_invalid(connection, read_messages):
    player, client = connection()
    handshake = SessionHandshake(player)
    assert handshake.handle(Message.open("Alice"))
    assert not handshake.handle(Message.wait())
    assert handshake.opened
    player.close()
    assert read_messages(client) == [Message.wait(), Message.fail(ERR_INVALID)]


def test_empty_name_is_invalid(connection, read_messages):
    player, client = connection()
    assert not SessionHandshake(player).handle(Message.open(""))
    assert not player.opened
    player.close()
    assert read_messages(client) == [Message.fail(ERR_INVALID)]


def test_long_name_from_constructed_message(connection, read_messages):
    player, client = connection()
    assert not SessionHandshake(player).handle(Message.open("B" * 73))
    player.close()
    assert read_messages(client) == [Message.fail(ERR_LONG_NAME)]


def test_run_reads_split_frame(connection, read_messages):
    player, client = connection()
    client.sendall(b"0|11|OP")
    client.sendall(b"EN|Alice|")
    assert SessionHandshake(player).run()
    assert player.name == "Alice"
    assert len(player.recv_buffer) == 0
    player.close()
    assert read_messages(client) == [Message.wait()]


def test_run_keeps_bytes_after_open(connection):
    player, client = connection()
    client.sendall(b"0|11|OPEN|Alice|0|09|MOVE|")
    assert SessionHandshake(player).run()
    assert bytes(player.recv_buffer) == b"0|09|MOVE|"


def test_run_long_name_on_the_wire(connection, read_messages):
    player, client = connection()
    client.sendall(b"0|79|OPEN|" + b"B" * 73 + b"|")
    assert not SessionHandshake(player).run()
    player.close()
    messages = read_messages(client)
    assert [m.type for m in messages] == [MSG_FAIL]
    assert messages[0].fields == (error_text(ERR_LONG_NAME),)


def test_run_bad_frame(connection, read_messages):
    player, client = connection()
    client.sendall(b"hello there")
    assert not SessionHandshake(player).run()
    player.close()
    assert read_messages(client) == [Message.fail(ERR_INVALID)]


def test_run_disconnect_before_open(connection):
    player, client = connection()
    client.sendall(b"0|11|OPEN|Al")
    client.shutdown(socket.SHUT_RDWR)
    assert not SessionHandshake(player).run()
    assert not player.opened
