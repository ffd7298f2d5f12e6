"""
Tests for the two-player turn loop, driven over socket pairs.

Client input is written before the session runs; the session only reads the
turn holder's socket, so the frames are consumed in turn order.
"""

import socket
import threading

import pytest

from ngp_nim.shared.constants import (
    ERR_ALREADY_PLAYING,
    ERR_INVALID,
    ERR_PILE_INDEX,
    ERR_QUANTITY,
)
from ngp_nim.shared.protocols import Message
from ngp_nim.server.game import GameSession, MatchResult


@pytest.fixture
def players(connection):
    alice, alice_sock = connection("Alice")
    bob, bob_sock = connection("Bob")
    return alice, alice_sock, bob, bob_sock


def send_moves(sock, *moves):
    sock.sendall(b"".join(Message.move(p, c).encode() for p, c in moves))


def test_full_game(players, read_messages):
    alice, alice_sock, bob, bob_sock = players
    send_moves(alice_sock, (0, 1), (2, 5), (4, 9))
    send_moves(bob_sock, (1, 3), (3, 7))

    result = GameSession(alice, bob).run()

    assert result == MatchResult(1, (0, 0, 0, 0, 0))
    boards = [
        (1, "1 3 5 7 9"),
        (2, "0 3 5 7 9"),
        (1, "0 0 5 7 9"),
        (2, "0 0 0 7 9"),
        (1, "0 0 0 0 9"),
    ]
    plays = [Message.play(turn, board) for turn, board in boards]
    over = Message.over(1, "0 0 0 0 0")
    assert read_messages(alice_sock) == [Message.name(1, "Bob")] + plays + [over]
    assert read_messages(bob_sock) == [Message.name(2, "Alice")] + plays + [over]
    assert alice.closed and bob.closed


def test_startup_frames_on_the_wire(players):
    alice, alice_sock, bob, bob_sock = players
    alice_sock.shutdown(socket.SHUT_WR)
    GameSession(alice, bob).run()
    data = b""
    while True:
        chunk = alice_sock.recv(4096)
        if not chunk:
            break
        data += chunk
    assert data.startswith(b"0|11|NAME|1|Bob|0|17|PLAY|1|1 3 5 7 9|")


def test_bad_moves_keep_turn(players, read_messages):
    alice, alice_sock, bob, bob_sock = players
    alice_sock.sendall(
        Message.move(7, 1).encode()
        + Message.move(0, 5).encode()
        + Message.wait().encode()
        + Message.move(0, 1).encode()
    )
    bob_sock.shutdown(socket.SHUT_WR)

    result = GameSession(alice, bob).run()

    assert result == MatchResult(1, (0, 3, 5, 7, 9), forfeit=True)
    alice_msgs = read_messages(alice_sock)
    assert alice_msgs[2:] == [
        Message.fail(ERR_PILE_INDEX),
        Message.fail(ERR_QUANTITY),
        Message.fail(ERR_INVALID),
        Message.play(2, "0 3 5 7 9"),
        Message.over(1, "0 3 5 7 9", forfeit=True),
    ]
    bob_msgs = read_messages(bob_sock)
    assert bob_msgs[-2:] == [
        Message.play(2, "0 3 5 7 9"),
        Message.over(1, "0 3 5 7 9", forfeit=True),
    ]


def test_disconnect_on_first_turn(players, read_messages):
    alice, alice_sock, bob, bob_sock = players
    alice_sock.close()

    result = GameSession(alice, bob).run()

    assert result == MatchResult(2, (1, 3, 5, 7, 9), forfeit=True)
    assert read_messages(bob_sock) == [
        Message.name(2, "Alice"),
        Message.play(1, "1 3 5 7 9"),
        Message.over(2, "1 3 5 7 9", forfeit=True),
    ]


def test_disconnect_mid_frame(players):
    alice, alice_sock, bob, bob_sock = players
    alice_sock.sendall(b"0|09|MOVE|1|")
    alice_sock.shutdown(socket.SHUT_WR)

    result = GameSession(alice, bob).run()

    assert result.winner == 2
    assert result.forfeit


def test_invalid_frame_ends_session(players, read_messages):
    alice, alice_sock, bob, bob_sock = players
    send_moves(alice_sock, (2, 2))
    bob_sock.sendall(b"0|09|MOVE|a|1|")

    result = GameSession(alice, bob).run()

    assert result == MatchResult(1, (1, 3, 3, 7, 9), forfeit=True)
    bob_msgs = read_messages(bob_sock)
    assert bob_msgs[-1] == Message.fail(ERR_INVALID)
    assert Message.over(1, "1 3 3 7 9", forfeit=True) not in bob_msgs
    assert read_messages(alice_sock)[-1] == Message.over(1, "1 3 3 7 9", forfeit=True)


def test_frames_split_across_reads(players):
    alice, alice_sock, bob, bob_sock = players
    bob_sock.shutdown(socket.SHUT_WR)

    def drip():
        for byte in Message.move(4, 3).encode():
            alice_sock.sendall(bytes([byte]))

    t = threading.Thread(target=drip)
    t.start()
    result = GameSession(alice, bob).run()
    t.join()

    assert result == MatchResult(1, (1, 3, 5, 7, 6), forfeit=True)


def test_duplicate_names_rejected(connection, read_messages):
    first, first_sock = connection("Alice")
    second, second_sock = connection("Alice")

    assert GameSession(first, second).run() is None

    assert read_messages(first_sock) == [Message.fail(ERR_ALREADY_PLAYING)]
    assert read_messages(second_sock) == [Message.fail(ERR_ALREADY_PLAYING)]


def test_unopened_player_is_an_error(connection):
    alice, _ = connection("Alice")
    stranger, _ = connection()
    with pytest.raises(ValueError):
        GameSession(alice, stranger).run()
    assert alice.closed and stranger.closed


def test_cancelled_before_first_move(players, read_messages):
    alice, alice_sock, bob, bob_sock = players
    cancel = threading.Event()
    cancel.set()

    result = GameSession(alice, bob, cancel=cancel).run()

    assert result == MatchResult(0, (1, 3, 5, 7, 9))
    assert [m.type for m in read_messages(bob_sock)] == ["NAME", "PLAY"]


def test_cancelled_while_waiting_for_move(players, read_messages):
    alice, alice_sock, bob, bob_sock = players
    cancel = threading.Event()
    game = GameSession(alice, bob, cancel=cancel)

    t = threading.Thread(target=game.run)
    t.start()
    # same order as a server shutdown: signal first, then close the sockets
    cancel.set()
    alice.close()
    bob.close()
    t.join(5)

    assert not t.is_alive()
    assert game.result == MatchResult(0, (1, 3, 5, 7, 9))
    assert "OVER" not in [m.type for m in read_messages(bob_sock)]
