"""
对局会话

驱动两条已完成握手的连接完成一局 Nim：交换名字、广播棋盘、
轮流读取当前玩家的 MOVE，直到石子取完或有一方掉线。

同一局内严格串行：任何时刻只读取轮到的玩家的连接。
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from ngp_nim.shared.constants import ERR_ALREADY_PLAYING, ERR_INVALID, MSG_MOVE
from ngp_nim.shared.protocols import DecodeError, Message
from ngp_nim.server.game.board import GameState, MoveError
from ngp_nim.server.models import PlayerDisconnected, PlayerSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """一局的结果；winner 为 0 表示对局被取消"""

    winner: int
    board: Tuple[int, ...]
    forfeit: bool = False


class GameSession:
    """两名玩家之间的一局游戏

    Args:
        player1: 先手玩家（已打开）
        player2: 后手玩家（已打开）
        cancel: 可选的停止信号；被设置后在下一次读取前结束对局
    """

    def __init__(
        self,
        player1: PlayerSession,
        player2: PlayerSession,
        cancel: Optional[threading.Event] = None,
    ):
        self.players = (player1, player2)
        self.state = GameState.new()
        self.cancel = cancel or threading.Event()
        self.result: Optional[MatchResult] = None

    def player(self, number: int) -> PlayerSession:
        return self.players[number - 1]

    def opponent(self, number: int) -> PlayerSession:
        return self.players[2 - number]

    # 对局生命周期
    def run(self) -> Optional[MatchResult]:
        """运行整局，结束时关闭两条连接"""
        try:
            if not self._check_players():
                return None
            self._start()
            self.result = self._loop()
            return self.result
        finally:
            for p in self.players:
                p.close()

    def _check_players(self) -> bool:
        p1, p2 = self.players
        if not (p1.opened and p2.opened):
            raise ValueError("both players must be opened before the game starts")
        if p1.name == p2.name:
            logger.info(f"两名玩家同名 ({p1.name})，拒绝开局")
            self.broadcast(Message.fail(ERR_ALREADY_PLAYING))
            return False
        return True

    def _start(self) -> None:
        for number, p in enumerate(self.players, start=1):
            p.player_number = number
            p.playing = True
        p1, p2 = self.players
        logger.info(f"对局开始: {p1.name} vs {p2.name}")
        p1.send(Message.name(1, p2.name))
        p2.send(Message.name(2, p1.name))
        self.broadcast(Message.play(self.state.current_player, self.state.board))

    def _loop(self) -> MatchResult:
        while not self.state.is_over():
            if self.cancel.is_set():
                return self._cancelled()

            number = self.state.current_player
            current = self.player(number)
            try:
                msg = current.next_message()
            except PlayerDisconnected as e:
                # stop() 先设置取消信号再关闭连接，此时的断开不算弃权
                if self.cancel.is_set():
                    return self._cancelled()
                logger.info(f"玩家 {number} 断开连接: {e}")
                return self._forfeit(winner=3 - number)
            except DecodeError as e:
                if self.cancel.is_set():
                    return self._cancelled()
                logger.info(f"玩家 {number} 发送了非法消息: {e}")
                current.send(Message.fail(e.code))
                current.close()
                return self._forfeit(winner=3 - number)

            if msg.type != MSG_MOVE:
                logger.info(f"玩家 {number} 发送了 {msg.type}，期望 MOVE")
                current.send(Message.fail(ERR_INVALID))
                continue

            pile, count = (int(f) for f in msg.fields)
            logger.info(f"玩家 {number} MOVE pile={pile} count={count}")
            try:
                self.state.apply_move(pile, count)
            except MoveError as e:
                logger.info(f"非法走子: {e}")
                current.send(Message.fail(e.code))
                continue

            if self.state.is_over():
                break
            self.broadcast(Message.play(self.state.current_player, self.state.board))

        # 最后一步之后 current_player 已切换，取走最后一颗石子的是另一方
        winner = 3 - self.state.current_player
        logger.info(f"对局结束，玩家 {winner} 获胜")
        self.broadcast(Message.over(winner, self.state.board))
        return MatchResult(winner, self.state.snapshot())

    def _cancelled(self) -> MatchResult:
        logger.info("对局被取消")
        return MatchResult(0, self.state.snapshot())

    def _forfeit(self, winner: int) -> MatchResult:
        logger.info(f"玩家 {winner} 因对手弃权获胜")
        self.broadcast(Message.over(winner, self.state.board, forfeit=True))
        return MatchResult(winner, self.state.snapshot(), forfeit=True)

    # 发送/广播
    def broadcast(self, msg: Message) -> None:
        for p in self.players:
            p.send(msg)


__all__ = ["GameSession", "MatchResult"]
