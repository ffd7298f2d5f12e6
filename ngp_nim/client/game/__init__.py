"""
客户端游戏逻辑模块

把服务器推送的 NAME/PLAY/OVER/FAIL 消息折叠成界面需要的本地视图：
自己的编号、对手名字、棋盘、轮到谁、最近的错误与胜负。

该模块不依赖 UI，便于被界面层和测试直接调用。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ngp_nim.shared.constants import (
    ERROR_NAMES,
    FORFEIT_MARKER,
    INITIAL_PILES,
    MSG_FAIL,
    MSG_NAME,
    MSG_OVER,
    MSG_PLAY,
    MSG_WAIT,
)
from ngp_nim.shared.protocols import Message, parse_board, parse_error_text


@dataclass
class ClientGame:
    """客户端本地对局视图"""

    name: str
    player_number: int = 0
    opponent: Optional[str] = None
    piles: Tuple[int, ...] = field(default=INITIAL_PILES)
    current_player: int = 0
    waiting: bool = False
    last_error: Optional[int] = None
    winner: int = 0
    forfeit: bool = False

    @property
    def started(self) -> bool:
        return self.player_number != 0

    @property
    def over(self) -> bool:
        return self.winner != 0

    @property
    def my_turn(self) -> bool:
        return self.started and not self.over and self.current_player == self.player_number

    def apply(self, msg: Message) -> None:
        """根据一条服务器消息更新视图"""
        if msg.type == MSG_WAIT:
            self.waiting = True
        elif msg.type == MSG_NAME:
            self.player_number = int(msg.fields[0])
            self.opponent = msg.fields[1]
            self.waiting = False
        elif msg.type == MSG_PLAY:
            self.current_player = int(msg.fields[0])
            self.piles = parse_board(msg.fields[1])
            self.last_error = None
        elif msg.type == MSG_OVER:
            self.winner = int(msg.fields[0])
            self.piles = parse_board(msg.fields[1])
            self.forfeit = msg.fields[2] == FORFEIT_MARKER
        elif msg.type == MSG_FAIL:
            self.last_error = parse_error_text(msg.fields[0])

    def status_text(self) -> str:
        if self.over:
            result = "You win" if self.winner == self.player_number else "You lose"
            return f"{result}{' (forfeit)' if self.forfeit else ''}"
        if self.last_error is not None:
            return f"Rejected: {ERROR_NAMES.get(self.last_error, 'Error')}"
        if not self.started:
            return "Waiting for an opponent..." if self.waiting else "Connecting..."
        if self.my_turn:
            return f"Your move against {self.opponent}"
        return f"{self.opponent} is thinking..."


__all__ = ["ClientGame"]
