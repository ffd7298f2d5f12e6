"""
Nim 棋盘状态

五堆石子与当前行动玩家。状态只通过 apply_move 修改，非法走子不改变任何数据。
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from ngp_nim.shared.constants import (
    ERR_PILE_INDEX,
    ERR_QUANTITY,
    FIRST_PLAYER,
    INITIAL_PILES,
    PILE_COUNT,
)
from ngp_nim.shared.protocols import ProtocolError, format_board


class MoveError(ProtocolError):
    """非法走子（堆序号或数量错误），code 为 ERR_PILE_INDEX 或 ERR_QUANTITY"""


@dataclass
class GameState:
    """
    棋盘状态类，保存各堆石子数量和轮到的玩家（1 或 2）。
    """

    piles: List[int] = field(default_factory=lambda: list(INITIAL_PILES))
    current_player: int = FIRST_PLAYER

    @classmethod
    def new(cls) -> "GameState":
        return cls()

    def apply_move(self, pile: int, count: int) -> None:
        """从第 pile 堆取走 count 颗石子，并交换行动玩家

        Raises:
            MoveError: 堆序号不在 [0, 4]，或数量不在 [1, 当前堆大小]。
        """
        if pile < 0 or pile >= PILE_COUNT:
            raise MoveError(ERR_PILE_INDEX, f"pile {pile}")
        if count <= 0 or count > self.piles[pile]:
            raise MoveError(ERR_QUANTITY, f"cannot take {count} from pile {pile}")
        self.piles[pile] -= count
        self.current_player = 2 if self.current_player == 1 else 1

    def is_over(self) -> bool:
        return all(p == 0 for p in self.piles)

    @property
    def board(self) -> str:
        """线协议中的棋盘文本，例如 ``"1 3 5 7 9"``"""
        return format_board(self.piles)

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self.piles)
