"""
游戏逻辑模块

实现 Nim 的核心逻辑：棋盘状态（board）与两名玩家之间的回合制对局（match）。
"""

from ngp_nim.server.game.board import GameState, MoveError
from ngp_nim.server.game.match import GameSession, MatchResult

__all__ = ["GameSession", "GameState", "MatchResult", "MoveError"]
