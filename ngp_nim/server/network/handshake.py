"""
握手

每条连接在进入对局前必须且只能完成一次 OPEN/WAIT 交换：
未打开 -> 已打开，单向，不可回退。
"""

import logging

from ngp_nim.shared.constants import (
    ERR_ALREADY_OPEN,
    ERR_INVALID,
    ERR_LONG_NAME,
    MAX_NAME_LEN,
    MSG_OPEN,
)
from ngp_nim.shared.protocols import DecodeError, Message
from ngp_nim.server.models import PlayerDisconnected, PlayerSession

logger = logging.getLogger(__name__)


class SessionHandshake:
    """单条连接的握手门"""

    def __init__(self, player: PlayerSession):
        self.player = player

    @property
    def opened(self) -> bool:
        return self.player.opened

    def handle(self, msg: Message) -> bool:
        """处理一条已解码的消息，成功打开时回复 WAIT 并返回 True"""
        if msg.type != MSG_OPEN:
            return self._reject(ERR_INVALID)
        if self.player.opened:
            return self._reject(ERR_ALREADY_OPEN)

        name = msg.fields[0]
        if not name:
            return self._reject(ERR_INVALID)
        if len(name.encode("utf-8")) > MAX_NAME_LEN:
            return self._reject(ERR_LONG_NAME)

        self.player.set_name(name)
        logger.info(f"玩家 {name} 已打开游戏")
        self.player.send(Message.wait())
        return True

    def run(self) -> bool:
        """读取连接直到握手成功或失败

        解码失败时回复对应的 FAIL；连接断开时静默失败。
        """
        try:
            msg = self.player.next_message()
        except DecodeError as e:
            return self._reject(e.code)
        except PlayerDisconnected as e:
            logger.info(f"握手期间连接断开: {e}")
            return False
        return self.handle(msg)

    def _reject(self, code: int) -> bool:
        logger.info(f"握手失败: player={self.player.label}, code={code}")
        self.player.send(Message.fail(code))
        return False


__all__ = ["SessionHandshake"]
