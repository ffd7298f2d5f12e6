"""
数据模型

玩家会话：封装一条客户端连接的接收缓冲、握手得到的名字、玩家编号与对局状态。
"""

from __future__ import annotations

import logging
import socket
from typing import Optional, Tuple

from ngp_nim.shared.constants import BUFFER_SIZE
from ngp_nim.shared.protocols import Message, MessageReader

logger = logging.getLogger(__name__)


class PlayerDisconnected(Exception):
    """连接已关闭或读取失败"""


class PlayerSession:
    """玩家会话，封装连接与玩家信息

    ``conn`` 只需提供 ``recv``、``sendall`` 与 ``close``（通常是 socket）。
    接收缓冲只属于本会话，同一时刻只有一个线程读取它。
    """

    def __init__(self, conn: socket.socket, addr: Optional[Tuple[str, int]] = None):
        self.conn = conn
        self.addr = addr
        self.name: Optional[str] = None
        self.opened = False
        self.player_number = 0
        self.playing = False
        self.closed = False
        self._reader = MessageReader()

    @property
    def label(self) -> str:
        return self.name or (f"{self.addr[0]}:{self.addr[1]}" if self.addr else "?")

    @property
    def recv_buffer(self) -> bytearray:
        return self._reader.buffer

    def set_name(self, name: str) -> None:
        """名字只能设置一次"""
        if self.opened:
            raise RuntimeError(f"player {self.name!r} is already open")
        self.name = name
        self.opened = True

    def read_more(self) -> None:
        """从连接读取一批数据追加到接收缓冲

        Raises:
            PlayerDisconnected: 对端关闭连接或读取出错。
        """
        if self.closed:
            raise PlayerDisconnected(self.label)
        try:
            data = self.conn.recv(BUFFER_SIZE)
        except OSError as e:
            raise PlayerDisconnected(f"{self.label}: {e}") from e
        if not data:
            raise PlayerDisconnected(f"{self.label}: connection closed")
        self._reader.feed(data)

    def next_message(self) -> Message:
        """返回下一条完整消息；缓冲中不足一条时阻塞读取

        Raises:
            DecodeError: 缓冲中的帧非法。
            PlayerDisconnected: 读到完整消息之前连接断开。
        """
        while True:
            msg = self._reader.next_message()
            if msg is not None:
                return msg
            self.read_more()

    def send(self, msg: Message) -> bool:
        """发送一条消息；失败时记录日志并返回 False"""
        if self.closed:
            return False
        try:
            self.conn.sendall(msg.encode())
        except OSError as e:
            logger.warning(f"发送 {msg.type} 到 {self.label} 失败: {e}")
            return False
        return True

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.playing = False
        try:
            self.conn.shutdown(socket.SHUT_RDWR)
        except (OSError, AttributeError):
            pass
        try:
            self.conn.close()
        except OSError:
            pass


__all__ = ["PlayerDisconnected", "PlayerSession"]
