"""
简单的客户端网络封装：负责连接服务器、收发 NGP 消息并提供事件队列。
"""
from __future__ import annotations

import logging
import socket
import threading
import time
from queue import Empty, SimpleQueue
from typing import List, Optional

from ngp_nim.shared.constants import BUFFER_SIZE, DEFAULT_HOST, DEFAULT_PORT
from ngp_nim.shared.protocols import DecodeError, Message, MessageReader

logger = logging.getLogger(__name__)


class NgpClient:
    """线程驱动的轻量客户端：接收线程解码服务器消息并放入事件队列。"""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        self.host = host
        self.port = port
        self.sock: Optional[socket.socket] = None
        self._recv_thread: Optional[threading.Thread] = None
        self._running = threading.Event()
        self._reader = MessageReader()
        self.events: SimpleQueue[Message] = SimpleQueue()

    @property
    def connected(self) -> bool:
        return bool(self.sock) and self._running.is_set()

    def connect(self, timeout: float = 5.0) -> bool:
        """连接服务器。"""
        if self.connected:
            return True
        try:
            self.sock = socket.create_connection((self.host, self.port), timeout=timeout)
            # 连接成功后取消超时，由接收线程阻塞读取
            self.sock.settimeout(None)
            self._running.set()
            self._recv_thread = threading.Thread(target=self._recv_loop, name="client-recv", daemon=True)
            self._recv_thread.start()
            return True
        except OSError as e:
            logger.warning(f"连接失败: {e}")
            self.close()
            return False

    def open(self, name: str) -> None:
        self.send(Message.open(name))

    def move(self, pile: int, count: int) -> None:
        self.send(Message.move(pile, count))

    def send(self, msg: Message) -> None:
        self.send_raw(msg.encode())

    def send_raw(self, data: bytes) -> None:
        sock = self.sock
        if sock is None:
            return
        try:
            sock.sendall(data)
        except OSError:
            self.close()

    def drain_events(self) -> List[Message]:
        items: List[Message] = []
        while True:
            try:
                items.append(self.events.get_nowait())
            except Empty:
                break
        return items

    def wait_for(self, msg_type: str, timeout: float = 5.0) -> Optional[Message]:
        """阻塞等待指定类型的消息，途中收到的其他消息被丢弃"""
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            try:
                msg = self.events.get(timeout=remaining)
            except Empty:
                return None
            if msg.type == msg_type:
                return msg

    def close(self) -> None:
        self._running.clear()
        # 调用方线程与接收线程都会走到这里，先取走引用再关闭
        sock, self.sock = self.sock, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()

    # 内部方法
    def _recv_loop(self) -> None:
        sock = self.sock
        try:
            while self._running.is_set() and sock is not None:
                data = sock.recv(BUFFER_SIZE)
                if not data:
                    break
                self._reader.feed(data)
                while True:
                    msg = self._reader.next_message()
                    if msg is None:
                        break
                    self.events.put(msg)
        except DecodeError as e:
            logger.warning(f"服务器发送了非法消息: {e}")
        except OSError:
            pass
        finally:
            self.close()


__all__ = ["NgpClient"]
