"""
网络通信模块

处理 Socket 连接、握手与配对：每条连接在独立线程中完成握手，
已打开的玩家两两配对后交给独立的对局线程。
"""

from __future__ import annotations

import logging
import socket
import threading
from typing import Dict, Optional, Tuple

from ngp_nim.shared.constants import DEFAULT_HOST, DEFAULT_PORT, LISTEN_BACKLOG
from ngp_nim.server.game import GameSession, MatchResult
from ngp_nim.server.models import PlayerSession
from ngp_nim.server.network.handshake import SessionHandshake

logger = logging.getLogger(__name__)


class NetworkServer:
    """网络服务器，负责接入、握手、配对与对局线程管理"""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
        self.host = host
        self.port = port
        self._sock: Optional[socket.socket] = None
        self._accept_thread: Optional[threading.Thread] = None
        self._running = threading.Event()
        self._lock = threading.Lock()
        self._waiting: Optional[PlayerSession] = None
        self.sessions: Dict[int, PlayerSession] = {}
        # game_id -> 该局的取消信号
        self.games: Dict[int, threading.Event] = {}
        # game_id -> 已结束对局的结果
        self.results: Dict[int, Optional[MatchResult]] = {}
        self._next_game_id = 1

    @property
    def address(self) -> Tuple[str, int]:
        """实际监听的地址（端口为 0 时由系统分配）"""
        if self._sock is None:
            return self.host, self.port
        return self._sock.getsockname()[:2]

    # 服务器生命周期
    def start(self) -> None:
        """启动服务器并进入 Accept 循环"""
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        # 允许快速重启服务
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind((self.host, self.port))
        self._sock.listen(LISTEN_BACKLOG)
        self._running.set()
        self._accept_thread = threading.Thread(target=self._accept_loop, name="accept-loop", daemon=True)
        self._accept_thread.start()
        logger.info(f"监听地址: {self.address[0]}:{self.address[1]}")

    def stop(self) -> None:
        """停止服务器并关闭所有会话"""
        self._running.clear()
        try:
            if self._sock:
                # 触发 accept 退出
                try:
                    self._sock.shutdown(socket.SHUT_RDWR)
                except OSError:
                    pass
                self._sock.close()
        finally:
            self._sock = None
        # 关闭所有客户端连接，阻塞中的读取随之返回
        with self._lock:
            sessions = list(self.sessions.values())
            self.sessions.clear()
            self._waiting = None
            for cancel in self.games.values():
                cancel.set()
        for sess in sessions:
            sess.close()
        logger.info("服务器已停止")

    @property
    def running(self) -> bool:
        return self._running.is_set()

    # 接入与握手线程
    def _accept_loop(self) -> None:
        """Accept 新连接并为其创建握手线程"""
        sock = self._sock
        while self._running.is_set() and sock is not None:
            try:
                conn, addr = sock.accept()
            except OSError:
                # 套接字已关闭或出错，退出循环
                break
            sess = PlayerSession(conn, addr)
            logger.info(f"新连接: {sess.label}")
            with self._lock:
                self.sessions[id(sess)] = sess
            t = threading.Thread(target=self._handshake_loop, args=(sess,), name=f"open-{sess.label}", daemon=True)
            t.start()

    def _handshake_loop(self, sess: PlayerSession) -> None:
        try:
            ok = SessionHandshake(sess).run()
        except Exception:
            logger.exception(f"握手线程异常: {sess.label}")
            ok = False
        if not ok or not self._running.is_set():
            self._discard(sess)
            return
        self._pair(sess)

    # 配对与对局线程
    def _pair(self, sess: PlayerSession) -> None:
        with self._lock:
            if self._waiting is None or self._waiting.closed:
                self._waiting = sess
                logger.info(f"玩家 {sess.name} 等待对手")
                return
            first, self._waiting = self._waiting, None
            game_id = self._next_game_id
            self._next_game_id += 1
            cancel = threading.Event()
            self.games[game_id] = cancel
        logger.info(f"对局 {game_id} 配对: {first.name} vs {sess.name}")
        game = GameSession(first, sess, cancel=cancel)
        t = threading.Thread(target=self._game_loop, args=(game_id, game), name=f"game-{game_id}", daemon=True)
        t.start()

    def _game_loop(self, game_id: int, game: GameSession) -> None:
        """单局对局线程；两局之间不共享任何可变状态"""
        result = None
        try:
            result = game.run()
            logger.info(f"对局 {game_id} 结束: {result}")
        except Exception:
            logger.exception(f"对局 {game_id} 异常终止")
        finally:
            for p in game.players:
                self._discard(p)
            with self._lock:
                self.games.pop(game_id, None)
                self.results[game_id] = result

    # 断开清理
    def _discard(self, sess: PlayerSession) -> None:
        sess.close()
        with self._lock:
            self.sessions.pop(id(sess), None)
            if self._waiting is sess:
                self._waiting = None


__all__ = [
    "NetworkServer",
    "SessionHandshake",
]
