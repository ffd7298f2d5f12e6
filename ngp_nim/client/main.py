"""
客户端主程序入口

连接服务器、发送 OPEN，然后在 Pygame 窗口中显示棋盘：
轮到自己时点击石子即发送 MOVE。
"""

import argparse
import logging
import os
import sys

import pygame

from ngp_nim.shared.constants import (
    BLACK,
    DEFAULT_HOST,
    DEFAULT_PORT,
    FPS,
    GREEN,
    RED,
    WHITE,
    WINDOW_HEIGHT,
    WINDOW_TITLE,
    WINDOW_WIDTH,
)
from ngp_nim.shared.protocols import EncodeError, Message
from ngp_nim.client.game import ClientGame
from ngp_nim.client.network import NgpClient
from ngp_nim.client.ui import BoardView

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    try:
        env_port = int(os.environ.get("PORT", DEFAULT_PORT))
    except ValueError:
        env_port = DEFAULT_PORT
    ap = argparse.ArgumentParser(prog="nim-client", description="NGP Nim client")
    ap.add_argument("name")
    ap.add_argument("--host", default=os.environ.get("HOST", DEFAULT_HOST))
    ap.add_argument("--port", type=int, default=env_port)
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        hello = Message.open(args.name).encode()
    except EncodeError as e:
        logger.error(f"无法使用该名字: {e}")
        return 1

    client = NgpClient(args.host, args.port)
    if not client.connect():
        return 1
    client.send_raw(hello)
    game = ClientGame(args.name)

    pygame.init()
    pygame.display.set_caption(f"{WINDOW_TITLE} - {args.name}")
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
    font = pygame.font.SysFont(None, 32)
    board = BoardView(40, 80, WINDOW_WIDTH - 80, WINDOW_HEIGHT - 120)
    clock = pygame.time.Clock()

    running = True
    try:
        while running:
            for msg in client.drain_events():
                game.apply(msg)

            hover = None
            if game.my_turn:
                hover = board.hit_test(pygame.mouse.get_pos(), game.piles)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and game.my_turn:
                    choice = board.hit_test(event.pos, game.piles)
                    if choice:
                        client.move(*choice)

            screen.fill(WHITE)
            color = GREEN if game.my_turn else (RED if game.last_error else BLACK)
            if not client.connected and not game.over:
                status = "Disconnected"
            else:
                status = game.status_text()
            screen.blit(font.render(status, True, color), (40, 30))
            board.draw(screen, font, game.piles, hover)
            pygame.display.flip()
            clock.tick(FPS)
    finally:
        client.close()
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
