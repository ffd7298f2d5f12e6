"""
服务器主程序入口

启动 Nim 服务器，监听客户端连接并两两配对开局。
"""

import argparse
import logging
import os
import time

from ngp_nim.shared.constants import DEFAULT_HOST, DEFAULT_LOG_FILE, DEFAULT_PORT

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """解析命令行；未指定的参数回退到环境变量 HOST / PORT / NIM_LOG_FILE"""
    try:
        env_port = int(os.environ.get("PORT", DEFAULT_PORT))
    except ValueError:
        env_port = DEFAULT_PORT
    ap = argparse.ArgumentParser(prog="nim-server", description="NGP Nim game server")
    ap.add_argument("port", type=int, nargs="?", default=env_port)
    ap.add_argument("--host", default=os.environ.get("HOST", DEFAULT_HOST))
    ap.add_argument("--log-file", default=os.environ.get("NIM_LOG_FILE", DEFAULT_LOG_FILE))
    return ap.parse_args(argv)


def setup_logging(log_file: str) -> None:
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def main(argv=None):
    """启动服务器主函数"""
    args = parse_args(argv)
    setup_logging(args.log_file)

    logger.info("=" * 50)
    logger.info("NGP Nim 服务器启动中...")
    logger.info("=" * 50)

    from ngp_nim.server.network import NetworkServer

    server = NetworkServer(args.host, args.port)
    try:
        server.start()
        logger.info("服务器运行中，按 Ctrl+C 停止")

        # 保持服务器运行
        while server.running:
            time.sleep(1)

    except KeyboardInterrupt:
        logger.info("服务器正在关闭...")
    except OSError as e:
        logger.error(f"服务器错误: {e}", exc_info=True)
        return 1
    finally:
        server.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
