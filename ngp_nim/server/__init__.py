"""
服务器端模块

负责接入客户端连接、握手、配对与对局。

模块组成：
- game: 棋盘状态机与回合制对局
- models: 玩家会话（连接、接收缓冲、名字、编号）
- network: TCP 接入、握手线程、配对与对局线程

使用方式：
- 入口参见 ngp_nim/server/main.py，启动 NetworkServer
"""

from . import game, models, network

__all__ = ["game", "models", "network"]
