"""
客户端模块

负责游戏界面、用户交互、网络通信等客户端功能。

模块组成：
- game: 客户端对局视图（把服务器消息折叠成本地状态）
- network: 连接服务器、收发 NGP 消息的线程化封装
- ui: Pygame 棋盘组件

入口提示：
- 运行 ngp_nim/client/main.py 启动 Pygame 客户端
"""

from . import game, network, ui

__all__ = ["game", "network", "ui"]
