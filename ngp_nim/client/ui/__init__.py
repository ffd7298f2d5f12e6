"""
用户界面模块

提供 Nim 客户端的表现层组件：
- 棋盘 BoardView：石子布局、点击换算为走子、绘制

该模块与 Pygame 紧耦合用于渲染，但不负责网络逻辑；
网络交互由 `ngp_nim.client.network.NgpClient` 提供。
"""

from ngp_nim.client.ui.board import BoardView

__all__ = ["BoardView"]
