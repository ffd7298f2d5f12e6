"""
共享模块

存放客户端和服务器共用的代码，如常量、协议定义等。

组件说明：
- constants: 网络端口、协议常量、消息类型与错误码、棋盘与窗口配置
- protocols: NGP 帧的编解码（Message、decode_message、MessageReader）

提示：
- 协议层约定长度前缀、``|`` 分隔的 ASCII 帧，网络层直接透传 Message.encode()
"""

from . import constants, protocols

__all__ = ["constants", "protocols"]
