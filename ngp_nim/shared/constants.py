"""
常量定义

定义 NGP 协议、Nim 棋盘与网络层使用的各种常量。
"""

# 网络配置
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5555
BUFFER_SIZE = 256
LISTEN_BACKLOG = 8
DEFAULT_LOG_FILE = "server.log"

# 协议配置（版本 0）
PROTOCOL_VERSION = 0
DELIMITER = b"|"
HEADER_SIZE = 5  # "0|LL|"
TYPE_SIZE = 4
MIN_CONTENT_LENGTH = 5  # 类型码 + 分隔符
MAX_CONTENT_LENGTH = 99
MAX_FRAME_SIZE = HEADER_SIZE + MAX_CONTENT_LENGTH
MAX_NAME_LEN = 72  # 字节
MAX_FIELDS = 3

# 消息类型
MSG_OPEN = "OPEN"
MSG_WAIT = "WAIT"
MSG_NAME = "NAME"
MSG_PLAY = "PLAY"
MSG_MOVE = "MOVE"
MSG_OVER = "OVER"
MSG_FAIL = "FAIL"

# 每种消息类型固定的字段数
FIELD_COUNTS = {
    MSG_OPEN: 1,
    MSG_WAIT: 0,
    MSG_NAME: 2,
    MSG_PLAY: 2,
    MSG_MOVE: 2,
    MSG_OVER: 3,
    MSG_FAIL: 1,
}

# 错误码
ERR_NONE = 0
ERR_INVALID = 10
ERR_LONG_NAME = 21
ERR_ALREADY_PLAYING = 22
ERR_ALREADY_OPEN = 23
ERR_NOT_PLAYING = 24
ERR_IMPATIENT = 31
ERR_PILE_INDEX = 32
ERR_QUANTITY = 33

ERROR_NAMES = {
    ERR_INVALID: "Invalid",
    ERR_LONG_NAME: "Long Name",
    ERR_ALREADY_PLAYING: "Already Playing",
    ERR_ALREADY_OPEN: "Already Open",
    ERR_NOT_PLAYING: "Not Playing",
    ERR_IMPATIENT: "Impatient",
    ERR_PILE_INDEX: "Pile Index",
    ERR_QUANTITY: "Quantity",
}

# 棋盘配置
PILE_COUNT = 5
INITIAL_PILES = (1, 3, 5, 7, 9)
FIRST_PLAYER = 1
FORFEIT_MARKER = "Forfeit"

# 窗口配置（客户端）
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 560
WINDOW_TITLE = "NGP Nim"
FPS = 30

# 颜色定义 (RGB)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (200, 40, 40)
GREEN = (40, 160, 60)
STONE_COLOR = (90, 90, 110)
STONE_HOVER_COLOR = (200, 120, 40)
