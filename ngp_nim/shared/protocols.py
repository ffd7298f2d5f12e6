"""
NGP 协议编解码

线协议格式（全部为 ASCII，``|`` 为字段分隔符）::

    0|LL|TYPE|field1|field2|...|
    | 头部 |       内容        |

- 版本: 单个数字，固定为 0
- LL: 两位十进制数字，内容长度（头部之后的字节数），范围 05-99
- TYPE: 4 个字符的消息类型
- 字段: 0 到 3 个，数量由消息类型决定，每个字段以 ``|`` 结尾

解码是纯函数：输入当前累积的字节缓冲，返回消耗的字节数和消息；
字节不足时返回 None，调用方补充数据后用同一缓冲重试。
解码得到的字段会立即拷贝为独立的 str，缓冲可以随即压缩。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from ngp_nim.shared.constants import (
    DELIMITER,
    ERR_INVALID,
    ERR_LONG_NAME,
    ERR_NONE,
    ERROR_NAMES,
    FIELD_COUNTS,
    FORFEIT_MARKER,
    HEADER_SIZE,
    MAX_CONTENT_LENGTH,
    MAX_NAME_LEN,
    MIN_CONTENT_LENGTH,
    MSG_FAIL,
    MSG_MOVE,
    MSG_NAME,
    MSG_OPEN,
    MSG_OVER,
    MSG_PLAY,
    MSG_WAIT,
    PROTOCOL_VERSION,
    TYPE_SIZE,
)

Buffer = Union[bytes, bytearray, memoryview]


class ProtocolError(Exception):
    """携带 NGP 错误码的异常基类"""

    def __init__(self, code: int, detail: str = ""):
        self.code = code
        self.detail = detail
        super().__init__(f"{error_text(code)}: {detail}" if detail else error_text(code))


class DecodeError(ProtocolError):
    """帧结构或字段校验失败"""


class EncodeError(ProtocolError):
    """消息无法编码（类型未知、字段数不符或内容过长）"""

    def __init__(self, detail: str):
        super().__init__(ERR_INVALID, detail)


def error_text(code: int) -> str:
    """错误码 -> FAIL 消息中携带的文本，例如 ``"10 Invalid"``"""
    if code == ERR_NONE:
        return "No error"
    name = ERROR_NAMES.get(code)
    if name is None:
        return "Unknown error"
    return f"{code} {name}"


def parse_error_text(text: str) -> Optional[int]:
    """从 FAIL 文本中取回错误码；无法识别时返回 None"""
    head = text.split(" ", 1)[0]
    if not head.isdigit():
        return None
    code = int(head)
    return code if code in ERROR_NAMES else None


def format_board(piles: Iterable[int]) -> str:
    return " ".join(str(p) for p in piles)


def parse_board(text: str) -> Tuple[int, ...]:
    return tuple(int(p) for p in text.split())


@dataclass(frozen=True)
class Message:
    """一条完整的 NGP 消息

    字段数量由类型唯一决定，构造时即校验；请优先使用各类型的构造方法
    （``Message.open(...)``、``Message.move(...)`` 等）。
    """

    type: str
    fields: Tuple[str, ...] = ()
    version: int = PROTOCOL_VERSION

    def __post_init__(self) -> None:
        expected = FIELD_COUNTS.get(self.type)
        if expected is None:
            raise EncodeError(f"unknown message type {self.type!r}")
        if len(self.fields) != expected:
            raise EncodeError(f"{self.type} takes {expected} fields, got {len(self.fields)}")

    # 各类型构造方法
    @classmethod
    def open(cls, name: str) -> "Message":
        return cls(MSG_OPEN, (name,))

    @classmethod
    def wait(cls) -> "Message":
        return cls(MSG_WAIT)

    @classmethod
    def name(cls, player: int, opponent: str) -> "Message":
        return cls(MSG_NAME, (str(player), opponent))

    @classmethod
    def play(cls, current_player: int, board: str) -> "Message":
        return cls(MSG_PLAY, (str(current_player), board))

    @classmethod
    def move(cls, pile: int, count: int) -> "Message":
        return cls(MSG_MOVE, (str(pile), str(count)))

    @classmethod
    def over(cls, winner: int, board: str, forfeit: bool = False) -> "Message":
        return cls(MSG_OVER, (str(winner), board, FORFEIT_MARKER if forfeit else ""))

    @classmethod
    def fail(cls, code: int) -> "Message":
        return cls(MSG_FAIL, (error_text(code),))

    @property
    def length(self) -> int:
        """内容长度：类型码与各字段（均含结尾分隔符）的字节数"""
        return TYPE_SIZE + 1 + sum(len(f.encode("utf-8")) + 1 for f in self.fields)

    def encode(self) -> bytes:
        parts = [self.type.encode("ascii")]
        for f in self.fields:
            raw = f.encode("utf-8")
            if DELIMITER in raw:
                raise EncodeError(f"field {f!r} contains the delimiter")
            parts.append(raw)
        length = self.length
        if length > MAX_CONTENT_LENGTH:
            raise EncodeError(f"content length {length} exceeds {MAX_CONTENT_LENGTH}")
        header = b"%d|%02d|" % (self.version, length)
        return header + DELIMITER.join(parts) + DELIMITER


def encode_message(msg_type: str, *fields: str) -> bytes:
    """按类型编码一条消息，字段数必须与类型匹配"""
    return Message(msg_type, tuple(fields)).encode()


def encode_fail(code: int) -> bytes:
    return encode_message(MSG_FAIL, error_text(code))


def decode_message(buf: Buffer) -> Optional[Tuple[int, Message]]:
    """从缓冲开头解码一条消息

    Returns:
        ``(消耗字节数, Message)``；数据不足以判断时返回 None。

    Raises:
        DecodeError: 帧非法，``code`` 为应回复给对端的错误码。
    """
    if len(buf) < HEADER_SIZE:
        return None

    header = bytes(buf[:HEADER_SIZE])
    if header[0:1] != b"%d" % PROTOCOL_VERSION or header[1:2] != DELIMITER:
        raise DecodeError(ERR_INVALID, "bad version")
    digits = header[2:4]
    if not digits.isdigit() or header[4:5] != DELIMITER:
        raise DecodeError(ERR_INVALID, "bad length field")
    length = int(digits)
    if not MIN_CONTENT_LENGTH <= length <= MAX_CONTENT_LENGTH:
        raise DecodeError(ERR_INVALID, f"length {length} out of range")

    end = HEADER_SIZE + length
    if end > len(buf):
        return None
    frame = bytes(buf[:end])

    type_end = HEADER_SIZE + TYPE_SIZE
    msg_type = frame[HEADER_SIZE:type_end].decode("ascii", errors="replace")
    if msg_type not in FIELD_COUNTS:
        raise DecodeError(ERR_INVALID, f"unknown type {msg_type!r}")
    if frame[type_end : type_end + 1] != DELIMITER:
        raise DecodeError(ERR_INVALID, "type not terminated")

    raw_fields = []
    pos = type_end + 1
    for _ in range(FIELD_COUNTS[msg_type]):
        idx = frame.find(DELIMITER, pos, end)
        if idx < 0:
            raise DecodeError(ERR_INVALID, f"{msg_type} is missing fields")
        raw_fields.append(frame[pos:idx])
        pos = idx + 1
    if pos != end:
        raise DecodeError(ERR_INVALID, f"{msg_type} has trailing content")

    if msg_type == MSG_OPEN and len(raw_fields[0]) > MAX_NAME_LEN:
        raise DecodeError(ERR_LONG_NAME, f"name is {len(raw_fields[0])} bytes")
    if msg_type == MSG_MOVE and not all(f.isdigit() for f in raw_fields):
        raise DecodeError(ERR_INVALID, "MOVE fields must be decimal digits")

    try:
        fields = tuple(f.decode("utf-8") for f in raw_fields)
    except UnicodeDecodeError:
        raise DecodeError(ERR_INVALID, "field is not valid UTF-8") from None

    return end, Message(msg_type, fields)


class MessageReader:
    """累积字节流并逐条取出完整消息

    成功解码后立即从缓冲中移除已消耗的字节；数据不足时保留原样等待补充。
    解码失败时缓冲不变，``DecodeError`` 交由调用方处理。
    """

    def __init__(self) -> None:
        self.buffer = bytearray()

    def feed(self, data: bytes) -> None:
        self.buffer.extend(data)

    def next_message(self) -> Optional[Message]:
        result = decode_message(self.buffer)
        if result is None:
            return None
        consumed, msg = result
        del self.buffer[:consumed]
        return msg

    def __len__(self) -> int:
        return len(self.buffer)


__all__ = [
    "DecodeError",
    "EncodeError",
    "Message",
    "MessageReader",
    "ProtocolError",
    "decode_message",
    "encode_fail",
    "encode_message",
    "error_text",
    "format_board",
    "parse_board",
    "parse_error_text",
]
