import os
import re
import threading
import time

# 24位十六进制标识: 4字节秒级时间戳 + 5字节进程随机值 + 3字节自增计数
_PROCESS_RANDOM = os.urandom(5).hex()
_COUNTER_MAX = 0xFFFFFF
_OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

_lock = threading.Lock()
_counter = int.from_bytes(os.urandom(3), "big")
_last_timestamp = 0


def generate_object_id() -> str:
    """生成单调递增的24位十六进制标识，按标识倒序即为按创建时间倒序"""
    global _counter, _last_timestamp

    with _lock:
        timestamp = max(int(time.time()), _last_timestamp)
        _counter += 1
        if _counter > _COUNTER_MAX:
            # 计数器溢出时借用下一秒，保证同一进程内严格递增
            _counter = 0
            timestamp += 1
        _last_timestamp = timestamp
        counter = _counter

    return f"{timestamp:08x}{_PROCESS_RANDOM}{counter:06x}"


def is_object_id(value: object) -> bool:
    """判断传递的值是否为合法的24位十六进制标识"""
    return isinstance(value, str) and bool(_OBJECT_ID_PATTERN.match(value))
