"""
工具函数模块
"""

from typing import Optional
from datetime import datetime, timezone


def utc_now() -> datetime:
    """当前UTC时间（带时区）"""
    return datetime.now(timezone.utc)


def epoch_millis(moment: Optional[datetime] = None) -> int:
    """转换为毫秒时间戳，与前端 Date.now() 对齐"""
    return int((moment or utc_now()).timestamp() * 1000)


def format_timestamp_with_timezone(timestamp: Optional[datetime]) -> str:
    """格式化时间戳，确保包含UTC时区标识符"""
    if not timestamp:
        return ""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc).replace(tzinfo=None)
    # 确保发送给前端的时间戳包含'Z'后缀，表示这是UTC时间
    return timestamp.isoformat() + 'Z'


def percentages(left: int, right: int) -> tuple:
    """正反方百分比，无票时各 50"""
    total = left + right
    if total <= 0:
        return 50, 50
    return round(left / total * 100), round(right / total * 100)
