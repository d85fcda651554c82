"""
直播流数据模型
"""

import uuid

from sqlalchemy import Column, String, DateTime, Text, Boolean
from sqlalchemy.sql import func
from debate_live.core.database import Base


def _new_stream_id() -> str:
    return f"stream-{uuid.uuid4().hex[:12]}"


class Stream(Base):
    """直播流表"""
    __tablename__ = "streams"

    id = Column(String(64), primary_key=True, default=_new_stream_id)
    name = Column(String(100), nullable=False)
    url = Column(String(500), nullable=False)                # 播放地址
    enabled = Column(Boolean, default=True)                  # 禁用的流不能开播
    description = Column(Text, nullable=True)
    debate_title = Column(String(200), nullable=True)        # 辩题
    left_position = Column(String(200), nullable=True)       # 正方立场
    right_position = Column(String(200), nullable=True)      # 反方立场
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
