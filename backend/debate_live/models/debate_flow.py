"""
辩论流程数据模型
"""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from debate_live.core.database import Base


class DebateFlow(Base):
    """直播流的辩论环节安排"""
    __tablename__ = "debate_flows"

    stream_id = Column(String(64), primary_key=True)
    segments = Column(Text, nullable=False, default="[]")  # JSON格式的环节列表
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
