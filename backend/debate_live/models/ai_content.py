"""
AI解说内容数据模型
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from debate_live.core.database import Base


class AIContent(Base):
    """AI生成的辩论解说"""
    __tablename__ = "ai_contents"

    id = Column(Integer, primary_key=True, index=True)
    stream_id = Column(String(64), nullable=False, index=True)
    live_id = Column(String(64), nullable=True)
    model_name = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
