"""
评委配置数据模型
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.sql import func
from debate_live.core.database import Base


class Judge(Base):
    """评委配置表（每个直播流最多3位）"""
    __tablename__ = "judges"

    id = Column(Integer, primary_key=True, index=True)
    stream_id = Column(String(64), ForeignKey("streams.id"), nullable=False, index=True)
    judge_key = Column(String(64), nullable=False)           # judge-1 / judge-2 / judge-3
    name = Column(String(50), nullable=False)
    role = Column(String(50), default="评委")
    vote_weight = Column(Integer, nullable=False, default=10)
    participant_id = Column(String(64), nullable=True)       # 绑定的观众用户
    position = Column(Integer, nullable=False, default=0)    # 展示顺序
    created_at = Column(DateTime(timezone=True), server_default=func.now())
