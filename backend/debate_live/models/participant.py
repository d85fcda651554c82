"""
参与者（观众用户）数据模型
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from debate_live.core.database import Base


class Participant(Base):
    """观众用户表"""
    __tablename__ = "participants"

    id = Column(String(64), primary_key=True)
    nickname = Column(String(50), nullable=True)
    status = Column(String(20), default="active")     # active, banned
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # 关系
    vote_records = relationship(
        "VoteRecord",
        back_populates="participant",
        order_by="VoteRecord.id.desc()",
        cascade="all, delete-orphan",
    )


class VoteRecord(Base):
    """投票历史记录表"""
    __tablename__ = "vote_records"

    id = Column(Integer, primary_key=True, index=True)
    participant_id = Column(String(64), ForeignKey("participants.id"), nullable=False, index=True)
    stream_id = Column(String(64), nullable=False, index=True)
    live_id = Column(String(64), nullable=False)
    side = Column(String(10), nullable=False)          # left, right
    weight = Column(Integer, nullable=False)           # 本次投出的票数
    voted_at = Column(DateTime(timezone=True), nullable=False)

    # 关系
    participant = relationship("Participant", back_populates="vote_records")
