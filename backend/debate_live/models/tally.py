"""
票数与统计数据模型
"""

from sqlalchemy import Column, Integer, String, DateTime, BigInteger, UniqueConstraint
from sqlalchemy.sql import func
from debate_live.core.database import Base


class StreamTally(Base):
    """直播流当前票数快照"""
    __tablename__ = "stream_tallies"

    stream_id = Column(String(64), primary_key=True)
    left_votes = Column(Integer, nullable=False, default=0)
    right_votes = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class DailyStat(Base):
    """每日按直播流累计的票数（只增不减）"""
    __tablename__ = "daily_stats"
    __table_args__ = (UniqueConstraint("date", "stream_id", name="uq_daily_stream"),)

    id = Column(Integer, primary_key=True, index=True)
    date = Column(String(10), nullable=False, index=True)   # YYYY-MM-DD
    stream_id = Column(String(64), nullable=False)
    stream_name = Column(String(100), nullable=True)
    left_votes = Column(Integer, nullable=False, default=0)
    right_votes = Column(Integer, nullable=False, default=0)


class PlatformCounter(Base):
    """平台级单调计数器"""
    __tablename__ = "platform_counters"

    key = Column(String(50), primary_key=True)
    value = Column(BigInteger, nullable=False, default=0)
