"""
直播场次审计数据模型
"""

from sqlalchemy import Column, Integer, String, DateTime
from debate_live.core.database import Base


class LiveSessionRecord(Base):
    """直播场次表（结束后保留用于审计）"""
    __tablename__ = "live_sessions"

    live_id = Column(String(64), primary_key=True)
    stream_id = Column(String(64), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    stop_time = Column(DateTime(timezone=True), nullable=True)
    stop_reason = Column(String(50), nullable=True)        # manual, auto-timeout, vote-window-ended, admin-reset
    session_left = Column(Integer, nullable=True)          # 关播时本场正方票数
    session_right = Column(Integer, nullable=True)
