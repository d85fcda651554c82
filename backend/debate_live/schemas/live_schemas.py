"""
直播控制与投票相关的数据模式
"""

from dataclasses import dataclass
from pydantic import Field, field_serializer
from typing import Optional, Literal
from datetime import datetime

from debate_live.core.utils import format_timestamp_with_timezone
from debate_live.schemas.stream_schemas import CamelModel

Side = Literal["left", "right"]


@dataclass(frozen=True)
class Tally:
    """正反方票数（均为非负整数）"""
    left_votes: int = 0
    right_votes: int = 0

    @property
    def total_votes(self) -> int:
        return self.left_votes + self.right_votes

    def with_delta(self, left_delta: int, right_delta: int) -> "Tally":
        return Tally(max(0, self.left_votes + left_delta), max(0, self.right_votes + right_delta))


class StartLiveRequest(CamelModel):
    """开始直播"""
    stream_id: str
    auto_start_ai: bool = False


class StopLiveRequest(CamelModel):
    """停止直播"""
    stream_id: str
    reason: str = "manual"


class LiveSessionInfo(CamelModel):
    """一场直播的状态"""
    stream_id: str
    live_id: Optional[str] = None
    is_live: bool = False
    start_time: Optional[datetime] = None
    stop_time: Optional[datetime] = None
    stop_reason: Optional[str] = None
    ai_status: str = "stopped"
    online_count: int = 0

    @field_serializer('start_time', 'stop_time')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return format_timestamp_with_timezone(dt)


class VoteRequest(CamelModel):
    """观众投票请求"""
    stream_id: str = Field(..., min_length=1)
    participant_id: str = Field(..., min_length=1)
    side: Side


class TallyResponse(CamelModel):
    """票数快照"""
    stream_id: str
    left_votes: int
    right_votes: int
    total_votes: int
    all_total_votes: Optional[int] = None
    left_percentage: Optional[int] = None
    right_percentage: Optional[int] = None


class AdminVoteUpdate(CamelModel):
    """管理员修改当前票数"""
    stream_id: str
    action: Literal["set", "add", "reset"]
    left_votes: int = 0
    right_votes: int = 0
    reason: Optional[str] = None


class AdminVoteUpdateResponse(CamelModel):
    """管理员修改票数前后对比"""
    before_update: TallyResponse
    after_update: TallyResponse


class OnlineCountUpdate(CamelModel):
    """管理员校正在线人数"""
    stream_id: str
    online_count: int = Field(..., ge=0)


class AIControlRequest(CamelModel):
    """AI解说启停"""
    stream_id: str


class DashboardInfo(CamelModel):
    """后台仪表盘：单个直播流的总览"""
    stream_id: str
    name: str
    is_live: bool = False
    live_id: Optional[str] = None
    start_time: Optional[datetime] = None
    ai_status: str = "stopped"
    left_votes: int = 0
    right_votes: int = 0
    total_votes: int = 0
    session_left_votes: Optional[int] = None
    session_right_votes: Optional[int] = None
    viewers: int = 0
    debate_topic: Optional[str] = None
    left_position: Optional[str] = None
    right_position: Optional[str] = None

    @field_serializer('start_time')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return format_timestamp_with_timezone(dt)
