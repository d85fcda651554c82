"""
实时广播事件

每种事件一个模型，广播时包装成 {type, data, timestamp}。
"""

from pydantic import Field
from typing import ClassVar, Dict, List, Optional, Literal, Union
from datetime import datetime

from debate_live.core.utils import epoch_millis, format_timestamp_with_timezone
from debate_live.schemas.debate_schemas import DebateSegment, FlowAction
from debate_live.schemas.live_schemas import Tally
from debate_live.schemas.participant_schemas import JudgeConfig
from debate_live.schemas.stream_schemas import CamelModel


class LiveEvent(CamelModel):
    """广播事件基类"""
    event_type: ClassVar[str] = ""

    timestamp: int = Field(default_factory=epoch_millis)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_envelope(self) -> dict:
        return {"type": self.event_type, "data": self.to_payload(), "timestamp": epoch_millis()}


class LiveStatusChanged(LiveEvent):
    """直播开始/结束"""
    event_type: ClassVar[str] = "live-status-changed"

    stream_id: str
    live_id: str
    status: Literal["started", "stopped"]
    stream_url: Optional[str] = None
    start_time: Optional[str] = None
    stop_time: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def started(cls, stream_id: str, live_id: str, start_time: datetime, stream_url: Optional[str] = None):
        return cls(stream_id=stream_id, live_id=live_id, status="started", stream_url=stream_url,
                   start_time=format_timestamp_with_timezone(start_time))

    @classmethod
    def stopped(cls, stream_id: str, live_id: str, stop_time: datetime, reason: str):
        return cls(stream_id=stream_id, live_id=live_id, status="stopped",
                   stop_time=format_timestamp_with_timezone(stop_time), reason=reason)


class VotesUpdated(LiveEvent):
    """票数变化；直播中附带本场票数"""
    event_type: ClassVar[str] = "votes-updated"

    stream_id: str
    left_votes: int
    right_votes: int
    all_total_votes: int
    global_total_votes: Optional[int] = None
    source: Literal["user", "admin", "live-start", "live-end-reset", "cap"]
    session: Optional[Tally] = Field(default=None, exclude=True)

    @property
    def total_votes(self) -> int:
        return self.left_votes + self.right_votes

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["totalVotes"] = self.total_votes
        if self.session is not None:
            payload["liveSessionLeft"] = self.session.left_votes
            payload["liveSessionRight"] = self.session.right_votes
        return payload


class VoteWindowOpened(LiveEvent):
    """投票窗口开启"""
    event_type: ClassVar[str] = "vote-window-opened"

    stream_id: str
    live_id: str
    closes_at: str


class StreamOnlineUpdate(LiveEvent):
    """各直播流在线人数"""
    event_type: ClassVar[str] = "stream-online-update"

    stream_online_counts: Dict[str, int]


class AIStatusChanged(LiveEvent):
    """AI解说状态"""
    event_type: ClassVar[str] = "aiStatus"

    stream_id: str
    status: Literal["running", "stopped"]
    ai_session_id: Optional[str] = None


class JudgesUpdated(LiveEvent):
    """评委配置变更"""
    event_type: ClassVar[str] = "judges-updated"

    stream_id: str
    judges: List[JudgeConfig]


class AIContentCreated(LiveEvent):
    """新的AI解说"""
    event_type: ClassVar[str] = "newAIContent"

    id: int
    stream_id: str
    content: str
    model_name: str


class DebateFlowUpdated(LiveEvent):
    """辩论流程已保存"""
    event_type: ClassVar[str] = "debate-flow-updated"

    stream_id: str
    flow: List[DebateSegment]


class DebateFlowControlled(LiveEvent):
    """辩论流程控制指令"""
    event_type: ClassVar[str] = "debate-flow-control"

    stream_id: str
    action: FlowAction


BroadcastEvent = Union[
    LiveStatusChanged,
    VotesUpdated,
    VoteWindowOpened,
    StreamOnlineUpdate,
    AIStatusChanged,
    JudgesUpdated,
    AIContentCreated,
    DebateFlowUpdated,
    DebateFlowControlled,
]
