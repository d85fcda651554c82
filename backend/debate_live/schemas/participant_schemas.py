"""
观众用户与评委相关的数据模式
"""

from pydantic import Field, field_serializer
from typing import Optional, List, Literal
from datetime import datetime

from debate_live.core.utils import format_timestamp_with_timezone
from debate_live.schemas.stream_schemas import CamelModel


class ParticipantCreate(CamelModel):
    """注册观众用户"""
    id: str = Field(..., min_length=1, max_length=64)
    nickname: Optional[str] = Field(default=None, max_length=50)


class ParticipantInfo(CamelModel):
    """观众用户信息"""
    id: str
    nickname: Optional[str] = None
    status: str
    vote_times: int = 0


class VoteRecordInfo(CamelModel):
    """一条投票历史"""
    stream_id: str
    live_id: str
    side: Literal["left", "right"]
    weight: int
    voted_at: datetime

    @field_serializer('voted_at')
    def serialize_dt(self, dt: datetime) -> str:
        return format_timestamp_with_timezone(dt)


class StreamVoterInfo(VoteRecordInfo):
    """某直播流的投票人"""
    participant_id: str
    nickname: Optional[str] = None


class JudgeConfig(CamelModel):
    """评委配置"""
    id: str = Field(..., description="评委标识，如 judge-1")
    name: str
    role: str = "评委"
    vote_weight: int = Field(default=10, ge=0, description="评委一次投票的票数")
    participant_id: Optional[str] = Field(default=None, description="绑定的观众用户ID")


class JudgePanelUpdate(CamelModel):
    """保存某直播流的评委配置"""
    stream_id: str
    judges: List[JudgeConfig] = Field(..., min_length=1)
    replaced_participant_ids: List[str] = Field(default_factory=list, description="被替换评委绑定的用户，将被禁用")
