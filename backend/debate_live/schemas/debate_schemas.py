"""
辩论流程相关的数据模式
"""

from pydantic import Field, field_serializer, model_validator
from typing import List, Literal, Optional
from datetime import datetime

from debate_live.core.utils import format_timestamp_with_timezone
from debate_live.schemas.stream_schemas import CamelModel

DEFAULT_SEGMENT_NAME = "未命名环节"
DEFAULT_SEGMENT_DURATION = 180
MIN_SEGMENT_DURATION = 10

FlowAction = Literal["start", "pause", "resume", "reset", "next", "prev"]


class DebateSegment(CamelModel):
    """辩论环节；名称、时长、发言方在校验前先做归一化"""
    name: str = DEFAULT_SEGMENT_NAME
    duration: int = DEFAULT_SEGMENT_DURATION
    side: Literal["left", "right", "both"] = "both"

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        if not isinstance(data, dict):
            return data
        name = str(data.get("name") or "").strip() or DEFAULT_SEGMENT_NAME
        try:
            duration = int(data.get("duration") or DEFAULT_SEGMENT_DURATION)
        except (TypeError, ValueError):
            duration = DEFAULT_SEGMENT_DURATION
        side = data.get("side")
        if side not in ("left", "right", "both"):
            side = "both"
        return {"name": name, "duration": max(MIN_SEGMENT_DURATION, duration), "side": side}


class DebateFlowUpdate(CamelModel):
    """保存辩论流程"""
    stream_id: str = Field(..., min_length=1)
    segments: List[DebateSegment]


class DebateFlowInfo(CamelModel):
    """辩论流程"""
    stream_id: str
    segments: List[DebateSegment] = []
    updated_at: Optional[datetime] = None

    @field_serializer('updated_at')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return format_timestamp_with_timezone(dt)


class DebateFlowControl(CamelModel):
    """辩论流程控制指令"""
    stream_id: str = Field(..., min_length=1)
    action: FlowAction
