"""
AI解说相关的数据模式
"""

from pydantic import BaseModel, field_serializer
from typing import Optional
from datetime import datetime

from debate_live.core.utils import format_timestamp_with_timezone
from debate_live.schemas.stream_schemas import CamelModel


class GenerateResponse(BaseModel):
    """Ollama 生成结果"""
    model: str
    message: str
    done: bool
    total_duration: Optional[int] = None
    eval_count: Optional[int] = None


class AIContentInfo(CamelModel):
    """一条AI解说"""
    id: int
    stream_id: str
    live_id: Optional[str] = None
    model_name: str
    content: str
    created_at: Optional[datetime] = None

    @field_serializer('created_at')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return format_timestamp_with_timezone(dt)
