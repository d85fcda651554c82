"""
直播流相关的数据模式
"""

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from debate_live.core.utils import format_timestamp_with_timezone


class CamelModel(BaseModel):
    """对外字段使用驼峰命名，同时接受下划线写法"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        protected_namespaces=(),
    )


class StreamCreate(CamelModel):
    """创建直播流的请求模式"""
    name: str = Field(..., min_length=1, max_length=100, description="直播流名称")
    url: str = Field(..., min_length=1, description="播放地址")
    enabled: bool = Field(default=True, description="是否启用")
    description: Optional[str] = None
    debate_title: Optional[str] = Field(default=None, description="辩题")
    left_position: Optional[str] = Field(default=None, description="正方立场")
    right_position: Optional[str] = Field(default=None, description="反方立场")


class StreamUpdate(CamelModel):
    """更新直播流的请求模式（仅更新提供的字段）"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    url: Optional[str] = None
    enabled: Optional[bool] = None
    description: Optional[str] = None
    debate_title: Optional[str] = None
    left_position: Optional[str] = None
    right_position: Optional[str] = None


class StreamResponse(CamelModel):
    """直播流响应模式"""
    id: str
    name: str
    url: str
    enabled: bool
    description: Optional[str] = None
    debate_title: Optional[str] = None
    left_position: Optional[str] = None
    right_position: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_serializer('created_at')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return format_timestamp_with_timezone(dt)
