"""
直播流管理服务
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from debate_live.core.errors import ErrorCode, LiveError
from debate_live.models.debate_flow import DebateFlow
from debate_live.models.judge import Judge
from debate_live.models.stream import Stream
from debate_live.schemas.stream_schemas import StreamCreate, StreamUpdate

logger = logging.getLogger(__name__)


class StreamService:
    """直播流目录"""

    def __init__(self, db: Session):
        self.db = db

    def create_stream(self, data: StreamCreate) -> Stream:
        stream = Stream(**data.model_dump())
        self.db.add(stream)
        self.db.commit()
        self.db.refresh(stream)
        logger.info(f"已创建直播流 {stream.id}: {stream.name}")
        return stream

    def get_stream(self, stream_id: str) -> Optional[Stream]:
        return self.db.get(Stream, stream_id)

    def require_stream(self, stream_id: str) -> Stream:
        stream = self.get_stream(stream_id)
        if stream is None:
            raise LiveError(ErrorCode.STREAM_NOT_FOUND, "指定的直播流不存在")
        return stream

    def list_streams(self) -> List[Stream]:
        return self.db.query(Stream).order_by(Stream.created_at, Stream.id).all()

    def list_enabled_streams(self) -> List[Stream]:
        return self.db.query(Stream).filter(Stream.enabled.is_(True)).order_by(Stream.created_at, Stream.id).all()

    def update_stream(self, stream_id: str, data: StreamUpdate) -> Stream:
        stream = self.require_stream(stream_id)
        for field_name, value in data.model_dump(exclude_unset=True).items():
            setattr(stream, field_name, value)
        self.db.commit()
        self.db.refresh(stream)
        return stream

    def toggle_stream(self, stream_id: str) -> Stream:
        stream = self.require_stream(stream_id)
        stream.enabled = not stream.enabled
        self.db.commit()
        self.db.refresh(stream)
        logger.info(f"直播流 {stream_id} 已{'启用' if stream.enabled else '禁用'}")
        return stream

    def delete_stream(self, stream_id: str):
        stream = self.require_stream(stream_id)
        self.db.query(Judge).filter(Judge.stream_id == stream_id).delete()
        self.db.query(DebateFlow).filter(DebateFlow.stream_id == stream_id).delete()
        self.db.delete(stream)
        self.db.commit()
