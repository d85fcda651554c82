"""
辩论流程服务

每个直播流保存一份环节列表（JSON 文本），前台据此展示和计时。
"""

import json
import logging
from typing import List

from sqlalchemy.orm import Session

from debate_live.core.utils import utc_now
from debate_live.models.debate_flow import DebateFlow
from debate_live.schemas.debate_schemas import DebateFlowInfo, DebateSegment
from debate_live.services.stream_service import StreamService

logger = logging.getLogger(__name__)


class DebateFlowService:
    """辩论流程读写"""

    def __init__(self, db: Session):
        self.db = db

    def get_flow(self, stream_id: str) -> DebateFlowInfo:
        """未保存过时返回空流程"""
        row = self.db.get(DebateFlow, stream_id)
        if row is None:
            return DebateFlowInfo(stream_id=stream_id)
        try:
            segments = json.loads(row.segments or "[]")
        except ValueError:
            logger.warning(f"直播流 {stream_id} 的辩论流程数据损坏，按空流程处理")
            segments = []
        return DebateFlowInfo(stream_id=stream_id, segments=segments, updated_at=row.updated_at)

    def set_flow(self, stream_id: str, segments: List[DebateSegment]) -> DebateFlowInfo:
        StreamService(self.db).require_stream(stream_id)
        row = self.db.get(DebateFlow, stream_id)
        if row is None:
            row = DebateFlow(stream_id=stream_id)
            self.db.add(row)
        row.segments = json.dumps([s.model_dump() for s in segments], ensure_ascii=False)
        row.updated_at = utc_now()
        self.db.commit()
        logger.info(f"📋 直播流 {stream_id} 的辩论流程已保存，共 {len(segments)} 个环节")
        return DebateFlowInfo(stream_id=stream_id, segments=segments, updated_at=row.updated_at)
