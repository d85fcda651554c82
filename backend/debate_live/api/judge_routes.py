"""
评委配置API路由
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from debate_live.api.dependencies import get_live_coordinator, http_error
from debate_live.core.config import settings
from debate_live.core.database import get_db
from debate_live.core.errors import LiveError
from debate_live.schemas.event_schemas import JudgesUpdated
from debate_live.schemas.participant_schemas import JudgeConfig, JudgePanelUpdate
from debate_live.services.judge_service import JudgeService
from debate_live.services.live_coordinator import LiveCoordinator
from debate_live.services.stream_service import StreamService

router = APIRouter()


def _judge_service(db: Session) -> JudgeService:
    return JudgeService(db, settings.MAX_JUDGES, settings.JUDGE_DEFAULT_VOTE_WEIGHT)


@router.get("/{stream_id}", response_model=List[JudgeConfig])
async def get_judges(stream_id: str, db: Session = Depends(get_db)):
    """获取评委配置（未配置时返回默认评委席）"""
    return _judge_service(db).get_judges(stream_id)


@router.post("/", response_model=List[JudgeConfig])
async def save_judges(
    data: JudgePanelUpdate,
    db: Session = Depends(get_db),
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """保存评委配置，被替换评委绑定的用户会被禁用"""
    try:
        StreamService(db).require_stream(data.stream_id)
    except LiveError as e:
        raise http_error(e)
    judges = _judge_service(db).set_judges(data.stream_id, data.judges, data.replaced_participant_ids)
    await coordinator.manager.publish(JudgesUpdated(stream_id=data.stream_id, judges=judges))
    return judges
