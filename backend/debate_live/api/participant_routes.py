"""
观众用户API路由
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from debate_live.api.dependencies import http_error
from debate_live.core.database import get_db
from debate_live.core.errors import ErrorCode, LiveError
from debate_live.schemas.participant_schemas import (
    ParticipantCreate,
    ParticipantInfo,
    StreamVoterInfo,
    VoteRecordInfo,
)
from debate_live.services.participant_service import ParticipantService

router = APIRouter()


@router.get("/", response_model=List[ParticipantInfo])
async def list_participants(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """获取用户列表"""
    return ParticipantService(db).list_participants(skip=skip, limit=limit)


@router.post("/", response_model=ParticipantInfo)
async def register_participant(data: ParticipantCreate, db: Session = Depends(get_db)):
    """注册用户（已存在则更新昵称）"""
    service = ParticipantService(db)
    return service.to_info(service.register(data.id, data.nickname))


@router.get("/{participant_id}", response_model=ParticipantInfo)
async def get_participant(participant_id: str, db: Session = Depends(get_db)):
    service = ParticipantService(db)
    participant = service.get_participant(participant_id)
    if participant is None:
        raise http_error(LiveError(ErrorCode.PARTICIPANT_NOT_FOUND, "用户不存在"))
    return service.to_info(participant)


@router.post("/{participant_id}/toggle-ban", response_model=ParticipantInfo)
async def toggle_ban(participant_id: str, db: Session = Depends(get_db)):
    """禁用/解禁用户（禁用后不能投票）"""
    service = ParticipantService(db)
    try:
        return service.to_info(service.toggle_ban(participant_id))
    except LiveError as e:
        raise http_error(e)


@router.get("/{participant_id}/votes", response_model=List[VoteRecordInfo])
async def get_vote_history(participant_id: str, db: Session = Depends(get_db)):
    """用户投票历史"""
    return ParticipantService(db).get_vote_history(participant_id)


@router.get("/by-stream/{stream_id}/voters", response_model=List[StreamVoterInfo])
async def list_stream_voters(stream_id: str, db: Session = Depends(get_db)):
    """某直播流的投票人列表"""
    return ParticipantService(db).list_stream_voters(stream_id)
