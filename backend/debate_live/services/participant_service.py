"""
观众用户服务
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from debate_live.core.errors import ErrorCode, LiveError
from debate_live.models.participant import Participant, VoteRecord
from debate_live.schemas.participant_schemas import ParticipantInfo, StreamVoterInfo, VoteRecordInfo

logger = logging.getLogger(__name__)


class ParticipantService:
    """观众用户目录与投票历史"""

    def __init__(self, db: Session):
        self.db = db

    def register(self, participant_id: str, nickname: Optional[str] = None) -> Participant:
        """注册用户；已存在时更新昵称"""
        participant = self.db.get(Participant, participant_id)
        if participant is None:
            participant = Participant(id=participant_id, nickname=nickname, status="active")
            self.db.add(participant)
        elif nickname:
            participant.nickname = nickname
        self.db.commit()
        self.db.refresh(participant)
        return participant

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        return self.db.get(Participant, participant_id)

    def get_status(self, participant_id: str) -> Optional[str]:
        participant = self.get_participant(participant_id)
        return participant.status if participant else None

    def to_info(self, participant: Participant) -> ParticipantInfo:
        vote_times = self.db.query(func.count(VoteRecord.id)).filter(
            VoteRecord.participant_id == participant.id
        ).scalar() or 0
        return ParticipantInfo(
            id=participant.id,
            nickname=participant.nickname,
            status=participant.status,
            vote_times=vote_times,
        )

    def list_participants(self, skip: int = 0, limit: int = 100) -> List[ParticipantInfo]:
        participants = self.db.query(Participant).order_by(Participant.created_at, Participant.id).offset(skip).limit(limit).all()
        return [self.to_info(p) for p in participants]

    def set_status(self, participant_id: str, status: str) -> Participant:
        participant = self.get_participant(participant_id)
        if participant is None:
            raise LiveError(ErrorCode.PARTICIPANT_NOT_FOUND, "用户不存在")
        participant.status = status
        self.db.commit()
        self.db.refresh(participant)
        return participant

    def toggle_ban(self, participant_id: str) -> Participant:
        """禁用/解禁用户（禁用后不能投票）"""
        participant = self.get_participant(participant_id)
        if participant is None:
            raise LiveError(ErrorCode.PARTICIPANT_NOT_FOUND, "用户不存在")
        next_status = "active" if participant.status == "banned" else "banned"
        return self.set_status(participant_id, next_status)

    def append_vote_history(
        self,
        participant_id: str,
        stream_id: str,
        live_id: str,
        side: str,
        weight: int,
        voted_at: datetime,
    ) -> VoteRecord:
        """追加一条投票记录；未注册的用户自动登记"""
        if self.db.get(Participant, participant_id) is None:
            self.db.add(Participant(id=participant_id, status="active"))
        record = VoteRecord(
            participant_id=participant_id,
            stream_id=stream_id,
            live_id=live_id,
            side=side,
            weight=weight,
            voted_at=voted_at,
        )
        self.db.add(record)
        self.db.commit()
        return record

    def get_vote_history(self, participant_id: str) -> List[VoteRecordInfo]:
        records = self.db.query(VoteRecord).filter(
            VoteRecord.participant_id == participant_id
        ).order_by(VoteRecord.voted_at.desc(), VoteRecord.id.desc()).all()
        return [VoteRecordInfo.model_validate(r) for r in records]

    def list_stream_voters(self, stream_id: str) -> List[StreamVoterInfo]:
        """某直播流的所有投票人，按时间倒序"""
        rows = self.db.query(VoteRecord, Participant).join(
            Participant, VoteRecord.participant_id == Participant.id
        ).filter(VoteRecord.stream_id == stream_id).order_by(
            VoteRecord.voted_at.desc(), VoteRecord.id.desc()
        ).all()
        return [
            StreamVoterInfo(
                participant_id=participant.id,
                nickname=participant.nickname or participant.id,
                stream_id=record.stream_id,
                live_id=record.live_id,
                side=record.side,
                weight=record.weight,
                voted_at=record.voted_at,
            )
            for record, participant in rows
        ]
