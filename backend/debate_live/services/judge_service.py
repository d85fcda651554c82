"""
评委配置服务
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from debate_live.models.judge import Judge
from debate_live.models.participant import Participant
from debate_live.schemas.participant_schemas import JudgeConfig

logger = logging.getLogger(__name__)


def default_judges(vote_weight: int = 10, count: int = 3) -> List[JudgeConfig]:
    """未配置评委时的默认评委席"""
    roles = ["主评委"] + ["嘉宾评委"] * (count - 1)
    return [
        JudgeConfig(id=f"judge-{i + 1}", name=f"评委{i + 1}", role=roles[i], vote_weight=vote_weight)
        for i in range(count)
    ]


class JudgeService:
    """按直播流读取/保存评委配置"""

    def __init__(self, db: Session, max_judges: int = 3, default_vote_weight: int = 10):
        self.db = db
        self.max_judges = max_judges
        self.default_vote_weight = default_vote_weight

    def get_judges(self, stream_id: str) -> List[JudgeConfig]:
        rows = self.db.query(Judge).filter(Judge.stream_id == stream_id).order_by(Judge.position).all()
        if not rows:
            return default_judges(self.default_vote_weight, self.max_judges)
        return [
            JudgeConfig(
                id=row.judge_key,
                name=row.name,
                role=row.role or "评委",
                vote_weight=row.vote_weight,
                participant_id=row.participant_id,
            )
            for row in rows
        ]

    def find_by_participant(self, stream_id: str, participant_id: str) -> Optional[JudgeConfig]:
        for judge in self.get_judges(stream_id):
            if judge.participant_id == participant_id:
                return judge
        return None

    def set_judges(
        self,
        stream_id: str,
        judges: List[JudgeConfig],
        replaced_participant_ids: Optional[List[str]] = None,
    ) -> List[JudgeConfig]:
        """保存评委配置（最多 max_judges 位）；被替换评委绑定的用户将被禁用"""
        for participant_id in replaced_participant_ids or []:
            participant = self.db.get(Participant, participant_id)
            if participant is not None:
                participant.status = "banned"
                logger.info(f"被替换评委已禁用: {participant_id}")

        self.db.query(Judge).filter(Judge.stream_id == stream_id).delete()
        saved = []
        for position, judge in enumerate(judges[: self.max_judges]):
            name = judge.name.strip() or f"评委{position + 1}"
            row = Judge(
                stream_id=stream_id,
                judge_key=judge.id or f"judge-{position + 1}",
                name=name,
                role=judge.role or "评委",
                vote_weight=max(0, judge.vote_weight),
                participant_id=judge.participant_id,
                position=position,
            )
            self.db.add(row)
            saved.append(JudgeConfig(
                id=row.judge_key,
                name=name,
                role=row.role,
                vote_weight=row.vote_weight,
                participant_id=row.participant_id,
            ))
        self.db.commit()
        return saved
