"""
投票准入校验
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from debate_live.core.errors import ErrorCode, LiveError
from debate_live.schemas.participant_schemas import JudgeConfig
from debate_live.services.session_registry import SessionKey, SessionRegistry


@dataclass(frozen=True)
class Admission:
    """准入结果：本次投票的票数与身份"""
    weight: int
    as_judge: bool
    judge_id: Optional[str] = None


class VoteAdmissionGuard:
    """校验观众投票是否可被接受，并计算票数"""

    def __init__(
        self,
        registry: SessionRegistry,
        window_open_offset: float = 45,
        window_close_offset: float = 60,
        audience_weight: int = 2,
    ):
        self.registry = registry
        self.window_open_offset = window_open_offset
        self.window_close_offset = window_close_offset
        self.audience_weight = audience_weight

    def window_bounds(self, start_time: datetime):
        return (
            start_time + timedelta(seconds=self.window_open_offset),
            start_time + timedelta(seconds=self.window_close_offset),
        )

    def check_window(self, start_time: datetime, now: datetime):
        opens_at, closes_at = self.window_bounds(start_time)
        if now < opens_at:
            raise LiveError(
                ErrorCode.VOTING_WINDOW_NOT_OPEN,
                f"投票尚未开始（直播 {self.window_open_offset:g} 秒后开放投票）",
            )
        if now > closes_at:
            raise LiveError(
                ErrorCode.VOTING_WINDOW_CLOSED,
                f"投票已结束（直播 {self.window_close_offset:g} 秒后关闭）",
            )

    def check_participant(self, participant_status: Optional[str]):
        if participant_status == "banned":
            raise LiveError(ErrorCode.PARTICIPANT_BANNED, "你已被禁用，无法投票")

    def check_live(self, key: Optional[SessionKey], start_time: Optional[datetime]):
        if key is None or start_time is None or key not in self.registry:
            raise LiveError(ErrorCode.STREAM_NOT_LIVE, "该直播流未在直播，无法投票")

    def weigh(self, participant_id: str, judges: List[JudgeConfig]) -> Admission:
        for judge in judges:
            if judge.participant_id and judge.participant_id == participant_id:
                return Admission(weight=judge.vote_weight, as_judge=True, judge_id=judge.id)
        return Admission(weight=self.audience_weight, as_judge=False)

    def admit(
        self,
        key: Optional[SessionKey],
        start_time: Optional[datetime],
        participant_id: str,
        participant_status: Optional[str],
        judges: List[JudgeConfig],
        now: datetime,
    ) -> Admission:
        """按顺序校验：禁用 → 未开播 → 窗口 → 重复投票；通过后立即登记"""
        self.check_participant(participant_status)
        self.check_live(key, start_time)
        self.check_window(start_time, now)

        admission = self.weigh(participant_id, judges)
        if not self.registry.try_record(key, participant_id, admission.as_judge):
            raise LiveError(ErrorCode.ALREADY_VOTED, "你已投过票（每人每场只有一次投票机会）")
        return admission
