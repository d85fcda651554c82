"""
票数汇总与上限控制
"""

import logging
from typing import Callable, List

from debate_live.schemas.live_schemas import Tally
from debate_live.schemas.participant_schemas import JudgeConfig
from debate_live.services.presence_service import PresenceTracker
from debate_live.services.vote_ledger import VoteLedger

logger = logging.getLogger(__name__)


def vote_ceiling(judges: List[JudgeConfig], online_count: int, audience_weight: int = 2) -> int:
    """单场票数上限 = 评委票数之和 + 每位非评委在线观众的票数"""
    judge_base_total = sum(j.vote_weight for j in judges)
    return judge_base_total + audience_weight * max(0, online_count - len(judges))


def scale_to_ceiling(tally: Tally, ceiling: int) -> Tally:
    """按比例压缩到上限：正方向下取整，余数归反方"""
    total = tally.total_votes
    if total <= ceiling:
        return tally
    ceiling = max(0, ceiling)
    left = (tally.left_votes * ceiling) // total
    return Tally(left, ceiling - left)


class VoteAggregator:
    """跨直播流汇总票数，并按在线人数限制单场票数"""

    def __init__(
        self,
        ledger: VoteLedger,
        presence: PresenceTracker,
        judges_for: Callable[[str], List[JudgeConfig]],
        audience_weight: int = 2,
    ):
        self.ledger = ledger
        self.presence = presence
        self.judges_for = judges_for
        self.audience_weight = audience_weight

    def ceiling(self, stream_id: str) -> int:
        return vote_ceiling(
            self.judges_for(stream_id),
            self.presence.get_online_count(stream_id),
            self.audience_weight,
        )

    def cap_if_exceeded(self, stream_id: str, include_session: bool = False) -> bool:
        """超出上限时按比例压缩当前票数（直播中可同时压缩本场票数），返回是否发生压缩"""
        ceiling = self.ceiling(stream_id)
        capped = False

        current = self.ledger.current(stream_id)
        scaled = scale_to_ceiling(current, ceiling)
        if scaled != current:
            self.ledger.set_current(stream_id, scaled.left_votes, scaled.right_votes)
            capped = True

        if include_session:
            session = self.ledger.session(stream_id)
            scaled = scale_to_ceiling(session, ceiling)
            if scaled != session:
                self.ledger.set_session(stream_id, scaled.left_votes, scaled.right_votes)
                capped = True

        if capped:
            logger.warning(f"直播流 {stream_id} 票数超过上限 {ceiling}，已按比例压缩")
        return capped

    def global_total(self) -> int:
        """所有直播流当前票数之和"""
        return self.ledger.all_total()
