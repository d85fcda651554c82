"""
数据统计服务

每日票数只累加不覆盖；平台总票数只增不减。
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from debate_live.models.participant import Participant, VoteRecord
from debate_live.models.stream import Stream
from debate_live.models.tally import DailyStat, PlatformCounter

logger = logging.getLogger(__name__)

GLOBAL_TOTAL_KEY = "total_votes"


class StatisticsService:
    """每日票数与平台总票数"""

    def __init__(self, db: Session):
        self.db = db

    def accumulate_daily(self, stream_id: str, day: date, left_delta: int, right_delta: int) -> DailyStat:
        """把一场直播的正反方票数累加到当日统计"""
        date_str = day.isoformat()
        row = self.db.query(DailyStat).filter(
            DailyStat.date == date_str,
            DailyStat.stream_id == stream_id
        ).first()
        if row is None:
            stream = self.db.get(Stream, stream_id)
            row = DailyStat(
                date=date_str,
                stream_id=stream_id,
                stream_name=stream.name if stream else stream_id,
                left_votes=0,
                right_votes=0,
            )
            self.db.add(row)
        row.left_votes += max(0, int(left_delta))
        row.right_votes += max(0, int(right_delta))
        self.db.commit()
        logger.info(f"📊 票数分析已累加: {stream_id} {date_str} +{left_delta}/+{right_delta}")
        return row

    def increment_global_total(self, amount: int) -> int:
        counter = self.db.get(PlatformCounter, GLOBAL_TOTAL_KEY)
        if counter is None:
            counter = PlatformCounter(key=GLOBAL_TOTAL_KEY, value=0)
            self.db.add(counter)
        counter.value += max(0, int(amount))
        self.db.commit()
        return counter.value

    def get_global_total(self) -> int:
        counter = self.db.get(PlatformCounter, GLOBAL_TOTAL_KEY)
        return counter.value if counter else 0

    def list_daily(self, start: Optional[str] = None, end: Optional[str] = None) -> List[dict]:
        """按日期汇总，每天附带各直播流明细"""
        query = self.db.query(DailyStat)
        if start:
            query = query.filter(DailyStat.date >= start)
        if end:
            query = query.filter(DailyStat.date <= end)

        days = {}
        for row in query.order_by(DailyStat.date, DailyStat.id).all():
            day = days.setdefault(row.date, {
                "date": row.date,
                "leftVotes": 0,
                "rightVotes": 0,
                "totalVotes": 0,
                "streamVotesBar": [],
            })
            day["leftVotes"] += row.left_votes
            day["rightVotes"] += row.right_votes
            day["totalVotes"] += row.left_votes + row.right_votes
            day["streamVotesBar"].append({
                "id": row.stream_id,
                "name": row.stream_name,
                "leftVotes": row.left_votes,
                "rightVotes": row.right_votes,
            })
        return list(days.values())

    def count_active_users(self, day: date, threshold: int = 8) -> int:
        """当日投票次数超过 threshold 的用户数"""
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)
        rows = self.db.query(VoteRecord.participant_id, func.count(VoteRecord.id)).filter(
            VoteRecord.voted_at >= start,
            VoteRecord.voted_at < end
        ).group_by(VoteRecord.participant_id).all()
        return sum(1 for _, count in rows if count > threshold)

    def summary(self) -> dict:
        return {
            "totalVotes": self.get_global_total(),
            "totalUsers": self.db.query(func.count(Participant.id)).scalar() or 0,
            "totalStreams": self.db.query(func.count(Stream.id)).scalar() or 0,
            "totalLiveDays": self.db.query(func.count(func.distinct(DailyStat.date))).scalar() or 0,
        }
