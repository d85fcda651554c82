"""
票数账本

每个直播流两套计数：当前票数（持久化，后台可改）与本场票数（仅本场真实投票累加）。
"""

import logging
from typing import Callable, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from debate_live.models.tally import StreamTally
from debate_live.schemas.live_schemas import Tally

logger = logging.getLogger(__name__)


def _non_negative(value) -> int:
    return max(0, int(value or 0))


class VoteLedger:
    """按直播流保存正反方票数"""

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self._session_factory = session_factory
        self._current: Dict[str, Tally] = {}
        self._session: Dict[str, Tally] = {}

    # 当前票数

    def current(self, stream_id: str) -> Tally:
        if stream_id in self._current:
            return self._current[stream_id]
        # 库里没有的流不缓存，避免任意 ID 撑大内存
        tally = self._load(stream_id)
        if tally is None:
            return Tally()
        self._current[stream_id] = tally
        return tally

    def add_current(self, stream_id: str, left_delta: int, right_delta: int) -> Tally:
        tally = self.current(stream_id).with_delta(int(left_delta or 0), int(right_delta or 0))
        return self._store_current(stream_id, tally)

    def set_current(self, stream_id: str, left_votes: int, right_votes: int) -> Tally:
        return self._store_current(stream_id, Tally(_non_negative(left_votes), _non_negative(right_votes)))

    def reset_current(self, stream_id: str) -> Tally:
        return self._store_current(stream_id, Tally())

    # 本场票数

    def session(self, stream_id: str) -> Tally:
        return self._session.get(stream_id, Tally())

    def add_session(self, stream_id: str, left_delta: int, right_delta: int) -> Tally:
        tally = self.session(stream_id).with_delta(int(left_delta or 0), int(right_delta or 0))
        self._session[stream_id] = tally
        return tally

    def set_session(self, stream_id: str, left_votes: int, right_votes: int) -> Tally:
        tally = Tally(_non_negative(left_votes), _non_negative(right_votes))
        self._session[stream_id] = tally
        return tally

    def reset_session(self, stream_id: str) -> Tally:
        self._session[stream_id] = Tally()
        return self._session[stream_id]

    def forget(self, stream_id: str):
        """直播流被删除时丢弃其两套计数及持久化的当前票数"""
        self._current.pop(stream_id, None)
        self._session.pop(stream_id, None)
        if self._session_factory is None:
            return
        try:
            with self._session_factory() as db:
                db.query(StreamTally).filter(StreamTally.stream_id == stream_id).delete()
                db.commit()
        except Exception:
            logger.exception(f"删除直播流 {stream_id} 的票数失败")

    # 汇总

    def known_streams(self) -> Iterable[str]:
        return list(self._current.keys())

    def all_total(self) -> int:
        """所有已知直播流当前票数之和"""
        return sum(t.total_votes for t in self._current.values())

    def warm_up(self):
        """启动时载入所有已持久化的当前票数"""
        if self._session_factory is None:
            return
        with self._session_factory() as db:
            for row in db.query(StreamTally).all():
                self._current.setdefault(row.stream_id, Tally(row.left_votes, row.right_votes))

    def _store_current(self, stream_id: str, tally: Tally) -> Tally:
        self._current[stream_id] = tally
        self._persist(stream_id, tally)
        return tally

    def _load(self, stream_id: str) -> Optional[Tally]:
        if self._session_factory is None:
            return None
        try:
            with self._session_factory() as db:
                row = db.get(StreamTally, stream_id)
                if row:
                    return Tally(row.left_votes, row.right_votes)
        except Exception:
            logger.exception(f"读取直播流 {stream_id} 的票数失败，按 0 处理")
        return None

    def _persist(self, stream_id: str, tally: Tally):
        # 内存中的票数为准，写库失败只记日志
        if self._session_factory is None:
            return
        try:
            with self._session_factory() as db:
                row = db.get(StreamTally, stream_id)
                if row is None:
                    row = StreamTally(stream_id=stream_id)
                    db.add(row)
                row.left_votes = tally.left_votes
                row.right_votes = tally.right_votes
                db.commit()
        except Exception:
            logger.exception(f"保存直播流 {stream_id} 的票数失败")
