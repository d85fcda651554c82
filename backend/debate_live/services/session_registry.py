"""
投票会话登记

按 (直播流, 场次) 记录已投票的观众与评委，保证每人每场只能投一次。
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

SessionKey = Tuple[str, str]


@dataclass
class VoteSession:
    """一场直播的投票登记"""
    stream_id: str
    live_id: str
    voted_participants: Set[str] = field(default_factory=set)
    voted_judges: Set[str] = field(default_factory=set)

    @property
    def key(self) -> SessionKey:
        return (self.stream_id, self.live_id)

    def has_voted(self, participant_id: str) -> bool:
        return participant_id in self.voted_participants or participant_id in self.voted_judges


class SessionRegistry:
    """投票会话表；关播即丢弃，不保留历史"""

    def __init__(self):
        self._sessions: Dict[SessionKey, VoteSession] = {}

    def create(self, stream_id: str, live_id: str) -> VoteSession:
        session = VoteSession(stream_id, live_id)
        self._sessions[session.key] = session
        return session

    def get(self, key: SessionKey) -> Optional[VoteSession]:
        return self._sessions.get(key)

    def has_voted(self, key: SessionKey, participant_id: str) -> bool:
        session = self._sessions.get(key)
        return session is not None and session.has_voted(participant_id)

    def record_vote(self, key: SessionKey, participant_id: str, as_judge: bool = False):
        """登记投票；调用方需先确认未投过"""
        session = self._sessions[key]
        if as_judge:
            session.voted_judges.add(participant_id)
        else:
            session.voted_participants.add(participant_id)

    def try_record(self, key: SessionKey, participant_id: str, as_judge: bool = False) -> bool:
        """检查并登记，一步完成；已投过返回 False"""
        session = self._sessions[key]
        if session.has_voted(participant_id):
            return False
        self.record_vote(key, participant_id, as_judge)
        return True

    def discard(self, key: SessionKey):
        self._sessions.pop(key, None)

    def __contains__(self, key: SessionKey) -> bool:
        return key in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
