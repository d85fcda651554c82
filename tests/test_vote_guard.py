"""
Tests for vote admission checks.
"""

from datetime import datetime, timedelta, timezone

import pytest

from debate_live.core.errors import ErrorCode, LiveError
from debate_live.schemas.participant_schemas import JudgeConfig
from debate_live.services.judge_service import default_judges
from debate_live.services.session_registry import SessionRegistry
from debate_live.services.vote_guard import VoteAdmissionGuard

START = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)
KEY = ("s1", "live-a")


def at(seconds: float) -> datetime:
    return START + timedelta(seconds=seconds)


@pytest.fixture
def registry():
    registry = SessionRegistry()
    registry.create(*KEY)
    return registry


@pytest.fixture
def guard(registry):
    return VoteAdmissionGuard(registry, window_open_offset=45, window_close_offset=60)


@pytest.fixture
def judges():
    panel = default_judges()
    panel[0] = JudgeConfig(id="judge-1", name="主评委", vote_weight=10, participant_id="j1")
    return panel


class TestAdmit:

    def test_audience_vote_inside_window(self, guard, judges):
        admission = guard.admit(KEY, START, "u1", "active", judges, at(50))
        assert admission.weight == 2
        assert admission.as_judge is False

    def test_judge_vote_uses_configured_weight(self, guard, judges):
        admission = guard.admit(KEY, START, "j1", "active", judges, at(46))
        assert admission.weight == 10
        assert admission.as_judge is True
        assert admission.judge_id == "judge-1"

    def test_unknown_participant_is_admitted(self, guard, judges):
        assert guard.admit(KEY, START, "stranger", None, judges, at(50)).weight == 2

    def test_banned_participant_rejected(self, guard, judges):
        with pytest.raises(LiveError) as exc_info:
            guard.admit(KEY, START, "u1", "banned", judges, at(50))
        assert exc_info.value.code == ErrorCode.PARTICIPANT_BANNED

    def test_not_live_rejected(self, guard, judges):
        with pytest.raises(LiveError) as exc_info:
            guard.admit(None, None, "u1", "active", judges, at(50))
        assert exc_info.value.code == ErrorCode.STREAM_NOT_LIVE

    def test_discarded_session_rejected(self, guard, registry, judges):
        registry.discard(KEY)
        with pytest.raises(LiveError) as exc_info:
            guard.admit(KEY, START, "u1", "active", judges, at(50))
        assert exc_info.value.code == ErrorCode.STREAM_NOT_LIVE

    def test_ban_is_checked_before_live_state(self, guard, judges):
        with pytest.raises(LiveError) as exc_info:
            guard.admit(None, None, "u1", "banned", judges, at(50))
        assert exc_info.value.code == ErrorCode.PARTICIPANT_BANNED

    @pytest.mark.parametrize("seconds", [0, 30, 44.999])
    def test_before_window(self, guard, judges, seconds):
        with pytest.raises(LiveError) as exc_info:
            guard.admit(KEY, START, "u1", "active", judges, at(seconds))
        assert exc_info.value.code == ErrorCode.VOTING_WINDOW_NOT_OPEN

    @pytest.mark.parametrize("seconds", [60.001, 75, 600])
    def test_after_window(self, guard, judges, seconds):
        with pytest.raises(LiveError) as exc_info:
            guard.admit(KEY, START, "u1", "active", judges, at(seconds))
        assert exc_info.value.code == ErrorCode.VOTING_WINDOW_CLOSED

    @pytest.mark.parametrize("seconds", [45, 60])
    def test_window_bounds_are_inclusive(self, guard, judges, seconds):
        assert guard.admit(KEY, START, "u1", "active", judges, at(seconds)).weight == 2

    def test_second_vote_rejected(self, guard, judges):
        guard.admit(KEY, START, "u1", "active", judges, at(50))
        with pytest.raises(LiveError) as exc_info:
            guard.admit(KEY, START, "u1", "active", judges, at(51))
        assert exc_info.value.code == ErrorCode.ALREADY_VOTED

    def test_rejected_vote_is_not_recorded(self, guard, registry, judges):
        with pytest.raises(LiveError):
            guard.admit(KEY, START, "u1", "active", judges, at(10))
        assert not registry.has_voted(KEY, "u1")


class TestWeigh:

    def test_unbound_default_judges_never_match(self, guard):
        assert guard.weigh("judge-1", default_judges()).as_judge is False

    def test_custom_audience_weight(self, registry):
        guard = VoteAdmissionGuard(registry, audience_weight=3)
        assert guard.weigh("u1", []).weight == 3


class TestStandaloneChecks:

    def test_check_participant(self, guard):
        guard.check_participant("active")
        guard.check_participant(None)
        with pytest.raises(LiveError) as exc_info:
            guard.check_participant("banned")
        assert exc_info.value.code == ErrorCode.PARTICIPANT_BANNED

    def test_check_live(self, guard):
        guard.check_live(KEY, START)
        for key, start in [(None, None), (KEY, None), (("s1", "other"), START)]:
            with pytest.raises(LiveError) as exc_info:
                guard.check_live(key, start)
            assert exc_info.value.code == ErrorCode.STREAM_NOT_LIVE
