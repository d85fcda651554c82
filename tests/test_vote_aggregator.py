"""
Tests for the vote ceiling and proportional capping.
"""

import pytest

from debate_live.schemas.live_schemas import Tally
from debate_live.services.judge_service import default_judges
from debate_live.services.presence_service import PresenceTracker
from debate_live.services.vote_aggregator import VoteAggregator, scale_to_ceiling, vote_ceiling
from debate_live.services.vote_ledger import VoteLedger


class TestVoteCeiling:

    def test_three_default_judges_five_online(self):
        assert vote_ceiling(default_judges(), 5) == 34

    def test_fewer_viewers_than_judges(self):
        assert vote_ceiling(default_judges(), 1) == 30

    def test_no_judges(self):
        assert vote_ceiling([], 4) == 8


class TestScaleToCeiling:

    def test_under_ceiling_unchanged(self):
        tally = Tally(10, 20)
        assert scale_to_ceiling(tally, 34) is tally

    def test_scales_to_exact_ceiling(self):
        scaled = scale_to_ceiling(Tally(30, 20), 34)
        assert scaled.total_votes == 34
        # floor(30 * 34 / 50) = 20, remainder to the right
        assert scaled == Tally(20, 14)

    @pytest.mark.parametrize("left,right", [(1, 99), (99, 1), (50, 50), (0, 100), (17, 23)])
    def test_ratio_preserved_within_rounding(self, left, right):
        scaled = scale_to_ceiling(Tally(left, right), 34)
        assert scaled.total_votes == 34
        assert abs(scaled.left_votes / 34 - left / (left + right)) < 1 / 34

    def test_exact_ceiling_and_below_unchanged(self):
        assert scale_to_ceiling(Tally(7, 13), 34) == Tally(7, 13)
        assert scale_to_ceiling(Tally(14, 20), 34) == Tally(14, 20)

    def test_rounds_left_down(self):
        # floor(17 * 34 / 40) = 14
        assert scale_to_ceiling(Tally(17, 23), 34) == Tally(14, 20)

    def test_zero_ceiling(self):
        assert scale_to_ceiling(Tally(5, 5), 0) == Tally(0, 0)


class TestVoteAggregator:

    @pytest.fixture
    def presence(self):
        presence = PresenceTracker()
        presence.set_online_count("s1", 5)
        return presence

    @pytest.fixture
    def ledger(self):
        return VoteLedger()

    @pytest.fixture
    def aggregator(self, ledger, presence):
        return VoteAggregator(ledger, presence, lambda stream_id: default_judges())

    def test_caps_current_tally(self, aggregator, ledger):
        ledger.set_current("s1", 60, 40)
        assert aggregator.ceiling("s1") == 34
        assert aggregator.cap_if_exceeded("s1") is True
        assert ledger.current("s1").total_votes == 34
        assert ledger.current("s1") == Tally(20, 14)

    def test_no_change_under_ceiling(self, aggregator, ledger):
        ledger.set_current("s1", 10, 10)
        assert aggregator.cap_if_exceeded("s1") is False
        assert ledger.current("s1") == Tally(10, 10)

    def test_session_capped_only_when_requested(self, aggregator, ledger):
        ledger.set_session("s1", 50, 50)
        assert aggregator.cap_if_exceeded("s1") is False
        assert ledger.session("s1") == Tally(50, 50)

        assert aggregator.cap_if_exceeded("s1", include_session=True) is True
        assert ledger.session("s1") == Tally(17, 17)

    def test_global_total(self, aggregator, ledger):
        ledger.set_current("s1", 1, 1)
        ledger.set_current("s2", 5, 0)
        assert aggregator.global_total() == 7
