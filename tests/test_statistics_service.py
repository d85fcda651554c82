"""
Tests for daily statistics and the platform counter.
"""

from datetime import date, datetime, timezone

from debate_live.models.participant import VoteRecord
from debate_live.services.participant_service import ParticipantService
from debate_live.services.statistics_service import StatisticsService


class TestDailyStats:

    def test_accumulate_never_overwrites(self, db, streams):
        service = StatisticsService(db)
        service.accumulate_daily("stream-001", date(2026, 10, 17), 2, 10)
        service.accumulate_daily("stream-001", date(2026, 10, 17), 4, 0)
        service.accumulate_daily("stream-002", date(2026, 10, 17), 1, 1)
        service.accumulate_daily("stream-001", date(2026, 10, 18), 0, 6)

        days = service.list_daily()
        assert [d["date"] for d in days] == ["2026-10-17", "2026-10-18"]
        first = days[0]
        assert (first["leftVotes"], first["rightVotes"], first["totalVotes"]) == (7, 11, 18)
        bars = {bar["id"]: bar for bar in first["streamVotesBar"]}
        assert bars["stream-001"]["name"] == "主会场"
        assert (bars["stream-001"]["leftVotes"], bars["stream-001"]["rightVotes"]) == (6, 10)

    def test_negative_deltas_ignored(self, db, streams):
        service = StatisticsService(db)
        service.accumulate_daily("stream-001", date(2026, 10, 17), 5, 5)
        row = service.accumulate_daily("stream-001", date(2026, 10, 17), -3, -3)
        assert (row.left_votes, row.right_votes) == (5, 5)

    def test_date_range_filter(self, db, streams):
        service = StatisticsService(db)
        for day in (16, 17, 18):
            service.accumulate_daily("stream-001", date(2026, 10, day), 1, 0)
        assert [d["date"] for d in service.list_daily("2026-10-17", "2026-10-17")] == ["2026-10-17"]


class TestGlobalTotal:

    def test_monotonic(self, db):
        service = StatisticsService(db)
        assert service.get_global_total() == 0
        assert service.increment_global_total(2) == 2
        assert service.increment_global_total(10) == 12
        assert service.increment_global_total(-5) == 12


class TestActiveUsers:

    def test_counts_users_over_threshold(self, db):
        participants = ParticipantService(db)
        voted_at = datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)
        for i in range(9):
            participants.append_vote_history("busy", "stream-001", f"live-{i}", "left", 2, voted_at)
        for i in range(3):
            participants.append_vote_history("casual", "stream-001", f"live-{i}", "right", 2, voted_at)

        service = StatisticsService(db)
        assert service.count_active_users(date(2026, 10, 17)) == 1
        assert service.count_active_users(date(2026, 10, 17), threshold=2) == 2
        assert service.count_active_users(date(2026, 10, 18)) == 0
        assert db.query(VoteRecord).count() == 12

    def test_summary(self, db, streams):
        ParticipantService(db).register("u1")
        StatisticsService(db).increment_global_total(4)
        summary = StatisticsService(db).summary()
        assert summary == {"totalVotes": 4, "totalUsers": 1, "totalStreams": 3, "totalLiveDays": 0}
