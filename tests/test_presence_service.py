"""
Tests for online audience tracking.
"""

from debate_live.services.presence_service import PresenceTracker


class TestPresenceTracker:

    def test_join_and_leave(self):
        presence = PresenceTracker()
        assert presence.join("s1", "v1") == 1
        assert presence.join("s1", "v2") == 2
        assert presence.join("s1", "v2") == 2
        assert presence.leave("s1", "v1") == 1
        assert presence.get_online_count("s2") == 0

    def test_leave_all(self):
        presence = PresenceTracker()
        presence.join("s1", "v1")
        presence.join("s2", "v1")
        presence.join("s2", "v2")
        assert sorted(presence.leave_all("v1")) == ["s1", "s2"]
        assert presence.counts() == {"s2": 1}

    def test_override_until_next_change(self):
        presence = PresenceTracker()
        presence.join("s1", "v1")
        presence.set_online_count("s1", 500)
        assert presence.get_online_count("s1") == 500
        presence.join("s1", "v2")
        assert presence.get_online_count("s1") == 2

    def test_override_clamped(self):
        presence = PresenceTracker()
        presence.set_online_count("s1", -3)
        assert presence.counts() == {"s1": 0}
