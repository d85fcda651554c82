"""
Tests for stored debate flows and segment normalisation.
"""

import pytest

from debate_live.core.errors import ErrorCode, LiveError
from debate_live.models.debate_flow import DebateFlow
from debate_live.schemas.debate_schemas import DebateSegment
from debate_live.services.debate_flow_service import DebateFlowService
from debate_live.services.stream_service import StreamService


class TestDebateSegment:

    def test_defaults(self):
        assert DebateSegment.model_validate({}) == DebateSegment(name="未命名环节", duration=180, side="both")

    @pytest.mark.parametrize("duration,expected", [(0, 180), (-5, 10), (9, 10), ("240", 240), (None, 180)])
    def test_duration(self, duration, expected):
        assert DebateSegment.model_validate({"duration": duration}).duration == expected

    def test_name_trimmed_and_side_checked(self):
        segment = DebateSegment.model_validate({"name": " 自由辩论 ", "side": "LEFT"})
        assert segment.name == "自由辩论"
        assert segment.side == "both"


class TestDebateFlowService:

    def test_missing_flow_is_empty(self, db, streams):
        flow = DebateFlowService(db).get_flow("stream-001")
        assert flow.segments == []
        assert flow.updated_at is None

    def test_save_replaces_previous(self, db, streams):
        service = DebateFlowService(db)
        service.set_flow("stream-001", [DebateSegment(name="立论"), DebateSegment(name="质询")])
        service.set_flow("stream-001", [DebateSegment(name="总结", duration=120, side="right")])

        flow = service.get_flow("stream-001")
        assert flow.segments == [DebateSegment(name="总结", duration=120, side="right")]
        assert flow.updated_at is not None
        assert db.query(DebateFlow).count() == 1

    def test_unknown_stream(self, db, streams):
        with pytest.raises(LiveError) as exc_info:
            DebateFlowService(db).set_flow("stream-missing", [])
        assert exc_info.value.code == ErrorCode.STREAM_NOT_FOUND

    def test_corrupt_row_reads_as_empty(self, db, streams):
        db.add(DebateFlow(stream_id="stream-001", segments="{not json"))
        db.commit()
        assert DebateFlowService(db).get_flow("stream-001").segments == []

    def test_deleting_stream_removes_flow(self, db, streams):
        DebateFlowService(db).set_flow("stream-002", [DebateSegment(name="立论")])
        StreamService(db).delete_stream("stream-002")
        assert db.get(DebateFlow, "stream-002") is None
