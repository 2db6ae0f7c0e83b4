"""Tests for data models."""

from datetime import datetime, timezone

from conftest import span

from stage_availability.models import (
    ActorAssignment,
    AvailabilityResult,
    AvailabilitySlot,
    CastabilityVerdict,
    CharacterCandidates,
    TimeRange,
)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_from_dict(self):
        r = TimeRange.from_dict({"start": "2024-01-01T09:00:00", "end": "2024-01-01T12:00:00"})
        assert r.start == datetime(2024, 1, 1, 9)
        assert r.end == datetime(2024, 1, 1, 12)

    def test_from_dict_utc_suffix(self):
        r = TimeRange.from_dict({"start": "2024-01-01T09:00:00Z", "end": "2024-01-01T12:00:00Z"})
        assert r.start == datetime(2024, 1, 1, 9, tzinfo=timezone.utc)

    def test_from_dict_accepts_datetimes(self):
        start, end = datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10)
        assert TimeRange.from_dict({"start": start, "end": end}) == TimeRange(start, end)

    def test_to_dict(self):
        assert span("09:00", "12:00").to_dict() == {
            "start": "2024-01-01T09:00:00",
            "end": "2024-01-01T12:00:00",
        }

    def test_degenerate(self):
        assert span("12:00", "09:00").is_degenerate
        assert span("09:00", "09:00").is_degenerate
        assert not span("09:00", "09:01").is_degenerate

    def test_hashable(self):
        assert len({span("09:00", "10:00"), span("09:00", "10:00")}) == 1


class TestCharacterCandidates:
    """Tests for CharacterCandidates model."""

    def test_from_dict(self):
        c = CharacterCandidates.from_dict({"character_id": "hamlet", "actors": ["alice"]})
        assert c.character_id == "hamlet"
        assert c.actors == ["alice"]

    def test_from_dict_without_actors(self):
        assert CharacterCandidates.from_dict({"character_id": "ghost"}).actors == []

    def test_round_trip(self):
        data = {"character_id": "hamlet", "actors": ["alice", "bob"]}
        assert CharacterCandidates.from_dict(data).to_dict() == data


class TestResults:
    """Tests for result models."""

    def test_verdict_to_dict(self):
        verdict = CastabilityVerdict(valid=False, uncastable_character_ids=["ghost"])
        assert verdict.to_dict() == {"valid": False, "uncastable_character_ids": ["ghost"]}

    def test_availability_result_defaults(self):
        result = AvailabilityResult(entity_id="p1", entity_type="play")
        assert result.total_slots == 0
        assert result.is_castable
        assert result.to_dict()["metrics"] == {
            "search_time_ms": 0.0,
            "combinations_evaluated": 0,
        }

    def test_slot_actor_ids(self):
        slot = AvailabilitySlot(
            start=datetime(2024, 1, 1, 9),
            end=datetime(2024, 1, 1, 10),
            duration_minutes=60,
            assignments=[ActorAssignment("a", "x"), ActorAssignment("b", "y")],
        )
        assert slot.actor_ids == ["x", "y"]
