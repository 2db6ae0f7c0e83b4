"""Tests for user availability checks."""

from conftest import hours, span

from stage_availability.availability import (
    check_bulk_availability,
    check_user_availability,
    clip_to_period,
)
from stage_availability.models import UserAvailabilityStatus


class TestClipToPeriod:
    """Tests for clip_to_period function."""

    def test_clips_and_merges(self, work_day):
        result = clip_to_period(
            work_day,
            [span("08:00", "10:00"), span("09:30", "11:00"), span("16:00", "18:00")],
        )
        assert hours(result) == [("09:00", "11:00"), ("16:00", "17:00")]

    def test_touching_boundary_dropped(self, work_day):
        assert clip_to_period(work_day, [span("17:00", "18:00")]) == []


class TestCheckUserAvailability:
    """Tests for check_user_availability function."""

    def test_free(self, work_day):
        result = check_user_availability("alice", work_day)
        assert result.status == UserAvailabilityStatus.FREE
        assert result.is_fully_available
        assert hours(result.free_blocks) == [("09:00", "17:00")]
        assert result.total_free_minutes == 480

    def test_partial(self, work_day):
        result = check_user_availability("alice", work_day, busy=[span("12:00", "13:00")])
        assert result.status == UserAvailabilityStatus.PARTIAL
        assert not result.is_fully_available
        assert hours(result.free_blocks) == [("09:00", "12:00"), ("13:00", "17:00")]
        assert result.total_busy_minutes == 60
        assert result.total_free_minutes == 420

    def test_busy(self, work_day):
        result = check_user_availability("alice", work_day, busy=[span("08:00", "18:00")])
        assert result.status == UserAvailabilityStatus.BUSY
        assert result.free_blocks == []
        assert result.total_busy_minutes == 480

    def test_tentative(self, work_day):
        result = check_user_availability("alice", work_day, tentative=[work_day])
        assert result.status == UserAvailabilityStatus.TENTATIVE
        assert result.has_tentative_events
        assert result.total_tentative_minutes == 480

    def test_busy_takes_precedence_over_tentative(self, work_day):
        result = check_user_availability(
            "alice",
            work_day,
            busy=[span("10:00", "12:00")],
            tentative=[span("11:00", "14:00")],
        )
        assert hours(result.busy_blocks) == [("10:00", "12:00")]
        assert hours(result.tentative_blocks) == [("12:00", "14:00")]
        assert hours(result.free_blocks) == [("09:00", "10:00"), ("14:00", "17:00")]

    def test_tentative_hidden_by_busy_time(self, work_day):
        result = check_user_availability(
            "alice",
            work_day,
            busy=[span("10:00", "12:00")],
            tentative=[span("10:30", "11:30")],
        )
        assert result.tentative_blocks == []
        assert result.total_tentative_minutes == 0
        assert result.has_tentative_events
        assert result.to_dict()["has_tentative_events"] is True
        assert result.status == UserAvailabilityStatus.PARTIAL

    def test_tentative_outside_period_not_counted(self, work_day):
        result = check_user_availability("alice", work_day, tentative=[span("17:00", "18:00")])
        assert not result.has_tentative_events

    def test_short_unblocked_period_is_free(self):
        period = span("09:00", "09:10")
        result = check_user_availability("alice", period, min_block_minutes=15)
        assert result.status == UserAvailabilityStatus.FREE
        assert result.is_fully_available
        assert result.free_blocks == []
        assert result.total_free_minutes == 0

    def test_short_free_blocks_dropped(self, work_day):
        result = check_user_availability(
            "alice",
            work_day,
            busy=[span("09:10", "16:55")],
            min_block_minutes=15,
        )
        assert result.free_blocks == []
        assert result.status == UserAvailabilityStatus.BUSY

    def test_to_dict(self, work_day):
        data = check_user_availability("alice", work_day, busy=[span("12:00", "13:00")]).to_dict()
        assert data["user_id"] == "alice"
        assert data["status"] == "PARTIAL"
        assert data["busy_blocks"] == [
            {"start": "2024-01-01T12:00:00", "end": "2024-01-01T13:00:00"}
        ]


class TestCheckBulkAvailability:
    """Tests for check_bulk_availability function."""

    def test_summary_lists(self, work_day):
        bulk = check_bulk_availability(
            work_day,
            {
                "alice": {},
                "bob": {"busy": [span("12:00", "13:00")]},
                "carol": {"tentative": [work_day]},
                "dave": {"busy": [work_day]},
            },
        )
        assert [r.user_id for r in bulk.results] == ["alice", "bob", "carol", "dave"]
        assert bulk.fully_available_user_ids == ["alice"]
        assert bulk.partially_available_user_ids == ["bob"]
        assert bulk.tentative_user_ids == ["carol"]
        assert bulk.unavailable_user_ids == ["dave"]

    def test_empty(self, work_day):
        bulk = check_bulk_availability(work_day, {})
        assert bulk.results == []
        assert bulk.to_dict()["fully_available_user_ids"] == []
