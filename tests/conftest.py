"""Test fixtures for availability engine tests."""

import json
from datetime import datetime

import pytest

from stage_availability.models import CharacterCandidates, TimeRange

DAY = datetime(2024, 1, 1)


def at(hhmm: str) -> datetime:
    """Instant on the test day, e.g. at("09:30")."""
    hours, minutes = hhmm.split(":")
    return DAY.replace(hour=int(hours), minute=int(minutes))


def span(start: str, end: str) -> TimeRange:
    """TimeRange on the test day, e.g. span("09:00", "12:00")."""
    return TimeRange(at(start), at(end))


def hours(ranges: list[TimeRange]) -> list[tuple[str, str]]:
    """Render ranges as (HH:MM, HH:MM) pairs for compact assertions."""
    return [(r.start.strftime("%H:%M"), r.end.strftime("%H:%M")) for r in ranges]


@pytest.fixture
def work_day() -> TimeRange:
    """Search window 09:00-17:00."""
    return span("09:00", "17:00")


@pytest.fixture
def hamlet_characters() -> list[CharacterCandidates]:
    """Two characters sharing a two-actor pool."""
    return [
        CharacterCandidates("hamlet", ["alice", "bob"]),
        CharacterCandidates("ophelia", ["alice", "bob"]),
    ]


@pytest.fixture
def search_request(tmp_path):
    """Search request JSON file for the CLI."""
    data = {
        "entity_id": "hamlet",
        "entity_type": "play",
        "window": {"start": "2024-01-01T09:00:00", "end": "2024-01-01T17:00:00"},
        "characters": [
            {"character_id": "hamlet", "actors": ["alice", "bob"]},
            {"character_id": "ophelia", "actors": ["carol"]},
        ],
        "busy": {
            "alice": [{"start": "2024-01-01T12:00:00", "end": "2024-01-01T13:00:00"}],
            "carol": [{"start": "2024-01-01T15:00:00", "end": "2024-01-01T17:00:00"}],
        },
        "min_duration": 60,
    }
    path = tmp_path / "request.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
