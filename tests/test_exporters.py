"""Tests for availability result exporters."""

import csv
import json

import pytest
from conftest import span
from openpyxl import load_workbook

from stage_availability.exporters import (
    CSVExporter,
    ExcelExporter,
    JSONExporter,
    get_exporter,
    load_request,
)
from stage_availability.models import CharacterCandidates
from stage_availability.search import find_availability_slots


@pytest.fixture
def result(work_day):
    return find_availability_slots(
        "hamlet",
        "play",
        work_day,
        [
            CharacterCandidates("hamlet", ["alice"]),
            CharacterCandidates("ophelia", ["carol"]),
        ],
        {"alice": [span("12:00", "13:00")]},
    )


class TestJSONExporter:
    """Tests for JSONExporter class."""

    def test_export(self, result, tmp_path):
        path = tmp_path / "out" / "result.json"
        JSONExporter().export(result, path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["entity_id"] == "hamlet"
        assert len(data["slots"]) == 2
        assert data["slots"][1]["start"] == "2024-01-01T13:00:00"


class TestCSVExporter:
    """Tests for CSVExporter class."""

    def test_export(self, result, tmp_path):
        CSVExporter().export(result, tmp_path / "csv")

        with open(tmp_path / "csv" / "slots.csv", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        # Two slots, two cast characters each
        assert len(rows) == 4
        assert rows[0]["character_id"] == "hamlet"
        assert rows[0]["actor_id"] == "alice"
        assert rows[2]["slot"] == "2"

        with open(tmp_path / "csv" / "summary.csv", encoding="utf-8") as f:
            summary = {row["metric"]: row["value"] for row in csv.DictReader(f)}
        assert summary["total_slots"] == "2"

    def test_no_slots_writes_summary_only(self, work_day, tmp_path):
        empty = find_availability_slots("x", "scene", work_day, [], {})
        CSVExporter().export(empty, tmp_path)
        assert not (tmp_path / "slots.csv").exists()
        assert (tmp_path / "summary.csv").exists()


class TestExcelExporter:
    """Tests for ExcelExporter class."""

    def test_export(self, result, tmp_path):
        path = tmp_path / "result.xlsx"
        ExcelExporter().export(result, path)

        wb = load_workbook(path)
        assert wb.sheetnames == ["Slots", "Summary"]
        slots = list(wb["Slots"].iter_rows(values_only=True))
        assert slots[0] == tuple(ExcelExporter.SLOT_COLUMNS)
        assert len(slots) == 5

    def test_export_empty(self, work_day, tmp_path):
        empty = find_availability_slots("x", "scene", work_day, [], {})
        path = tmp_path / "empty.xlsx"
        ExcelExporter().export(empty, path)

        rows = list(load_workbook(path)["Slots"].iter_rows(values_only=True))
        assert rows == [tuple(ExcelExporter.SLOT_COLUMNS)]


class TestGetExporter:
    """Tests for get_exporter function."""

    @pytest.mark.parametrize(
        "format_type,cls",
        [("json", JSONExporter), ("csv", CSVExporter), ("excel", ExcelExporter)],
    )
    def test_known_formats(self, format_type, cls):
        assert isinstance(get_exporter(format_type), cls)

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unsupported format"):
            get_exporter("pdf")


def test_load_request(search_request):
    data = load_request(search_request)
    assert data["entity_id"] == "hamlet"
    assert len(data["characters"]) == 2
