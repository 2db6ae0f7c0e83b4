"""Export functionality for availability search results."""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd

from .models import AvailabilityResult


def _slot_rows(result: AvailabilityResult) -> list[dict]:
    """One row per (slot, assignment) pair."""
    rows = []
    for index, slot in enumerate(result.slots, start=1):
        for assignment in slot.assignments:
            rows.append(
                {
                    "slot": index,
                    "start": slot.start.isoformat(),
                    "end": slot.end.isoformat(),
                    "duration_minutes": slot.duration_minutes,
                    "character_id": assignment.character_id,
                    "actor_id": assignment.actor_id,
                }
            )
    return rows


def _summary_rows(result: AvailabilityResult) -> list[dict]:
    return [
        {"metric": "entity_id", "value": result.entity_id},
        {"metric": "entity_type", "value": result.entity_type},
        {"metric": "search_date", "value": result.search_date},
        {"metric": "total_slots", "value": result.total_slots},
        {"metric": "combination_count", "value": result.combination_count},
        {"metric": "combinations_evaluated", "value": result.combinations_evaluated},
        {"metric": "search_time_ms", "value": round(result.search_time_ms, 3)},
        {
            "metric": "uncastable_characters",
            "value": "; ".join(result.uncastable_characters),
        },
    ]


class BaseExporter(ABC):
    """Base class for exporters."""

    @abstractmethod
    def export(self, result: AvailabilityResult, output_path: str | Path) -> None:
        """Export search result to file.

        Args:
            result: AvailabilityResult to export
            output_path: Path to output file or directory
        """
        pass


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        """Initialize exporter.

        Args:
            indent: JSON indentation level
            ensure_ascii: If False, allows non-ASCII characters
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, result: AvailabilityResult, output_path: str | Path) -> None:
        """Export search result to JSON file."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(
                result.to_dict(),
                f,
                indent=self.indent,
                ensure_ascii=self.ensure_ascii,
            )


class CSVExporter(BaseExporter):
    """Export to CSV format (multiple files)."""

    def export(self, result: AvailabilityResult, output_path: str | Path) -> None:
        """Export search result to CSV files.

        Creates two files:
        - slots.csv: One row per slot and cast character
        - summary.csv: Overall summary

        Args:
            result: AvailabilityResult to export
            output_path: Path to output directory
        """
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        self._write_csv(output_dir / "slots.csv", _slot_rows(result))
        self._write_csv(output_dir / "summary.csv", _summary_rows(result))

    def _write_csv(self, output_path: Path, rows: list[dict]) -> None:
        """Write rows to CSV file."""
        if not rows:
            return

        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=rows[0].keys())
            writer.writeheader()
            writer.writerows(rows)


class ExcelExporter(BaseExporter):
    """Export to Excel format (single workbook with multiple sheets)."""

    SLOT_COLUMNS = ["Slot", "Start", "End", "Duration (min)", "Character", "Actor"]

    def export(self, result: AvailabilityResult, output_path: str | Path) -> None:
        """Export search result to Excel file.

        Creates workbook with sheets:
        - Slots: One row per slot and cast character
        - Summary: Overall summary

        Args:
            result: AvailabilityResult to export
            output_path: Path to output Excel file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            self._export_slots_sheet(result, writer)
            self._export_summary_sheet(result, writer)

    def _export_slots_sheet(self, result: AvailabilityResult, writer: pd.ExcelWriter) -> None:
        """Export slots to Excel sheet."""
        rows = [
            dict(zip(self.SLOT_COLUMNS, row.values())) for row in _slot_rows(result)
        ]
        df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=self.SLOT_COLUMNS)
        df.to_excel(writer, sheet_name="Slots", index=False)

    def _export_summary_sheet(self, result: AvailabilityResult, writer: pd.ExcelWriter) -> None:
        """Export summary to Excel sheet."""
        rows = [
            {"Metric": row["metric"].replace("_", " ").title(), "Value": row["value"]}
            for row in _summary_rows(result)
        ]
        df = pd.DataFrame(rows)
        df.to_excel(writer, sheet_name="Summary", index=False)


def get_exporter(format_type: str) -> BaseExporter:
    """Get appropriate exporter for format type.

    Args:
        format_type: Export format ('json', 'csv', 'excel')

    Returns:
        Exporter instance

    Raises:
        ValueError: If format type is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
        "excel": ExcelExporter,
    }

    if format_type not in exporters:
        raise ValueError(
            f"Unsupported format: {format_type}. Supported: {', '.join(exporters.keys())}"
        )

    return exporters[format_type]()


def load_request(input_path: Path | str) -> dict:
    """Load a search request from JSON file.

    Args:
        input_path: Path to request JSON file

    Returns:
        Dictionary with request data
    """
    with open(input_path, encoding="utf-8") as f:
        return json.load(f)
