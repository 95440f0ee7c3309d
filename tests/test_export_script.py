"""
tests/test_export_script.py

CLI export: argument parsing and file output.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from app.services.export_service import ExportResult
from scripts.export_dataset import build_parser, write_export


class TestParser:
    def test_parses_window_and_filters(self) -> None:
        args = build_parser().parse_args(
            ["delay_survey", "--from", "2026-03-01", "--to", "2026-03-31", "--entity", "AB"]
        )
        assert args.dataset == "delay_survey"
        assert args.date_from == date(2026, 3, 1)
        assert args.date_to == date(2026, 3, 31)
        assert args.entity == "AB"
        assert args.version_id is None

    def test_rejects_unknown_dataset(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["patients"])


def test_write_export_uses_conventional_filename(tmp_path: Path) -> None:
    result = ExportResult(
        rows=[{"label": "Imaging delay", "value": 5.0}],
        fields=["label", "value"],
        filename="discharge_causes_2026-03-01_2026-03-31.csv",
    )
    path = write_export(result, tmp_path / "exports")

    assert path.name == "discharge_causes_2026-03-01_2026-03-31.csv"
    assert path.read_text(encoding="utf-8") == 'label,value\n"Imaging delay","5"'
