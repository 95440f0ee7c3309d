"""
Write one analytics export to disk from the CLI.

    python -m scripts.export_dataset discharge_raw --from 2026-03-01 --to 2026-03-31
    python -m scripts.export_dataset delay_survey --entity AB --out exports/
"""

from __future__ import annotations

import argparse
import json
import uuid
from datetime import date
from pathlib import Path

from app.config import get_analytics_settings
from app.services.export_service import VALID_DATASETS, ExportResult, ExportService
from db.repositories.record_source import RecordSourceRepository
from db.session import SessionLocal


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export an analytics dataset as CSV.")
    parser.add_argument("dataset", choices=sorted(VALID_DATASETS))
    parser.add_argument("--from", dest="date_from", type=date.fromisoformat, default=None)
    parser.add_argument("--to", dest="date_to", type=date.fromisoformat, default=None)
    parser.add_argument(
        "--entity",
        default=None,
        help="Provider or respondent initials filter.",
    )
    parser.add_argument(
        "--version-id",
        dest="version_id",
        type=uuid.UUID,
        default=None,
        help="Survey version for the survey dataset (default: live version).",
    )
    parser.add_argument(
        "--out",
        dest="out_dir",
        type=Path,
        default=Path("."),
        help="Directory the CSV file is written to.",
    )
    return parser


def write_export(result: ExportResult, out_dir: Path) -> Path:
    """Write *result* under its conventional filename and return the path."""
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / result.filename
    path.write_text(result.to_csv(), encoding="utf-8")
    return path


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.date_from and args.date_to and args.date_from > args.date_to:
        raise SystemExit("--from must not be later than --to")

    settings = get_analytics_settings()
    with SessionLocal() as db:
        source = RecordSourceRepository(db, row_limit=settings.export_row_limit)
        result = ExportService(source, top_reasons_limit=settings.top_reasons_limit).export(
            args.dataset,
            date_from=args.date_from,
            date_to=args.date_to,
            entity=args.entity,
            version_id=args.version_id,
        )

    path = write_export(result, args.out_dir)
    print(json.dumps({"dataset": args.dataset, "rows": len(result.rows), "path": str(path)}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
