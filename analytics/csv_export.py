"""
analytics/csv_export.py

Deterministic CSV text for analytics exports.

Output format
-------------
* header line: column names joined by commas, not quoted;
* one line per record, fields in ``columns`` order;
* every field wrapped in double quotes, embedded quotes doubled;
* lines joined with ``\\n`` and no trailing newline;
* no records at all produces ``""`` (no header either).

The serializer only returns text. Filenames and HTTP delivery belong to the
caller; :func:`export_filename` builds the conventional name.
"""

from __future__ import annotations

import csv
import io
import math
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
LIST_SEPARATOR = "|"


def format_value(value: Any) -> str:
    """
    Stringify one field value.

    ``None`` becomes ``""``; booleans render lowercase; integral floats drop
    the ``.0``; NaN and infinities read ``NaN`` and ``Infinity``; dates render
    ISO; sequences are joined with ``|``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isnan(value):
        return "NaN"
    if isinstance(value, float) and math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return LIST_SEPARATOR.join(format_value(item) for item in value)
    return str(value)


def _field(record: Any, column: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(column)
    return getattr(record, column, None)


def to_csv(records: Sequence[Any], columns: Sequence[str]) -> str:
    """
    Serialise *records* to CSV text using exactly *columns*, in order.

    Records may be mappings or objects with matching attributes; a missing
    column reads as ``None``. No validation is performed on values.
    """
    if not records:
        return ""

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in records:
        writer.writerow([format_value(_field(record, column)) for column in columns])

    body = buf.getvalue()
    if body.endswith("\n"):
        body = body[:-1]
    return ",".join(columns) + "\n" + body


def slugify(name: str) -> str:
    """Lowercase *name* and turn every whitespace run, edges included, into ``_``."""
    return re.sub(r"\s+", "_", name).lower()


def export_filename(
    subject: str,
    date_from: date | str | None,
    date_to: date | str | None,
    entity: str | None = None,
) -> str:
    """
    Conventional export filename: ``<subject>_<from>_<to>[_<entity>].csv``.

    An open bound renders as ``all``.
    """
    start = format_value(date_from) or "all"
    end = format_value(date_to) or "all"
    suffix = f"_{entity}" if entity else ""
    return f"{subject}_{start}_{end}{suffix}.csv"
