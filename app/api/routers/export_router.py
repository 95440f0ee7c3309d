"""
app/api/routers/export_router.py

CSV export endpoint for the admin analytics views.

GET /export/{dataset}

Path parameters
---------------
dataset : see ``app.services.export_service.VALID_DATASETS``

Query parameters
----------------
format     : "csv" | "json"                   (default: "csv")
date_from  : ISO date lower bound, inclusive  (default: lookback window)
date_to    : ISO date upper bound, inclusive  (default: today)
entity     : optional provider/respondent initials filter
version_id : survey version for the "survey" dataset (default: live version)

Responses
---------
CSV  → Response, Content-Type: text/csv; charset=utf-8
       Content-Disposition: attachment; filename=<ascii name>; filename*=UTF-8''<name>
       where the name is <subject>_<from>_<to>[_<entity>].csv
JSON → JSONResponse
       Body: {"dataset": str, "rows": int, "fields": list[str], "data": list[dict]}

An empty dataset downloads as an empty body, not a header-only file.
"""

from __future__ import annotations

import logging
import unicodedata
import uuid
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from analytics.csv_export import CSV_MEDIA_TYPE
from app.api.dependencies import DateWindow, get_date_window, get_record_source
from app.config import AnalyticsSettings, get_analytics_settings
from app.logging_utils import log_event
from app.services.export_service import (
    VALID_DATASETS,
    ExportResult,
    ExportService,
    UnknownDatasetError,
)
from db.repositories.errors import RecordSourceError, SurveyVersionNotFoundError
from db.repositories.record_source import RecordSourceRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["export"])

_VALID_FORMATS = frozenset({"csv", "json"})


# ---------------------------------------------------------------------------
# Serialisation helpers (no business logic)
# ---------------------------------------------------------------------------


def _content_disposition(filename: str) -> str:
    """
    Attachment header value safe for latin-1 header encoding.

    Survey names and initials may hold any character, so the plain
    ``filename`` carries an ASCII fallback and ``filename*`` the exact UTF-8
    name (RFC 5987).
    """
    fallback = (
        unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    )
    fallback = "".join(
        "_" if ch in '"\\' else ch for ch in fallback if ch.isprintable()
    ) or "export.csv"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _to_csv_response(result: ExportResult) -> Response:
    """Return *result* as a UTF-8 CSV file download."""
    return Response(
        content=result.to_csv().encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers={
            "Content-Disposition": _content_disposition(result.filename),
            "X-Row-Count": str(len(result.rows)),
        },
    )


def _to_json_response(result: ExportResult, dataset: str) -> JSONResponse:
    """Return *result* as a structured JSON response."""
    return JSONResponse(
        content={
            "dataset": dataset,
            "rows": len(result.rows),
            "fields": result.fields,
            "data": jsonable_encoder(result.rows),
        }
    )


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------


@router.get("/export/{dataset}", summary="Export analytics data as CSV")
def export_dataset(
    dataset: str,
    output_format: str = Query(
        default="csv",
        alias="format",
        description='Output format: "csv" (file download) or "json".',
    ),
    entity: str | None = Query(
        default=None,
        description="Provider or respondent initials filter.",
    ),
    version_id: uuid.UUID | None = Query(
        default=None,
        description="Survey version for the survey dataset.",
    ),
    window: DateWindow = Depends(get_date_window),
    source: RecordSourceRepository = Depends(get_record_source),
    settings: AnalyticsSettings = Depends(get_analytics_settings),
) -> Response:
    """
    Export one analytics dataset as a CSV download or JSON document.
    """
    # --- Validate query params ---
    if dataset not in VALID_DATASETS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid dataset {dataset!r}. Must be one of: {sorted(VALID_DATASETS)}.",
        )
    if output_format not in _VALID_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid format {output_format!r}. Must be one of: {sorted(_VALID_FORMATS)}.",
        )

    # --- Delegate all data work to the service ---
    service = ExportService(source, top_reasons_limit=settings.top_reasons_limit)
    try:
        result = service.export(
            dataset,
            date_from=window.date_from,
            date_to=window.date_to,
            entity=entity,
            version_id=version_id,
        )
    except UnknownDatasetError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except SurveyVersionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except RecordSourceError as exc:
        logger.exception("Export failed dataset=%r entity=%r", dataset, entity)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Export failed; see server logs for details.",
        ) from exc

    log_event(
        logger,
        logging.INFO,
        "export.completed",
        dataset=dataset,
        format=output_format,
        entity=entity,
        rows=len(result.rows),
    )

    # --- Serialise ---
    if output_format == "csv":
        return _to_csv_response(result)
    return _to_json_response(result, dataset)
