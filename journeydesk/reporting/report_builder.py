"""Custom report generation over one data source at a time.

The builder resolves the requested fields, fetches the source rows with the
status and date-range filters pushed into the query, joins participant,
task and stage names, then applies the batch filter. The result holds the
full row set; preview, chart and CSV are views over it.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Callable

from pydantic import BaseModel
from sqlalchemy import DateTime

from journeydesk.config import settings
from journeydesk.errors import ValidationError
from journeydesk.models.enums import DataSource
from journeydesk.models.store import JourneyStage, Task
from journeydesk.reporting.catalog import (
    DATE_FIELDS,
    FIELD_CATALOG,
    SOURCE_MODELS,
    STATUS_FILTERABLE,
    STATUS_LABELS,
    default_fields,
    field_labels,
    has_status_field,
)
from journeydesk.reporting.export import export_filename, to_csv_text
from journeydesk.repository import StoreRepository

logger = logging.getLogger(__name__)

ALL = "all"
UNKNOWN = "Unknown"


class ReportRequest(BaseModel):
    data_source: DataSource
    selected_fields: list[str] | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: str = ALL
    batch: str = ALL

    def fields(self) -> list[str]:
        if self.selected_fields is None:
            return default_fields(self.data_source)
        return self.selected_fields


@dataclass
class ReportResult:
    data_source: DataSource
    selected_fields: list[str]
    rows: list[dict]
    generated_on: date = field(default_factory=date.today)

    @property
    def total(self) -> int:
        return len(self.rows)

    def _labels(self, fields: list[str] | None) -> dict[str, str]:
        return field_labels(self.data_source, fields or self.selected_fields)

    def project(self, fields: list[str] | None = None) -> list[dict]:
        """Rows restricted to the selected keys, in catalog order."""
        keys = list(self._labels(fields))
        return [{key: row.get(key) for key in keys} for row in self.rows]

    def preview(self, fields: list[str] | None = None, limit: int | None = None) -> dict:
        limit = settings.report_preview_limit if limit is None else limit
        keys = list(self._labels(fields))
        return {
            "columns": [{"key": k, "label": v} for k, v in self._labels(fields).items()],
            "rows": self.project(keys)[:limit],
            "total": self.total,
            "truncated": self.total > limit,
        }

    def chart_data(self, translate: Callable[[str], str] | None = None) -> list[dict]:
        """Row counts per status value, in the order values first appear."""
        if not has_status_field(self.data_source):
            return []

        translate = translate or (lambda name: STATUS_LABELS.get(name, name))
        counts = Counter(row.get("status") or "unknown" for row in self.rows)
        return [
            {"name": translate(status), "status": status, "value": count}
            for status, count in counts.items()
        ]

    def to_csv(self, fields: list[str] | None = None) -> str:
        return to_csv_text(self.rows, self._labels(fields))

    def filename(self) -> str:
        return export_filename(self.data_source.value, self.generated_on)


def _date_criteria(column, start: date | None, end: date | None) -> list:
    criteria = []
    is_timestamp = isinstance(column.type, DateTime)
    if start is not None:
        criteria.append(column >= (datetime.combine(start, time.min) if is_timestamp else start))
    if end is not None:
        if is_timestamp:
            criteria.append(column < datetime.combine(end + timedelta(days=1), time.min))
        else:
            criteria.append(column <= end)
    return criteria


class CustomReportBuilder:
    """Builds `ReportResult`s from the programme store."""

    def __init__(self, repository: StoreRepository):
        self.repository = repository

    def _validate(self, request: ReportRequest) -> list[str]:
        fields = request.fields()
        if not fields:
            raise ValidationError("no_fields_selected", "Select at least one field")

        known = {f.key for f in FIELD_CATALOG[request.data_source]}
        unknown = [key for key in fields if key not in known]
        if unknown:
            raise ValidationError(
                "unknown_fields",
                f"Unknown fields for {request.data_source.value}: {', '.join(unknown)}",
            )

        if request.start_date and request.end_date and request.start_date > request.end_date:
            raise ValidationError("invalid_date_range", "start_date is after end_date")

        if request.status != ALL and request.data_source in STATUS_FILTERABLE:
            status_type = SOURCE_MODELS[request.data_source].__table__.c.status.type
            allowed = getattr(status_type, "enums", None)
            if allowed and request.status not in allowed:
                raise ValidationError("unknown_status", f"Unknown status '{request.status}'")

        return fields

    def _criteria(self, request: ReportRequest) -> list:
        model = SOURCE_MODELS[request.data_source]
        criteria = []

        if request.status != ALL and request.data_source in STATUS_FILTERABLE:
            criteria.append(model.status == request.status)

        date_field = DATE_FIELDS.get(request.data_source)
        if date_field is not None:
            criteria.extend(
                _date_criteria(getattr(model, date_field), request.start_date, request.end_date)
            )

        if request.data_source == DataSource.PROFILES and request.batch != ALL:
            criteria.append(model.batch_number == request.batch)

        return criteria

    def generate(self, request: ReportRequest) -> ReportResult:
        fields = self._validate(request)
        source = request.data_source
        model = SOURCE_MODELS[source]

        profiles = {
            p["id"]: {"name": p["full_name"], "batch": p["batch_number"]}
            for p in self.repository.fetch_profiles()
        }
        rows = self.repository.fetch(model, *self._criteria(request))

        if source == DataSource.PROFILES:
            logger.info(f"Report {source.value}: {len(rows)} rows")
            return ReportResult(source, fields, rows)

        task_titles = {}
        stage_names = {}
        if source == DataSource.TASK_SUBMISSIONS:
            task_titles = {t["id"]: t["title"] for t in self.repository.fetch(Task)}
        elif source == DataSource.PARTICIPANT_PROGRESS:
            stage_names = {s["id"]: s["name"] for s in self.repository.fetch(JourneyStage)}

        enriched = []
        for row in rows:
            profile = profiles.get(row["user_id"])
            if request.batch != ALL and (profile is None or profile["batch"] != request.batch):
                continue

            row["user_name"] = (profile or {}).get("name") or UNKNOWN
            if source == DataSource.TASK_SUBMISSIONS:
                row["task_title"] = task_titles.get(row["task_id"], UNKNOWN)
            elif source == DataSource.PARTICIPANT_PROGRESS:
                row["stage_name"] = stage_names.get(row["stage_id"], UNKNOWN)
            enriched.append(row)

        logger.info(f"Report {source.value}: {len(enriched)} rows")
        return ReportResult(source, fields, enriched)


def list_batches(repository: StoreRepository) -> list[str]:
    return repository.fetch_batches()
