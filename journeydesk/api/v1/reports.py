"""FastAPI endpoints for the custom report builder."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from journeydesk.api.dependencies import call_service, require_api_key
from journeydesk.db.session import get_store_async_session
from journeydesk.models.enums import DataSource
from journeydesk.reporting.catalog import DATE_FIELDS, FIELD_CATALOG, STATUS_FILTERABLE
from journeydesk.reporting.report_builder import (
    CustomReportBuilder,
    ReportRequest,
    list_batches,
)

router = APIRouter(
    prefix="/api/v1/reports",
    tags=["Reports"],
    dependencies=[Depends(require_api_key)],
)


@router.get("/fields/{data_source}")
async def get_report_fields(data_source: DataSource):
    """Selectable fields of a data source and which filters apply to it."""
    return {
        "data_source": data_source.value,
        "fields": [
            {"key": f.key, "label": f.label, "default_selected": f.default_selected}
            for f in FIELD_CATALOG[data_source]
        ],
        "date_field": DATE_FIELDS.get(data_source),
        "status_filterable": data_source in STATUS_FILTERABLE,
    }


@router.get("/batches")
async def get_batches(session: AsyncSession = Depends(get_store_async_session)):
    return {"batches": await call_service(session, list_batches)}


@router.post("/custom")
async def generate_custom_report(
    request: ReportRequest,
    session: AsyncSession = Depends(get_store_async_session),
):
    """Generate a report; returns a capped preview and status chart counts."""
    result = await call_service(session, lambda repo: CustomReportBuilder(repo).generate(request))
    return {
        "data_source": result.data_source.value,
        "preview": result.preview(),
        "chart": result.chart_data(),
        "filename": result.filename(),
    }


@router.post("/custom/export")
async def export_custom_report(
    request: ReportRequest,
    session: AsyncSession = Depends(get_store_async_session),
):
    """CSV of the full result set, never the preview."""
    def _export(repo):
        result = CustomReportBuilder(repo).generate(request)
        return result.to_csv(), result.filename()

    csv_text, filename = await call_service(session, _export)
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
