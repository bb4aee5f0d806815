"""Generate a custom report and write it to CSV.

Usage:
    python scripts/export_report.py trades
    python scripts/export_report.py trades --status approved --batch B01
    python scripts/export_report.py task_submissions --start 2024-01-01 --end 2024-01-31
    python scripts/export_report.py profiles --fields full_name,email,phone
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from sqlalchemy.orm import Session

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from journeydesk.config import settings
from journeydesk.db.session import StoreSyncSessionLocal
from journeydesk.errors import JourneyDeskError
from journeydesk.models.enums import DataSource
from journeydesk.reporting.report_builder import CustomReportBuilder, ReportRequest
from journeydesk.repository import StoreRepository


def export_report(session: Session, request: ReportRequest, output_dir: Path) -> Path | None:
    """Generate the report and write the full result set to `output_dir`."""
    print(f"🔄 Generating {request.data_source.value} report...")

    result = CustomReportBuilder(StoreRepository(session)).generate(request)
    print(f"   ✅ {result.total} rows matched")

    for point in result.chart_data():
        print(f"   {point['name']}: {point['value']}")

    if not result.rows:
        print("   ⚠️  Nothing to export")
        return None

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / result.filename()
    path.write_text(result.to_csv(), encoding="utf-8")
    print(f"📥 Wrote {path}")
    return path


def main():
    parser = argparse.ArgumentParser(description="Export a JourneyDesk custom report to CSV")
    parser.add_argument(
        "data_source",
        choices=[s.value for s in DataSource],
        help="Data source to report on",
    )
    parser.add_argument(
        "--fields",
        type=str,
        help="Comma-separated field keys (default: the source's default selection)",
    )
    parser.add_argument("--start", type=date.fromisoformat, help="Start date (YYYY-MM-DD), inclusive")
    parser.add_argument("--end", type=date.fromisoformat, help="End date (YYYY-MM-DD), inclusive")
    parser.add_argument("--status", type=str, default="all", help="Status filter")
    parser.add_argument("--batch", type=str, default="all", help="Batch filter")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(settings.export_dir),
        help="Directory the CSV is written to",
    )
    args = parser.parse_args()

    logging.basicConfig(level=settings.api_log_level.upper())

    request = ReportRequest(
        data_source=DataSource(args.data_source),
        selected_fields=args.fields.split(",") if args.fields else None,
        start_date=args.start,
        end_date=args.end,
        status=args.status,
        batch=args.batch,
    )

    session = StoreSyncSessionLocal()
    try:
        export_report(session, request, args.output_dir)
    except JourneyDeskError as e:
        print(f"❌ {e}")
        sys.exit(1)
    finally:
        session.close()


if __name__ == "__main__":
    main()
