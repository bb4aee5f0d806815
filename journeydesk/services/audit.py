"""Read-only status history for a single record."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from journeydesk.models.store import AuditLog
from journeydesk.repository import StoreRepository

logger = logging.getLogger(__name__)

SYSTEM_LABEL = "System"


@dataclass(frozen=True)
class AuditEvent:
    id: uuid.UUID
    action: str
    old_status: str | None
    new_status: str
    changed_by: uuid.UUID | None
    changed_by_name: str
    notes: str | None
    created_at: datetime


class AuditHistoryReader:
    def __init__(self, repository: StoreRepository):
        self.repository = repository

    def history(
        self,
        table_name: str,
        record_id: uuid.UUID,
        system_label: str = SYSTEM_LABEL,
    ) -> list[AuditEvent]:
        """Audit entries for one record, newest first.

        Entries without a known actor are attributed to `system_label`.
        """
        try:
            logs = self.repository.fetch(
                AuditLog,
                AuditLog.table_name == table_name,
                AuditLog.record_id == record_id,
                order_by=AuditLog.created_at.desc(),
            )
            names = self.repository.fetch_profile_names(
                {log["changed_by"] for log in logs if log["changed_by"]}
            )
        except SQLAlchemyError:
            logger.exception(f"Loading audit history for {table_name}/{record_id} failed")
            self.repository.rollback()
            return []

        return [
            AuditEvent(
                id=log["id"],
                action=log["action"],
                old_status=log["old_status"],
                new_status=log["new_status"],
                changed_by=log["changed_by"],
                changed_by_name=names.get(log["changed_by"]) or system_label,
                notes=log["notes"],
                created_at=log["created_at"],
            )
            for log in logs
        ]
