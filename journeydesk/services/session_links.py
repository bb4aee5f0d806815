"""Session links and per-participant session completions.

A link is active or inactive until it is marked complete for its cohort;
completed links are terminal and take no further transitions.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from journeydesk.errors import (
    ConfirmationRequiredError,
    LinkCompletedError,
    NotFoundError,
    ValidationError,
)
from journeydesk.models.enums import SessionType
from journeydesk.models.store import (
    Profile,
    SessionCompletion,
    SpecialSessionLink,
    utcnow,
)
from journeydesk.repository import StoreRepository, row_to_dict

logger = logging.getLogger(__name__)

ALL_BATCHES = "all"
DEFAULT_MARKER_NAME = "Admin"

SESSION_STAGE_NAMES = {
    SessionType.SPECIAL_SESSION: "Special Session",
    SessionType.OFFLINE_ORIENTATION: "Offline Orientation",
    SessionType.ONLINE_ORIENTATION: "Online Orientation",
    SessionType.OHM_MEET: "OHM Offline Meet",
}


@dataclass
class CohortCompletionResult:
    link_id: uuid.UUID
    users_marked: int
    stage_updated: bool


def _target_batch(value: str | None) -> str | None:
    if not value or value == ALL_BATCHES:
        return None
    return value


class SessionLinkService:
    def __init__(self, repository: StoreRepository, actor_id: uuid.UUID | None):
        self.repository = repository
        self.actor_id = actor_id

    def _get(self, link_id: uuid.UUID) -> SpecialSessionLink:
        link = self.repository.get(SpecialSessionLink, link_id)
        if link is None:
            raise NotFoundError("link_not_found", f"Session link {link_id} not found")
        return link

    def _get_open(self, link_id: uuid.UUID) -> SpecialSessionLink:
        link = self._get(link_id)
        if link.is_completed:
            raise LinkCompletedError("link_completed", f"Session link {link_id} is already completed")
        return link

    def list_links(self) -> list[dict]:
        return self.repository.fetch(
            SpecialSessionLink, order_by=SpecialSessionLink.created_at.desc()
        )

    def create_link(
        self,
        title: str,
        link_url: str,
        session_type: SessionType = SessionType.SPECIAL_SESSION,
        description: str | None = None,
        target_batch: str | None = None,
        is_active: bool = True,
    ) -> dict:
        if not title or not link_url:
            raise ValidationError("missing_required_fields", "title and link_url are required")

        link = SpecialSessionLink(
            title=title,
            link_url=link_url,
            session_type=SessionType(session_type),
            description=description or None,
            target_batch=_target_batch(target_batch),
            is_active=is_active,
            created_by=self.actor_id,
        )
        self.repository.add(link)
        self.repository.commit()
        logger.info(f"Created session link {link.id} ({link.session_type.value})")
        return row_to_dict(link)

    def update_link(
        self,
        link_id: uuid.UUID,
        title: str,
        link_url: str,
        session_type: SessionType = SessionType.SPECIAL_SESSION,
        description: str | None = None,
        target_batch: str | None = None,
        is_active: bool = True,
    ) -> dict:
        if not title or not link_url:
            raise ValidationError("missing_required_fields", "title and link_url are required")

        link = self._get_open(link_id)
        link.title = title
        link.link_url = link_url
        link.session_type = SessionType(session_type)
        link.description = description or None
        link.target_batch = _target_batch(target_batch)
        link.is_active = is_active
        self.repository.commit()
        return row_to_dict(link)

    def set_active(self, link_id: uuid.UUID, is_active: bool) -> dict:
        link = self._get_open(link_id)
        link.is_active = is_active
        self.repository.commit()
        return row_to_dict(link)

    def delete_link(self, link_id: uuid.UUID, confirm: bool = False) -> None:
        if not confirm:
            raise ConfirmationRequiredError("confirmation_required", "Deleting a link must be confirmed")
        self.repository.delete(self._get(link_id))
        self.repository.commit()
        logger.info(f"Deleted session link {link_id}")

    def mark_complete_for_cohort(self, link_id: uuid.UUID) -> CohortCompletionResult:
        """Record the link's session as completed for every participant it targets.

        Replaces any earlier completion of the same session type, completes the
        matching journey stage when one exists, then closes the link. A link
        with no target participants is left untouched.
        """
        link = self._get_open(link_id)
        repo = self.repository

        query = select(Profile.id)
        if link.target_batch:
            query = query.where(Profile.batch_number == link.target_batch)
        user_ids = list(repo.session.execute(query).scalars())

        if not user_ids:
            logger.info(f"No participants found for session link {link_id}")
            return CohortCompletionResult(link_id, 0, False)

        now = utcnow()
        try:
            repo.replace_session_completions(
                user_ids,
                link.session_type,
                self.actor_id,
                f"Marked complete for session: {link.title}",
                now,
            )

            stage_id = None
            stage_name = SESSION_STAGE_NAMES.get(link.session_type)
            if stage_name:
                stage_id = repo.find_stage_id(stage_name)
            if stage_id is not None:
                for user_id in user_ids:
                    repo.upsert_progress_completed(user_id, stage_id, now)

            link.is_completed = True
            link.is_active = False
            repo.commit()
        except SQLAlchemyError:
            repo.rollback()
            logger.exception(f"Marking session link {link_id} complete failed")
            raise

        logger.info(f"Session link {link_id} marked complete for {len(user_ids)} participants")
        return CohortCompletionResult(link_id, len(user_ids), stage_id is not None)


class SessionCompletionService:
    def __init__(self, repository: StoreRepository, actor_id: uuid.UUID | None):
        self.repository = repository
        self.actor_id = actor_id

    def list_completions(self, user_id: uuid.UUID) -> list[dict]:
        completions = self.repository.fetch(
            SessionCompletion,
            SessionCompletion.user_id == user_id,
            order_by=SessionCompletion.completed_at.desc(),
        )
        names = self.repository.fetch_profile_names(
            {c["marked_by"] for c in completions if c["marked_by"]}
        )
        for completion in completions:
            completion["marked_by_name"] = names.get(completion["marked_by"]) or DEFAULT_MARKER_NAME
        return completions

    def toggle(
        self,
        user_id: uuid.UUID,
        session_type: SessionType | str,
        notes: str | None = None,
    ) -> bool:
        """Flip the user's completion of `session_type`; returns whether it is now completed."""
        session_type = SessionType(session_type)
        existing = self.repository.session.execute(
            select(SessionCompletion).where(
                SessionCompletion.user_id == user_id,
                SessionCompletion.session_type == session_type,
            )
        ).scalars().first()

        if existing is not None:
            self.repository.delete(existing)
            completed = False
        else:
            self.repository.add(SessionCompletion(
                user_id=user_id,
                session_type=session_type,
                marked_by=self.actor_id,
                notes=notes or None,
            ))
            completed = True

        self.repository.commit()
        return completed
