"""Spaced-repetition scheduling for study items.

Each review doubles the wait before the next one, starting at one day and
capped at sixty: 1, 2, 4, 8, 16, 32, 60, 60, ... days. Reviewing early is
allowed and still advances the stage.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.clock import resolve_now
from ..database import atomic
from ..exceptions import ValidationError
from ..models.item import StudyItem
from ..repositories.item_repository import ItemRepository
from ..repositories.workspace_repository import WorkspaceRepository
from .gamification import REVIEW_XP, apply_activity

BASE_INTERVAL_DAYS = 1
MAX_INTERVAL_DAYS = 60

logger = logging.getLogger(__name__)


def review_interval(stage: int) -> timedelta:
    """Wait after a review performed at *stage* (before it is incremented)."""
    return timedelta(days=min(MAX_INTERVAL_DAYS, BASE_INTERVAL_DAYS * 2 ** max(0, stage)))


class ReviewScheduler:
    """Review progression and the due queue.

    Public methods:
        record_review -- advance the stage, schedule the next review, award XP
        due_now       -- items whose review is due, never-scheduled ones first
    """

    def __init__(self, db: Session):
        self.db = db
        self.workspace_repo = WorkspaceRepository(db)
        self.item_repo = ItemRepository(db)

    def record_review(self, owner_id: str, item_id: str, now: Optional[datetime] = None) -> StudyItem:
        now = resolve_now(now)

        with atomic(self.db, "record_review"):
            item = self.item_repo.get_owned(owner_id, item_id)
            if not item.review_enabled:
                raise ValidationError("Review is not enabled for this item", field="review_enabled")

            interval = review_interval(item.review_stage)
            item.review_stage = item.review_stage + 1
            item.next_review_at = now + interval
            item.last_reviewed_at = now
            item.last_touched_at = now
            item.updated_at = now

            workspace = self.workspace_repo.get_owned(owner_id, item.workspace_id)
            apply_activity(workspace, REVIEW_XP, now)
            workspace.updated_at = now

        logger.info(
            "Review recorded",
            extra={
                "item_id": item_id,
                "review_stage": item.review_stage,
                "interval_days": interval.days,
            },
        )
        return item

    def due_now(
        self, owner_id: str, workspace_id: str, now: Optional[datetime] = None
    ) -> List[StudyItem]:
        now = resolve_now(now)
        workspace = self.workspace_repo.get_owned(owner_id, workspace_id)

        due = [
            item for item in self.item_repo.list_review_enabled(workspace.id)
            if item.next_review_at is None or item.next_review_at <= now
        ]
        due.sort(key=lambda item: (item.next_review_at is not None, item.next_review_at or now))
        return due
