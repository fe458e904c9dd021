"""XP, level and streak progression.

Pure functions over a Workspace row. Callers (ReviewScheduler, TodoService)
invoke ``apply_activity`` inside their own transaction so the stat change
commits together with the event that earned it.
"""

import logging
from datetime import datetime
from typing import Optional

from ..core.clock import date_key, days_between, resolve_now
from ..models.workspace import Workspace, derive_level

REVIEW_XP = 10
TODO_DONE_XP = 5

logger = logging.getLogger(__name__)

__all__ = ["REVIEW_XP", "TODO_DONE_XP", "derive_level", "next_streak", "apply_activity"]


def next_streak(streak_count: int, last_key: Optional[str], today_key: str) -> int:
    """Streak after one more qualifying event on *today_key*.

    Same day keeps the streak, exactly one day later extends it, and any
    longer gap (or no prior activity) restarts it at 1. A *today_key* earlier
    than *last_key* (skewed or injected clock) counts as the same day.
    """
    if not last_key:
        return 1
    gap = days_between(last_key, today_key)
    if gap <= 0:
        return streak_count
    if gap == 1:
        return streak_count + 1
    return 1


def apply_activity(
    workspace: Workspace, xp_delta: int, now: Optional[datetime] = None
) -> Workspace:
    """Record a qualifying event: add XP and advance the daily streak."""
    today = date_key(resolve_now(now))
    level_before = workspace.level

    workspace.xp = max(0, (workspace.xp or 0) + max(0, xp_delta))
    workspace.streak_count = next_streak(
        workspace.streak_count or 0, workspace.last_activity_date_key, today
    )
    # Never move the activity day backwards.
    workspace.last_activity_date_key = max(today, workspace.last_activity_date_key or today)

    if workspace.level > level_before:
        logger.info(
            "Workspace levelled up",
            extra={"workspace_id": workspace.id, "new_level": workspace.level},
        )
    return workspace
