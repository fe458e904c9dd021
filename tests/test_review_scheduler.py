"""Tests for spaced-repetition scheduling and the due queue."""

from datetime import timedelta

import pytest

from studyroom.exceptions import ItemNotFoundError, ValidationError
from studyroom.schemas.item import ItemCreate, ItemUpdate
from studyroom.schemas.workspace import WorkspaceCreate
from studyroom.services.hierarchy_service import HierarchyService
from studyroom.services.review_scheduler import ReviewScheduler, review_interval
from studyroom.services.workspace_service import WorkspaceService
from tests.conftest import NOW, OWNER_A, OWNER_B


@pytest.fixture()
def workspace(db):
    return WorkspaceService(db).create_workspace(OWNER_A, WorkspaceCreate(title="Reviews"), NOW)


def _reviewable(db, workspace_id: str, owner_id: str = OWNER_A, now=NOW, **overrides):
    fields = {"workspace_id": workspace_id, "type": "note", "note": "Event loop", "review_enabled": True}
    fields.update(overrides)
    return HierarchyService(db).create_item(owner_id, ItemCreate(**fields), now)


class TestReviewInterval:

    def test_doubles_then_caps_at_sixty_days(self):
        days = [review_interval(stage).days for stage in range(9)]
        assert days == [1, 2, 4, 8, 16, 32, 60, 60, 60]


class TestRecordReview:

    def test_nth_review_schedules_doubling_interval(self, db, workspace):
        item = _reviewable(db, workspace.id)
        scheduler = ReviewScheduler(db)

        now = NOW
        for n, expected_days in enumerate([1, 2, 4, 8, 16, 32, 60, 60], start=1):
            reviewed = scheduler.record_review(OWNER_A, item.id, now)
            assert reviewed.review_stage == n
            assert reviewed.next_review_at == now + timedelta(days=expected_days)
            assert reviewed.last_reviewed_at == now
            assert reviewed.last_touched_at == now
            now = reviewed.next_review_at

    def test_early_review_still_advances(self, db, workspace):
        item = _reviewable(db, workspace.id)
        scheduler = ReviewScheduler(db)
        scheduler.record_review(OWNER_A, item.id, NOW)

        early = NOW + timedelta(hours=1)
        reviewed = scheduler.record_review(OWNER_A, item.id, early)

        assert reviewed.review_stage == 2
        assert reviewed.next_review_at == early + timedelta(days=2)

    def test_review_requires_review_enabled(self, db, workspace):
        item = _reviewable(db, workspace.id, review_enabled=False)
        with pytest.raises(ValidationError):
            ReviewScheduler(db).record_review(OWNER_A, item.id, NOW)

    def test_review_awards_xp_and_streak(self, db, workspace):
        item = _reviewable(db, workspace.id)
        ReviewScheduler(db).record_review(OWNER_A, item.id, NOW)

        ws = WorkspaceService(db).get_workspace(OWNER_A, workspace.id)
        assert ws.xp == 10
        assert ws.streak_count == 1

    def test_toggle_off_and_on_resets_stage_keeps_history(self, db, workspace):
        item = _reviewable(db, workspace.id)
        scheduler = ReviewScheduler(db)
        hierarchy = HierarchyService(db)
        for i in range(3):
            scheduler.record_review(OWNER_A, item.id, NOW + timedelta(days=i))
        last_review = NOW + timedelta(days=2)

        hierarchy.update_item(OWNER_A, item.id, ItemUpdate(review_enabled=False), NOW + timedelta(days=3))
        toggled = hierarchy.update_item(
            OWNER_A, item.id, ItemUpdate(review_enabled=True), NOW + timedelta(days=4)
        )

        assert toggled.review_stage == 0
        assert toggled.next_review_at == NOW + timedelta(days=4)
        assert toggled.last_reviewed_at == last_review

    def test_foreign_item_is_not_found(self, db):
        theirs = WorkspaceService(db).create_workspace(OWNER_B, WorkspaceCreate(title="Theirs"))
        item = _reviewable(db, theirs.id, owner_id=OWNER_B)
        with pytest.raises(ItemNotFoundError):
            ReviewScheduler(db).record_review(OWNER_A, item.id, NOW)


class TestDueNow:

    def test_due_and_unscheduled_items_ordered(self, db, workspace):
        scheduler = ReviewScheduler(db)
        overdue = _reviewable(db, workspace.id, note="overdue")
        scheduler.record_review(OWNER_A, overdue.id, NOW - timedelta(days=3))  # due NOW - 2 days
        recent = _reviewable(db, workspace.id, note="recent")
        scheduler.record_review(OWNER_A, recent.id, NOW - timedelta(hours=30))  # due NOW - 6 hours
        future = _reviewable(db, workspace.id, note="future")
        scheduler.record_review(OWNER_A, future.id, NOW)  # due tomorrow
        unscheduled = _reviewable(db, workspace.id, note="unscheduled")
        unscheduled.next_review_at = None
        db.commit()
        _reviewable(db, workspace.id, note="disabled", review_enabled=False)

        due = scheduler.due_now(OWNER_A, workspace.id, NOW)

        assert [i.id for i in due] == [unscheduled.id, overdue.id, recent.id]

    def test_freshly_enabled_item_is_due(self, db, workspace):
        item = _reviewable(db, workspace.id)
        assert [i.id for i in ReviewScheduler(db).due_now(OWNER_A, workspace.id, NOW)] == [item.id]
