"""Tests for WorkspaceService: caps, seeding, partial updates and deletion."""

from datetime import timedelta

import pytest
from pydantic import ValidationError as SchemaError

from studyroom.exceptions import (
    LimitExceededError,
    ValidationError,
    WorkspaceNotFoundError,
)
from studyroom.models import Folder, StudyItem, StudyTodo, Workspace
from studyroom.models.enums import FocusKind, WorkspaceMode
from studyroom.schemas.folder import FolderCreate
from studyroom.schemas.item import ItemCreate
from studyroom.schemas.todo import TodoCreate
from studyroom.schemas.workspace import FocusRef, WorkspaceCreate, WorkspaceUpdate
from studyroom.services.focus_service import FocusService
from studyroom.services.hierarchy_service import HierarchyService
from studyroom.services.todo_service import TodoService
from studyroom.services.workspace_service import (
    MAX_WORKSPACES_PER_OWNER,
    WorkspaceService,
)
from tests.conftest import NOW, OWNER_A, OWNER_B


def _bulk_workspaces(db, owner_id: str, count: int) -> None:
    for i in range(count):
        db.add(Workspace(id=f"ws-bulk-{owner_id}-{i}", owner_id=owner_id, title=f"WS {i}"))
    db.commit()


class TestCreateWorkspace:

    def test_defaults(self, db):
        ws = WorkspaceService(db).create_workspace(OWNER_A, WorkspaceCreate(title="Node.js"), NOW)
        assert ws.id.startswith("ws-")
        assert ws.owner_id == OWNER_A
        assert ws.mode == WorkspaceMode.BUILD
        assert ws.xp == 0
        assert ws.level == 1
        assert ws.streak_count == 0
        assert ws.focus_entries == []
        assert ws.created_at == NOW

    def test_title_is_trimmed(self, db):
        ws = WorkspaceService(db).create_workspace(OWNER_A, WorkspaceCreate(title="  Rust  "))
        assert ws.title == "Rust"

    def test_blank_title_rejected_by_schema(self):
        with pytest.raises(SchemaError):
            WorkspaceCreate(title="   ")

    def test_201st_workspace_is_rejected(self, db):
        _bulk_workspaces(db, OWNER_A, MAX_WORKSPACES_PER_OWNER)
        service = WorkspaceService(db)

        with pytest.raises(LimitExceededError) as exc_info:
            service.create_workspace(OWNER_A, WorkspaceCreate(title="One too many"))

        assert exc_info.value.details == {"resource": "workspaces", "limit": 200}
        assert db.query(Workspace).filter_by(owner_id=OWNER_A).count() == MAX_WORKSPACES_PER_OWNER

    def test_cap_is_per_owner(self, db):
        _bulk_workspaces(db, OWNER_A, MAX_WORKSPACES_PER_OWNER)
        ws = WorkspaceService(db).create_workspace(OWNER_B, WorkspaceCreate(title="Fine"))
        assert ws.owner_id == OWNER_B


class TestListWorkspaces:

    def test_seeds_default_workspace_when_empty(self, db):
        workspaces = WorkspaceService(db).list_workspaces(OWNER_A)
        assert len(workspaces) == 1
        assert workspaces[0].title == "My Study Room"

    def test_does_not_seed_twice(self, db):
        service = WorkspaceService(db)
        service.list_workspaces(OWNER_A)
        assert len(service.list_workspaces(OWNER_A)) == 1

    def test_most_recently_updated_first(self, db):
        service = WorkspaceService(db)
        old = service.create_workspace(OWNER_A, WorkspaceCreate(title="Old"), NOW)
        new = service.create_workspace(OWNER_A, WorkspaceCreate(title="New"), NOW + timedelta(hours=1))
        assert [w.id for w in service.list_workspaces(OWNER_A)] == [new.id, old.id]

        service.update_workspace(OWNER_A, old.id, WorkspaceUpdate(goal="bump"), NOW + timedelta(hours=2))
        assert [w.id for w in service.list_workspaces(OWNER_A)] == [old.id, new.id]

    def test_only_callers_workspaces(self, db):
        service = WorkspaceService(db)
        service.create_workspace(OWNER_B, WorkspaceCreate(title="Theirs"))
        titles = [w.title for w in service.list_workspaces(OWNER_A)]
        assert titles == ["My Study Room"]


class TestUpdateWorkspace:

    def test_partial_update(self, db):
        service = WorkspaceService(db)
        ws = service.create_workspace(OWNER_A, WorkspaceCreate(title="Before", goal="keep"))

        updated = service.update_workspace(
            OWNER_A, ws.id, WorkspaceUpdate(title="After", mode=WorkspaceMode.REVISE)
        )

        assert updated.title == "After"
        assert updated.goal == "keep"
        assert updated.mode == WorkspaceMode.REVISE

    def test_foreign_workspace_is_not_found(self, db):
        service = WorkspaceService(db)
        ws = service.create_workspace(OWNER_B, WorkspaceCreate(title="Theirs"))
        with pytest.raises(WorkspaceNotFoundError):
            service.update_workspace(OWNER_A, ws.id, WorkspaceUpdate(title="Mine now"))

    def test_focus_replaced_wholesale(self, db):
        service = WorkspaceService(db)
        ws = service.create_workspace(OWNER_A, WorkspaceCreate(title="Focus"))
        todos = [
            TodoService(db).create_todo(OWNER_A, TodoCreate(workspace_id=ws.id, text=f"T{i}"))
            for i in range(3)
        ]
        refs = [FocusRef(kind=FocusKind.TODO, ref_id=t.id) for t in todos]

        updated = service.update_workspace(OWNER_A, ws.id, WorkspaceUpdate(focus=refs), NOW)

        assert [e.ref_id for e in updated.focus_entries] == [t.id for t in todos]
        assert updated.focus_date_key == "2026-03-02"

    def test_focus_carry_over_keeps_added_at(self, db):
        service = WorkspaceService(db)
        ws = service.create_workspace(OWNER_A, WorkspaceCreate(title="Focus"))
        first = TodoService(db).create_todo(OWNER_A, TodoCreate(workspace_id=ws.id, text="First"))
        second = TodoService(db).create_todo(OWNER_A, TodoCreate(workspace_id=ws.id, text="Second"))
        FocusService(db).add_focus(OWNER_A, ws.id, FocusKind.TODO, first.id, NOW)

        later = NOW + timedelta(hours=3)
        refs = [
            FocusRef(kind=FocusKind.TODO, ref_id=second.id),
            FocusRef(kind=FocusKind.TODO, ref_id=first.id),
        ]
        updated = service.update_workspace(OWNER_A, ws.id, WorkspaceUpdate(focus=refs), later)

        added = {e.ref_id: e.added_at for e in updated.focus_entries}
        assert added[first.id] == NOW
        assert added[second.id] == later

    def test_oversized_focus_is_rejected_not_truncated(self, db):
        service = WorkspaceService(db)
        ws = service.create_workspace(OWNER_A, WorkspaceCreate(title="Focus"))
        todos = [
            TodoService(db).create_todo(OWNER_A, TodoCreate(workspace_id=ws.id, text=f"T{i}"))
            for i in range(4)
        ]
        refs = [FocusRef(kind=FocusKind.TODO, ref_id=t.id) for t in todos]

        with pytest.raises(ValidationError):
            service.update_workspace(OWNER_A, ws.id, WorkspaceUpdate(focus=refs), NOW)

        db.expire_all()
        assert service.get_workspace(OWNER_A, ws.id).focus_entries == []

    def test_duplicate_focus_is_rejected(self, db):
        service = WorkspaceService(db)
        ws = service.create_workspace(OWNER_A, WorkspaceCreate(title="Focus"))
        todo = TodoService(db).create_todo(OWNER_A, TodoCreate(workspace_id=ws.id, text="Dup"))
        refs = [FocusRef(kind=FocusKind.TODO, ref_id=todo.id)] * 2

        with pytest.raises(ValidationError):
            service.update_workspace(OWNER_A, ws.id, WorkspaceUpdate(focus=refs), NOW)

    def test_focus_ref_from_other_workspace_is_rejected(self, db):
        service = WorkspaceService(db)
        ws = service.create_workspace(OWNER_A, WorkspaceCreate(title="Here"))
        other = service.create_workspace(OWNER_A, WorkspaceCreate(title="There"))
        todo = TodoService(db).create_todo(OWNER_A, TodoCreate(workspace_id=other.id, text="Elsewhere"))

        with pytest.raises(ValidationError):
            service.update_workspace(
                OWNER_A,
                ws.id,
                WorkspaceUpdate(focus=[FocusRef(kind=FocusKind.TODO, ref_id=todo.id)]),
                NOW,
            )


class TestDeleteWorkspace:

    def test_cascades_to_contents(self, db):
        service = WorkspaceService(db)
        hierarchy = HierarchyService(db)
        ws = service.create_workspace(OWNER_A, WorkspaceCreate(title="Doomed"))
        folder = hierarchy.create_folder(OWNER_A, FolderCreate(workspace_id=ws.id, name="F"))
        item = hierarchy.create_item(
            OWNER_A,
            ItemCreate(workspace_id=ws.id, folder_id=folder.id, type="note", note="n"),
        )
        TodoService(db).create_todo(OWNER_A, TodoCreate(workspace_id=ws.id, item_id=item.id, text="t"))
        FocusService(db).add_focus(OWNER_A, ws.id, FocusKind.ITEM, item.id, NOW)

        service.delete_workspace(OWNER_A, ws.id)

        assert db.query(Workspace).count() == 0
        assert db.query(Folder).count() == 0
        assert db.query(StudyItem).count() == 0
        assert db.query(StudyTodo).count() == 0

    def test_foreign_workspace_is_not_found(self, db):
        service = WorkspaceService(db)
        ws = service.create_workspace(OWNER_B, WorkspaceCreate(title="Theirs"))
        with pytest.raises(WorkspaceNotFoundError):
            service.delete_workspace(OWNER_A, ws.id)
        assert db.query(Workspace).count() == 1
