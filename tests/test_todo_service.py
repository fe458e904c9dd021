"""Tests for TodoService: parentage, ordering, completion XP and deletion."""

from datetime import timedelta

import pytest
from pydantic import ValidationError as SchemaError
from sqlalchemy.exc import SQLAlchemyError

from studyroom.exceptions import (
    TodoNotFoundError,
    TransactionFailureError,
    ValidationError,
    WorkspaceNotFoundError,
)
from studyroom.models import StudyTodo
from studyroom.models.enums import FocusKind, TodoKind, TodoPriority
from studyroom.repositories.todo_repository import TodoRepository
from studyroom.schemas.item import ItemCreate
from studyroom.schemas.todo import TodoCreate, TodoUpdate
from studyroom.schemas.workspace import WorkspaceCreate
from studyroom.services.focus_service import FocusService
from studyroom.services.hierarchy_service import HierarchyService
from studyroom.services.todo_service import TodoService
from studyroom.services.workspace_service import WorkspaceService
from tests.conftest import NOW, OWNER_A, OWNER_B


@pytest.fixture()
def workspace(db):
    return WorkspaceService(db).create_workspace(OWNER_A, WorkspaceCreate(title="Todos"), NOW)


def _note(db, workspace_id: str, owner_id: str = OWNER_A):
    return HierarchyService(db).create_item(
        owner_id, ItemCreate(workspace_id=workspace_id, type="note", note="Read this")
    )


class TestCreateTodo:

    def test_workspace_level_todo(self, db, workspace):
        todo = TodoService(db).create_todo(
            OWNER_A,
            TodoCreate(workspace_id=workspace.id, text=" Build a CRUD API ", kind="project", priority="high"),
        )
        assert todo.id.startswith("td-")
        assert todo.text == "Build a CRUD API"
        assert todo.kind == TodoKind.PROJECT
        assert todo.priority == TodoPriority.HIGH
        assert todo.done is False
        assert todo.item_id is None

    def test_item_todo(self, db, workspace):
        item = _note(db, workspace.id)
        todo = TodoService(db).create_todo(
            OWNER_A, TodoCreate(workspace_id=workspace.id, item_id=item.id, text="Summarize")
        )
        assert todo.item_id == item.id

    def test_item_from_other_workspace_rejected(self, db, workspace):
        other = WorkspaceService(db).create_workspace(OWNER_A, WorkspaceCreate(title="Other"))
        item = _note(db, other.id)

        with pytest.raises(ValidationError):
            TodoService(db).create_todo(
                OWNER_A, TodoCreate(workspace_id=workspace.id, item_id=item.id, text="Mismatch")
            )
        assert db.query(StudyTodo).count() == 0

    def test_foreign_workspace_is_not_found(self, db):
        theirs = WorkspaceService(db).create_workspace(OWNER_B, WorkspaceCreate(title="Theirs"))
        with pytest.raises(WorkspaceNotFoundError):
            TodoService(db).create_todo(OWNER_A, TodoCreate(workspace_id=theirs.id, text="Sneaky"))


class TestListTodos:

    def test_open_first_then_due_date(self, db, workspace):
        service = TodoService(db)
        undated = service.create_todo(OWNER_A, TodoCreate(workspace_id=workspace.id, text="undated"))
        later = service.create_todo(
            OWNER_A, TodoCreate(workspace_id=workspace.id, text="later", due_at=NOW + timedelta(days=2))
        )
        sooner = service.create_todo(
            OWNER_A, TodoCreate(workspace_id=workspace.id, text="sooner", due_at=NOW + timedelta(days=1))
        )
        done = service.create_todo(
            OWNER_A, TodoCreate(workspace_id=workspace.id, text="done", due_at=NOW)
        )
        service.update_todo(OWNER_A, done.id, TodoUpdate(done=True), NOW)

        listed = [t.text for t in service.list_todos(OWNER_A, workspace.id)]
        assert listed == [sooner.text, later.text, undated.text, done.text]

    def test_filter_by_item(self, db, workspace):
        item = _note(db, workspace.id)
        service = TodoService(db)
        mine = service.create_todo(OWNER_A, TodoCreate(workspace_id=workspace.id, item_id=item.id, text="a"))
        service.create_todo(OWNER_A, TodoCreate(workspace_id=workspace.id, text="b"))

        assert [t.id for t in service.list_todos(OWNER_A, workspace.id, item_id=item.id)] == [mine.id]


class TestUpdateTodo:

    def test_completion_awards_xp_once(self, db, workspace):
        service = TodoService(db)
        todo = service.create_todo(OWNER_A, TodoCreate(workspace_id=workspace.id, text="Practice"))

        service.update_todo(OWNER_A, todo.id, TodoUpdate(done=True), NOW)
        service.update_todo(OWNER_A, todo.id, TodoUpdate(done=True), NOW)

        ws = WorkspaceService(db).get_workspace(OWNER_A, workspace.id)
        assert ws.xp == 5
        assert ws.streak_count == 1
        assert ws.last_activity_date_key == "2026-03-02"

    def test_reopen_and_complete_again_awards_again(self, db, workspace):
        service = TodoService(db)
        todo = service.create_todo(OWNER_A, TodoCreate(workspace_id=workspace.id, text="Practice"))

        service.update_todo(OWNER_A, todo.id, TodoUpdate(done=True), NOW)
        service.update_todo(OWNER_A, todo.id, TodoUpdate(done=False), NOW)
        service.update_todo(OWNER_A, todo.id, TodoUpdate(done=True), NOW)

        assert WorkspaceService(db).get_workspace(OWNER_A, workspace.id).xp == 10

    def test_reassign_item_is_revalidated(self, db, workspace):
        other = WorkspaceService(db).create_workspace(OWNER_A, WorkspaceCreate(title="Other"))
        foreign_item = _note(db, other.id)
        service = TodoService(db)
        todo = service.create_todo(OWNER_A, TodoCreate(workspace_id=workspace.id, text="Move me"))

        with pytest.raises(ValidationError):
            service.update_todo(OWNER_A, todo.id, TodoUpdate(item_id=foreign_item.id))

    def test_detach_from_item(self, db, workspace):
        item = _note(db, workspace.id)
        service = TodoService(db)
        todo = service.create_todo(OWNER_A, TodoCreate(workspace_id=workspace.id, item_id=item.id, text="x"))

        assert service.update_todo(OWNER_A, todo.id, TodoUpdate(item_id=None)).item_id is None

    def test_null_text_rejected_by_schema(self):
        with pytest.raises(SchemaError):
            TodoUpdate(text=None)

    def test_foreign_todo_is_not_found(self, db):
        theirs = WorkspaceService(db).create_workspace(OWNER_B, WorkspaceCreate(title="Theirs"))
        todo = TodoService(db).create_todo(OWNER_B, TodoCreate(workspace_id=theirs.id, text="Private"))
        with pytest.raises(TodoNotFoundError):
            TodoService(db).update_todo(OWNER_A, todo.id, TodoUpdate(done=True))

        assert WorkspaceService(db).get_workspace(OWNER_B, theirs.id).xp == 0


class TestDeleteTodo:

    def test_clears_focus_entry(self, db, workspace):
        service = TodoService(db)
        todo = service.create_todo(OWNER_A, TodoCreate(workspace_id=workspace.id, text="Focus me"))
        focus = FocusService(db)
        focus.add_focus(OWNER_A, workspace.id, FocusKind.TODO, todo.id, NOW)

        service.delete_todo(OWNER_A, todo.id)

        assert db.query(StudyTodo).count() == 0
        assert focus.get_focus(OWNER_A, workspace.id, NOW).entries == []

    def test_database_failure_keeps_todo_and_focus(self, db, workspace, monkeypatch):
        service = TodoService(db)
        todo = service.create_todo(OWNER_A, TodoCreate(workspace_id=workspace.id, text="Focus me"))
        focus = FocusService(db)
        focus.add_focus(OWNER_A, workspace.id, FocusKind.TODO, todo.id, NOW)

        def _fail(self, entity):
            raise SQLAlchemyError("database is locked")

        monkeypatch.setattr(TodoRepository, "delete", _fail)

        with pytest.raises(TransactionFailureError):
            service.delete_todo(OWNER_A, todo.id)

        assert db.query(StudyTodo).count() == 1
        entries = focus.get_focus(OWNER_A, workspace.id, NOW).entries
        assert [e.ref_id for e in entries] == [todo.id]
