"""Daily "Next 3" focus list for a workspace.

A focus list is only valid for the UTC day stamped in
``Workspace.focus_date_key``. Reads outside that day see an empty list; the
first write of a new day clears the stored entries before applying itself.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.clock import date_key, resolve_now
from ..database import atomic
from ..exceptions import LimitExceededError, ValidationError
from ..models.enums import FocusKind
from ..models.workspace import FocusEntry, Workspace
from ..repositories.item_repository import ItemRepository
from ..repositories.todo_repository import TodoRepository
from ..repositories.workspace_repository import WorkspaceRepository
from ..schemas.workspace import FocusRef, FocusResponse, FocusEntryResponse

MAX_FOCUS_ENTRIES = 3

logger = logging.getLogger(__name__)


class FocusService:
    """Bounded, self-resetting focus list.

    Public methods:
        get_focus     -- today's entries (empty when built on another day)
        add_focus     -- append one ref; duplicate is a no-op, 4th is rejected
        remove_focus  -- idempotent removal
        replace_focus -- wholesale replacement inside a caller's transaction
    """

    def __init__(self, db: Session):
        self.db = db
        self.workspace_repo = WorkspaceRepository(db)
        self.item_repo = ItemRepository(db)
        self.todo_repo = TodoRepository(db)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_focus(
        self, owner_id: str, workspace_id: str, now: Optional[datetime] = None
    ) -> FocusResponse:
        workspace = self.workspace_repo.get_owned(owner_id, workspace_id)
        return self._response(workspace, date_key(resolve_now(now)))

    def add_focus(
        self,
        owner_id: str,
        workspace_id: str,
        kind: FocusKind,
        ref_id: str,
        now: Optional[datetime] = None,
    ) -> FocusResponse:
        now = resolve_now(now)
        today = date_key(now)

        with atomic(self.db, "add_focus"):
            workspace = self.workspace_repo.get_owned(owner_id, workspace_id)
            self._reset_if_stale(workspace, today, now)
            self._resolve_ref(workspace.id, kind, ref_id)

            if any(e.kind == kind and e.ref_id == ref_id for e in workspace.focus_entries):
                return self._response(workspace, today)

            if len(workspace.focus_entries) >= MAX_FOCUS_ENTRIES:
                raise LimitExceededError("focus", MAX_FOCUS_ENTRIES)

            workspace.focus_entries.append(
                FocusEntry(
                    kind=kind,
                    ref_id=ref_id,
                    position=len(workspace.focus_entries),
                    added_at=now,
                )
            )
            workspace.updated_at = now

        logger.info(
            "Focus entry added",
            extra={"workspace_id": workspace_id, "kind": kind.value, "ref_id": ref_id},
        )
        return self._response(workspace, today)

    def remove_focus(
        self,
        owner_id: str,
        workspace_id: str,
        kind: FocusKind,
        ref_id: str,
        now: Optional[datetime] = None,
    ) -> FocusResponse:
        """Remove one entry. Removing an absent entry succeeds unchanged."""
        now = resolve_now(now)
        today = date_key(now)

        with atomic(self.db, "remove_focus"):
            workspace = self.workspace_repo.get_owned(owner_id, workspace_id)
            self._reset_if_stale(workspace, today, now)
            kept = [
                FocusRef(kind=e.kind, ref_id=e.ref_id)
                for e in workspace.focus_entries
                if not (e.kind == kind and e.ref_id == ref_id)
            ]
            if len(kept) != len(workspace.focus_entries):
                self._write_entries(workspace, kept, now)

        return self._response(workspace, today)

    def replace_focus(
        self, workspace: Workspace, refs: List[FocusRef], now: Optional[datetime] = None
    ) -> None:
        """Replace the whole list. Runs inside the caller's transaction.

        Oversized or duplicated lists are rejected, never clipped. Entries
        carried over from today's list keep their original ``added_at``.
        """
        now = resolve_now(now)
        today = date_key(now)

        if len(refs) > MAX_FOCUS_ENTRIES:
            raise ValidationError(
                f"Focus list holds at most {MAX_FOCUS_ENTRIES} entries", field="focus"
            )
        keys = [(r.kind, r.ref_id) for r in refs]
        if len(set(keys)) != len(keys):
            raise ValidationError("Focus list contains duplicate entries", field="focus")
        for ref in refs:
            self._resolve_ref(workspace.id, ref.kind, ref.ref_id)

        self._reset_if_stale(workspace, today, now)
        self._write_entries(workspace, refs, now)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _reset_if_stale(self, workspace: Workspace, today: str, now: datetime) -> None:
        if workspace.focus_date_key == today:
            return
        if workspace.focus_entries:
            logger.debug(
                "Clearing stale focus list",
                extra={"workspace_id": workspace.id, "focus_date_key": workspace.focus_date_key},
            )
        self.workspace_repo.replace_focus(workspace, [])
        workspace.focus_date_key = today
        workspace.updated_at = now

    def _write_entries(self, workspace: Workspace, refs: Iterable[FocusRef], now: datetime) -> None:
        added_at = {(e.kind, e.ref_id): e.added_at for e in workspace.focus_entries}
        entries = [
            FocusEntry(
                kind=ref.kind,
                ref_id=ref.ref_id,
                added_at=added_at.get((ref.kind, ref.ref_id), now),
            )
            for ref in refs
        ]
        self.workspace_repo.replace_focus(workspace, entries)
        workspace.updated_at = now

    def _resolve_ref(self, workspace_id: str, kind: FocusKind, ref_id: str) -> None:
        if kind == FocusKind.ITEM:
            target = self.item_repo.find_in_workspace(workspace_id, ref_id)
        else:
            target = self.todo_repo.find_in_workspace(workspace_id, ref_id)
        if target is None:
            raise ValidationError(
                f"Focus target {kind.value} '{ref_id}' not found in this workspace",
                field="focus",
            )

    @staticmethod
    def _response(workspace: Workspace, today: str) -> FocusResponse:
        entries = workspace.focus_entries if workspace.focus_date_key == today else []
        return FocusResponse(
            workspace_id=workspace.id,
            date_key=today,
            entries=[FocusEntryResponse.model_validate(e) for e in entries],
        )
