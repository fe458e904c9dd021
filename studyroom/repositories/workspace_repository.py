"""Repository for workspaces and their focus entries."""

from typing import Iterable, List

from sqlalchemy.orm import Query

from ..exceptions import WorkspaceNotFoundError
from ..models.enums import FocusKind
from ..models.workspace import FocusEntry, Workspace
from .base import BaseRepository


class WorkspaceRepository(BaseRepository[Workspace]):
    """Data access layer for workspaces, always scoped to one owner."""

    model_class = Workspace
    id_prefix = "ws"
    not_found_error = WorkspaceNotFoundError

    def _owned_query(self, owner_id: str) -> Query:
        return self.db.query(Workspace).filter(Workspace.owner_id == owner_id)

    def list_by_owner(self, owner_id: str) -> List[Workspace]:
        return (
            self._owned_query(owner_id)
            .order_by(Workspace.updated_at.desc(), Workspace.created_at.desc())
            .all()
        )

    def count_by_owner(self, owner_id: str) -> int:
        return self._owned_query(owner_id).count()

    # --- Focus entries ---

    def replace_focus(self, workspace: Workspace, entries: Iterable[FocusEntry]) -> None:
        """Swap the whole focus list, flushing deletes before inserts.

        The unique (workspace, kind, ref) constraint would otherwise trip when
        an entry is carried over into the new list.
        """
        workspace.focus_entries.clear()
        self.db.flush()
        for position, entry in enumerate(entries):
            entry.position = position
            workspace.focus_entries.append(entry)
        self.db.flush()

    def remove_focus_refs(self, kind: FocusKind, ref_ids: Iterable[str]) -> int:
        """Delete every focus entry pointing at one of *ref_ids*. Returns the count."""
        ids = list(ref_ids)
        if not ids:
            return 0
        entries = (
            self.db.query(FocusEntry)
            .filter(FocusEntry.kind == kind, FocusEntry.ref_id.in_(ids))
            .all()
        )
        for entry in entries:
            workspace = entry.workspace
            if workspace is not None and entry in workspace.focus_entries:
                workspace.focus_entries.remove(entry)
            else:
                self.db.delete(entry)
        self.db.flush()
        return len(entries)
