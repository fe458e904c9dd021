"""Closed vocabularies shared by models, schemas and services."""

from enum import Enum

from sqlalchemy import Enum as SAEnum


class WorkspaceMode(str, Enum):
    """Learning mode a workspace is set up for."""
    BUILD = "build"
    REVISE = "revise"
    INTERVIEW = "interview"


class ItemType(str, Enum):
    """Kind of study material an item points at."""
    RESOURCE = "resource"
    DOCUMENT = "document"
    LINK = "link"
    NOTE = "note"


class ItemStatus(str, Enum):
    ACTIVE = "active"
    SAVED = "saved"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class Mastery(str, Enum):
    """Evidence-based progression, cycled in declaration order."""
    NONE = "none"
    UNDERSTAND = "understand"
    IMPLEMENT = "implement"
    TEACH = "teach"

    def next(self) -> "Mastery":
        ring = list(Mastery)
        return ring[(ring.index(self) + 1) % len(ring)]


class TodoPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class TodoKind(str, Enum):
    TASK = "task"
    FLASHCARDS = "flashcards"
    PRACTICE = "practice"
    PROJECT = "project"
    QUIZ = "quiz"


class FocusKind(str, Enum):
    """What a focus entry references."""
    ITEM = "item"
    TODO = "todo"


def enum_column_type(enum_cls: type) -> SAEnum:
    """Store an enum by its value in a plain VARCHAR (portable across dialects)."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
        length=20,
    )
