"""Custom exception hierarchy for the Study Room service."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Lookup errors (missing and foreign ids look the same)
    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    TODO_NOT_FOUND = "TODO_NOT_FOUND"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Cardinality limits (workspaces, focus slots, folders, items)
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"

    # Database errors
    TRANSACTION_FAILED = "TRANSACTION_FAILED"

    # Auth & rate limiting
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class StudyException(Exception):
    """
    Base exception for all Study Room errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class NotFoundError(StudyException):
    """Entity does not exist or is not owned by the caller.

    Both cases produce the same response so that ids belonging to other
    owners cannot be probed.
    """

    entity = "Entity"
    code = ErrorCode.INTERNAL_ERROR
    id_field = "id"

    def __init__(self, entity_id: str):
        super().__init__(
            f"{self.entity} not found: {entity_id}",
            self.code,
            status_code=404,
            details={self.id_field: entity_id}
        )


class WorkspaceNotFoundError(NotFoundError):
    """Workspace not found for this owner."""

    entity = "Workspace"
    code = ErrorCode.WORKSPACE_NOT_FOUND
    id_field = "workspace_id"


class FolderNotFoundError(NotFoundError):
    """Folder not found for this owner."""

    entity = "Folder"
    code = ErrorCode.FOLDER_NOT_FOUND
    id_field = "folder_id"


class ItemNotFoundError(NotFoundError):
    """Study item not found for this owner."""

    entity = "Item"
    code = ErrorCode.ITEM_NOT_FOUND
    id_field = "item_id"


class TodoNotFoundError(NotFoundError):
    """Todo not found for this owner."""

    entity = "Todo"
    code = ErrorCode.TODO_NOT_FOUND
    id_field = "todo_id"


class TemplateNotFoundError(NotFoundError):
    """No curated template with this id."""

    entity = "Template"
    code = ErrorCode.TEMPLATE_NOT_FOUND
    id_field = "template_id"


class ResourceNotFoundError(NotFoundError):
    """Curated resource missing from the resource catalog."""

    entity = "Resource"
    code = ErrorCode.RESOURCE_NOT_FOUND
    id_field = "resource_id"


class DocumentNotFoundError(NotFoundError):
    """Uploaded document missing from the owner's document catalog."""

    entity = "Document"
    code = ErrorCode.DOCUMENT_NOT_FOUND
    id_field = "document_id"


class ValidationError(StudyException):
    """Validation failed for user input or a referential invariant."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class LimitExceededError(StudyException):
    """A cardinality cap would be exceeded (workspaces, focus slots, ...)."""

    def __init__(self, resource: str, limit: int):
        super().__init__(
            f"{resource} limit reached ({limit})",
            ErrorCode.LIMIT_EXCEEDED,
            status_code=409,
            details={"resource": resource, "limit": limit}
        )


class TransactionFailureError(StudyException):
    """A multi-entity operation could not be committed and was rolled back."""

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        details: Dict[str, Any] = {"operation": operation}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            f"Transaction failed: {operation}",
            ErrorCode.TRANSACTION_FAILED,
            status_code=500,
            details=details
        )


class AuthenticationError(StudyException):
    """Request lacks valid authentication credentials."""

    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
        )
