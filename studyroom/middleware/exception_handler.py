"""Render domain exceptions as ``{"error", "message", "details"}`` responses."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from ..exceptions import StudyException

logger = logging.getLogger(__name__)


async def study_exception_handler(request: Request, exc: StudyException) -> JSONResponse:
    """Log a StudyException and convert it to its HTTP response.

    Client mistakes (4xx) log at WARNING; server-side failures at ERROR.
    """
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "%s: %s",
        exc.error_code.value,
        exc.message,
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )
