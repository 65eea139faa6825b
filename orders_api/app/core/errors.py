"""
Error taxonomy exposed by the service layer.

Every failure leaving ``OrderService`` is an instance of one of the
``OrderError`` subclasses below.  Each kind maps to exactly one HTTP
status, so the exception handler registered in ``main.py`` can render
any of them without knowing which backend produced the failure.

=====================  ============  ======
Kind                   Fault         Status
=====================  ============  ======
``ValidationError``    client        400
``NotFoundError``      client        404
``ConflictError``      server        500
``StorageUnavailable`` server        503
=====================  ============  ======
"""

from typing import Any, Dict, Optional

from fastapi import status


class OrderError(Exception):
    """Base class for all service-level errors."""

    code: str = "internal_error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, request_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.request_id = request_id

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "detail": self.message, "request_id": self.request_id}


class ValidationError(OrderError):
    """Malformed create or update input.  Never retried."""

    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(OrderError):
    """The referenced order does not exist."""

    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(OrderError):
    """An id collided on insert.

    Ids are generated server side, so a collision means id generation
    is broken; it is reported as a server fault.
    """

    code = "conflict"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StorageUnavailableError(OrderError):
    """The backing store could not be reached or timed out.

    Safe for the caller to retry.  The service does not retry on its own.
    """

    code = "storage_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
