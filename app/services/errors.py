# app/services/errors.py
from typing import Any, Dict, Optional


class ServiceError(Exception):
    """
    Base class for failures raised by the catalog service.

    `detail` is the underlying message; `operation` is filled in by the
    service once the failing mutation is known, giving messages such as
    "Failed to add project: Client not found". graphql-core copies
    `extensions` into the error entry of the response envelope.
    """

    code = "INTERNAL"

    def __init__(self, detail: str, operation: Optional[str] = None):
        self.detail = detail
        self.operation = operation
        super().__init__(detail)

    @property
    def message(self) -> str:
        if self.operation:
            return f"Failed to {self.operation}: {self.detail}"
        return self.detail

    @property
    def extensions(self) -> Dict[str, Any]:
        return {"code": self.code, "operation": self.operation}

    def __str__(self) -> str:
        return self.message


class ValidationError(ServiceError):
    code = "VALIDATION_ERROR"


class NotFoundError(ServiceError):
    code = "NOT_FOUND"


class IntegrityViolationError(ServiceError):
    code = "INTEGRITY_VIOLATION"


class StoreFailureError(ServiceError):
    code = "STORE_FAILURE"
