"""Domain errors and the HTTP mapping the routers rely on."""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class DomainError(Exception):
    """Base class for deterministic outcomes the core reports to callers"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_content(self) -> Dict[str, Any]:
        return {"detail": self.detail}


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity_kind: str, entity_id: Any):
        super().__init__(f"{entity_kind.capitalize()} {entity_id} not found")
        self.entity_kind = entity_kind
        self.entity_id = entity_id


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, action: str, entity_kind: str, entity_id: Any = None, message: Optional[str] = None):
        if message is None:
            target = entity_kind if entity_id is None else f"{entity_kind} {entity_id}"
            message = f"Not authorized to {action.replace('_', ' ')} {target}"
        super().__init__(message)
        self.action = action
        self.entity_kind = entity_kind
        self.entity_id = entity_id


class Conflict(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class AlreadyAssigned(Conflict):
    def __init__(self, task_id: int, user_id: int):
        super().__init__(f"User {user_id} is already assigned to task {task_id}")
        self.task_id = task_id
        self.user_id = user_id


class NotAssigned(Conflict):
    def __init__(self, task_id: int, user_id: int):
        super().__init__(f"User {user_id} is not assigned to task {task_id}")
        self.task_id = task_id
        self.user_id = user_id


class ValidationFailed(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, fields: List[Dict[str, str]]):
        super().__init__("Validation failed")
        self.fields = fields

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailed":
        return cls([{"field": field, "message": message}])

    def to_content(self) -> Dict[str, Any]:
        return {"detail": self.detail, "errors": self.fields}


class TransactionFailed(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str = "Database transaction failed"):
        super().__init__(detail)


def _field_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    errors = []
    for error in exc.errors():
        # Drop the "body"/"query" prefix pydantic adds to the location
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location) or "body", "message": error.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors and request validation failures onto JSON responses"""

    @app.exception_handler(DomainError)
    async def _handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        failure = ValidationFailed(_field_errors(exc))
        return JSONResponse(status_code=failure.status_code, content=failure.to_content())


__all__ = [
    "AlreadyAssigned",
    "Conflict",
    "DomainError",
    "Forbidden",
    "NotAssigned",
    "NotFound",
    "TransactionFailed",
    "ValidationFailed",
    "register_exception_handlers",
]
