from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from registration.config.logger import get_logger

logger = get_logger("ErrorHandlers")


class RegistrationError(Exception):
    """Base class for errors raised by the registration service."""


class ValidationError(RegistrationError):
    """Request payload is missing fields or has malformed values."""

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        super().__init__(f"{len(errors)} invalid field(s)")


class PersistenceError(RegistrationError):
    """The relational store was unreachable or rejected the operation."""


class PublishError(RegistrationError):
    """A message could not be enqueued. Never surfaced to HTTP callers."""


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected request payload", extra={"path": request.url.path, "errors": exc.errors})
    return JSONResponse(status_code=400, content={"error": "validation_error", "detail": exc.errors})


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error(
        "Persistence failure",
        extra={"path": request.url.path, "error": str(exc), "cause": repr(exc.__cause__)},
    )
    body: Dict[str, Any] = {"error": "persistence_error", "detail": str(exc)}
    return JSONResponse(status_code=500, content=body)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # undecodable JSON bodies
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ())) or "body", "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return await validation_error_handler(request, ValidationError(errors))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
