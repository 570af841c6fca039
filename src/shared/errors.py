"""Custom exception classes and FastAPI exception handlers."""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str, status_code: int = 500) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class ValidationInputError(AppError):
    """Malformed or missing request fields (422).

    The only error surfaced to callers of an evaluation; it is raised
    before any check runs.
    """

    def __init__(self, detail: str = "Validation error") -> None:
        super().__init__(detail=detail, status_code=422)


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(detail=detail, status_code=404)


class GateRunNotFoundError(NotFoundError):
    """Gate run not found (404)."""

    def __init__(self, detail: str = "Gate run not found") -> None:
        super().__init__(detail=detail)


class CheckNotFoundError(NotFoundError):
    """Check id not registered (404)."""

    def __init__(self, detail: str = "Check not found") -> None:
        super().__init__(detail=detail)


class ImmutabilityViolationError(AppError):
    """Immutability violation (409)."""

    def __init__(self, detail: str = "Immutability violation") -> None:
        super().__init__(detail=detail, status_code=409)


class ParsingError(AppError):
    """Parsing error (400)."""

    def __init__(self, detail: str = "Parsing error") -> None:
        super().__init__(detail=detail, status_code=400)


class ExternalServiceError(AppError):
    """A collaborator (snapshot store, AI backend) is unavailable (502)."""

    def __init__(self, detail: str = "External service unavailable") -> None:
        super().__init__(detail=detail, status_code=502)


class CheckExecutionError(AppError):
    """An individual check raised while running.

    Never propagates out of an evaluation: the evaluator turns it into a
    single ``warning`` result for the failing check.
    """

    def __init__(self, check_id: str, cause: BaseException) -> None:
        self.check_id = check_id
        self.cause = cause
        reason = str(cause) or type(cause).__name__
        super().__init__(detail=f"Check failed to run: {reason}", status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with a FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )
