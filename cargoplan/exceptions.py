# cargoplan/exceptions.py

# Domain errors raised by the services, rendered as JSON by the app handler.

from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class CargoPlanError(Exception):
    status_code = 500
    default_message = "Internal error."

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "errors": self.errors}


class ValidationError(CargoPlanError):
    """Malformed, missing or out-of-range input. Carries one message per field."""
    status_code = 400
    default_message = "Validation failed."


class NotFound(CargoPlanError):
    status_code = 404
    default_message = "Resource not found."


class PermissionDenied(CargoPlanError):
    status_code = 403
    default_message = "Access denied."


class Conflict(CargoPlanError):
    status_code = 409
    default_message = "Concurrent update detected, please retry."


class PersistenceError(CargoPlanError):
    status_code = 500
    default_message = "Could not save changes."


async def cargoplan_error_handler(request: Request, exc: CargoPlanError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Body fields the services cannot coerce (dates, nested objects) fail in
# FastAPI before reaching them, reported in the same 400 shape.
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        errors.append(f"{field}: {error['msg']}" if field else error["msg"])
    return JSONResponse(status_code=ValidationError.status_code, content=ValidationError(errors=errors).to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CargoPlanError, cargoplan_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
