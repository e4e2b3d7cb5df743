"""HTTP error mapping for the ordering API.

Error bodies carry a human-readable ``message``; validation failures add
``errors`` (field -> list of messages).
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger(__name__)

STORAGE_FAILURE_MESSAGE = "Erro ao acessar os dados. Tente novamente."
UNEXPECTED_FAILURE_MESSAGE = "Erro interno do servidor. Tente novamente."


def _messages(exc) -> dict:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return {key: value if isinstance(value, list) else [str(value)] for key, value in messages.items()}
    return {"_entity": [str(messages or exc)]}


def _summary(errors: dict) -> str:
    return " ".join(message for values in errors.values() for message in values)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    errors = _messages(exc)
    return JSONResponse(status_code=400, content={"message": _summary(errors), "errors": errors})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.setdefault(".".join(location) or "body", []).append(error.get("msg", "invalid"))
    return JSONResponse(
        status_code=400,
        content={"message": "Dados inválidos ou incompletos.", "errors": errors},
    )


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": _summary(_messages(exc))})


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Storage failure", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"message": STORAGE_FAILURE_MESSAGE})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(status_code=500, content={"message": UNEXPECTED_FAILURE_MESSAGE})


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers, then override the ones with a storefront-facing shape."""
    register_exception_handlers(app)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
