"""Map store and Protean errors onto HTTP responses.

Every error body has the shape ``{"status": "error", "message": ..., "errors": {...}}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError
from protean.integrations.fastapi import register_exception_handlers

from store.errors import StoreError

logger = structlog.get_logger(__name__)


def _first_message(messages):
    for value in (messages or {}).values():
        if isinstance(value, (list, tuple)) and value:
            return str(value[0])
        if value:
            return str(value)
    return "Invalid request"


def _error_body(message, errors):
    return {"status": "error", "message": message, "errors": errors}


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    messages = exc.messages if isinstance(exc.messages, dict) else {"_entity": [str(exc.messages)]}
    return JSONResponse(status_code=400, content=_error_body(_first_message(messages), messages))


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message, cause=repr(exc.__cause__))
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.messages))


def register_store_exception_handlers(app: FastAPI) -> None:
    """Install Protean's handlers, then the store's on top of them."""
    register_exception_handlers(app)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(StoreError, _store_error_handler)
