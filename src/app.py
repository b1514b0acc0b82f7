"""Store FastAPI application.

Processes cart and order commands synchronously via HTTP. Each request runs
inside the store domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → in-memory database, testing flag set
#   - "production" → PostgreSQL at DATABASE_URL
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from store.domain import store
from store.utils.logging import bind_request_context, clear_request_context, configure_logging

configure_logging(file_prefix="store")
store.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Store API",
    description="E-commerce store — cart and checkout",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the store domain context and bind the shopper to log lines for each request."""
    request_id = request.headers.get("x-request-id") or uuid4().hex
    bind_request_context(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        user_id=request.headers.get("x-user-id"),
    )
    try:
        with store.domain_context():
            response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers and error handlers
# ---------------------------------------------------------------------------
from store.api import cart_router, order_router  # noqa: E402
from store.api.errors import register_store_exception_handlers  # noqa: E402

app.include_router(cart_router)
app.include_router(order_router)
register_store_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": {"name": store.name},
        }
    )
