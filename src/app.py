"""Manú Lanches ordering API.

Serves the storefront (menu, session cart, checkout) and the admin board
(active orders, status updates, sales report). Commands are processed
synchronously inside each request's domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 3001 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the domain.toml overlay:
#   - unset/"development" → SQLite, event_processing = "sync"
#   - "test"              → memory provider, event_processing = "sync"
#   - "production"        → PostgreSQL, event_processing = "async" (see server.py)
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.domain import ordering
from ordering.utils.db import setup_db
from ordering.utils.logging import add_context, clear_context, get_logger

ordering.init()
setup_db(ordering)

logger = get_logger(__name__)

API_PREFIX = "/api"


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Manú Lanches API",
    description="Cardápio, carrinho por sessão e pedidos",
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
    """Push the ordering domain context and bind request info to the log context."""
    if not request.url.path.startswith(API_PREFIX):
        # Health check, docs
        return await call_next(request)

    add_context(request_id=request.headers.get("x-request-id", uuid4().hex), path=request.url.path)
    try:
        with ordering.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Error handlers and routers
# ---------------------------------------------------------------------------
from ordering.api import cart_router, menu_router, order_router  # noqa: E402
from ordering.api.errors import register_error_handlers  # noqa: E402

register_error_handlers(app)
app.include_router(menu_router)
app.include_router(cart_router)
app.include_router(order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": ordering.name}})
