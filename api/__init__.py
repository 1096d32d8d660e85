"""REST API module for the lootbox marketplace.

This module provides HTTP endpoints for:
- On-chain accounts, balances and token ledger
- Lootboxes, analytics, purchases and rewards
- Tokens, collections and rarities
- Chain event and VRF callback logs
- Private off-chain accounts and lootbox stat pages (API key required)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import close as db_close
from .middleware import edge_middleware, CORS_HEADERS

logger = logging.getLogger(__name__)

# Lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("Starting lootbox API...")
    # The pool is created lazily by the first query
    yield
    logger.info("Shutting down lootbox API...")
    await db_close()

# Create FastAPI app
app = FastAPI(
    title="Lootbox API",
    description="Read/write access to the lootbox marketplace database",
    version="1.0.0",
    lifespan=lifespan,
    redirect_slashes=False
)

app.middleware("http")(edge_middleware)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors in the {"error": ...} envelope."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    elif exc.status_code == 404 and exc.detail == "Not Found":
        content = {"error": "Not found"}
    else:
        content = {"error": exc.detail}
    return JSONResponse(content, status_code=exc.status_code, headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(
        {"error": "Invalid request: " + "; ".join(problems)},
        status_code=400
    )

# Import and include all routers
from .accounts import router as accounts_router
from .lootboxes import router as lootboxes_router
from .tokens import router as tokens_router
from .rarities import router as rarities_router
from .events import router as events_router
from .private import router as private_router

# Include all routers
app.include_router(accounts_router)
app.include_router(lootboxes_router)
app.include_router(tokens_router)
app.include_router(rarities_router)
app.include_router(events_router)
app.include_router(private_router)

__all__ = ['app', 'CORS_HEADERS']
