"""
E-mart - Application Entry Point
=================================
FastAPI app initialization, middleware, exception mapping, and router registration.
"""

import logging
import time as _time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import settings
from config.database import Base, engine
from common.exceptions import EmartError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
request_logger = logging.getLogger("emart.request")


# ==========================================
# Import ALL models so Base can see them
# ==========================================
from modules.catalog.models import Category, Product  # noqa: F401
from modules.cart.models import CartItem  # noqa: F401
from modules.wishlist.models import WishlistItem  # noqa: F401
from modules.order.models import Order  # noqa: F401

# ==========================================
# Import routers
# ==========================================
from modules.catalog.routes import router as catalog_router
from modules.cart.routes import router as cart_router
from modules.wishlist.routes import router as wishlist_router
from modules.dashboard.routes import router as dashboard_router


@asynccontextmanager
async def lifespan(app):
    # Auto-create any missing tables (safe for existing tables)
    Base.metadata.create_all(bind=engine)
    request_logger.info("E-mart API started")
    yield


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="E-mart",
    description="Storefront API: catalog, cart reservations, wishlist, dashboard",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)


# ==========================================
# Exception handler: business errors → JSON
# ==========================================
async def emart_exception_handler(request: Request, exc: EmartError):
    """Render every business exception as {"detail", "code"} with its HTTP status."""
    return JSONResponse(
        {"detail": exc.message, "code": exc.code},
        status_code=exc.status_code,
    )


app.add_exception_handler(EmartError, emart_exception_handler)


# ==========================================
# Middleware: Request Log
# ==========================================
_SKIP_PATHS = ("/health", "/favicon.ico")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and timing for every request."""
    path = request.url.path
    if path.startswith(_SKIP_PATHS):
        return await call_next(request)

    start = _time.time()
    response = await call_next(request)
    elapsed_ms = int((_time.time() - start) * 1000)
    request_logger.info(f"{request.method} {path} -> {response.status_code} ({elapsed_ms} ms)")
    return response


# ==========================================
# Register Routers
# ==========================================
app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(wishlist_router)
app.include_router(dashboard_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health():
    return {"status": "ok", "version": "1.0.0"}
