# app/main.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from app.config import settings
from app.core.errors import CartServiceError
from app.database import db
from app.api.routes import cart as cart_routes
from app.middleware.cors_config import configure_cors
from app.middleware.security_headers import add_security_headers


logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context: report where carts are stored and which product service
    enrichment will call before the app starts serving.
    """
    carts_path = db._file_path("carts")
    if not carts_path.exists():
        logger.warning(
            "Carts file not found at %s; it will be created on the first add-to-cart (or run scripts/init_db.py).",
            carts_path,
        )
    else:
        logger.info("Found carts file: %s", carts_path)
    logger.info(
        "Product lookups go to %s (timeout %.1fs)",
        settings.product_base_url,
        settings.PRODUCT_LOOKUP_TIMEOUT,
    )

    yield
    logger.info("Shutting down %s", settings.SERVICE_NAME)


app = FastAPI(title="Cart Service", version="0.1.0", lifespan=lifespan)
configure_cors(app)
add_security_headers(app)

app.include_router(cart_routes.router)


@app.exception_handler(CartServiceError)
async def cart_service_error_handler(request: Request, exc: CartServiceError):
    # raised from dependencies (identity) before any route body can translate it
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # malformed bodies share the 400 used for bad productId / quantity values
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message, "error": "ValidationError"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health", tags=["health"])
async def health():
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
