from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging_config import setup_logging
from core.price_book import PriceBookManager
from core.response_envelope import (
    apply_response_documentation,
    document_response,
    error_response,
    http_exception_response,
    internal_error_response,
)
from core.settings import get_settings
from core.validation_errors import format_validation_error_details

settings = get_settings()
logger = logging.getLogger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    manager = PriceBookManager.configure_from_settings()
    logger.info("Pricing API started env=%s price_book=%s", settings.env, manager.provider.backend_name)
    yield


app = FastAPI(lifespan=lifespan, title="Pest Control Pricing API")
app.add_middleware(RequestIdMiddleware)
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins) if settings.cors_origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        logger.error("Request %s %s failed: %s", request.method, request.url.path, exc.detail)
    return http_exception_response(exc=exc, request=request)


@app.exception_handler(RequestValidationError)
async def custom_validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(
        status_code=422,
        message="Validation error",
        data={"code": "VALIDATION_FAILED", "details": format_validation_error_details(exc.errors())},
        request_id=getattr(request.state, "request_id", None),
    )


@app.exception_handler(Exception)
async def custom_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return internal_error_response(exc=exc, request=request)


@app.get("/health", tags=["Health"])
@document_response(
    message="Health check completed",
    success_example={"status": "healthy", "services": {"price_book": {"status": "healthy", "backend": "builtin"}}},
)
async def health_check():
    services: dict[str, dict[str, str | int]] = {}
    overall_status = "healthy"

    try:
        price_book = PriceBookManager.get_instance().price_book
        services["price_book"] = {
            "status": "healthy",
            "backend": price_book.backend.value,
            "loaded_at": price_book.loaded_at,
            "packages": len(price_book.packages),
        }
    except HTTPException as exc:
        overall_status = "degraded"
        services["price_book"] = {
            "status": "unhealthy",
            "message": str(exc.detail.get("message") if isinstance(exc.detail, dict) else exc.detail),
        }

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": services,
    }


from api.v1.pricing_route import router as v1_pricing_route_router

app.include_router(v1_pricing_route_router, prefix='/v1')

apply_response_documentation(app)


def serve(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Start the pricing API server."""
    import uvicorn

    setup_logging(settings.log_level)
    logger.info("Starting pricing API on %s:%s", host, port)
    uvicorn.run("main:app", host=host, port=port, reload=not settings.is_production)


if __name__ == "__main__":
    serve()
