"""
FastAPI application entry point for the farm finance backend.

This module creates the FastAPI app instance, wires CORS and the outer
error boundary, and registers all routers.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from agri_backend import __version__
from agri_backend.config import settings
from agri_backend.routes.farm_finance import router as farm_finance_router
from agri_backend.routes.health import router as health_router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

# Error codes for framework-raised HTTP errors that carry a plain string detail
_HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}

_ALLOWED_METHODS = ("GET", "PUT", "DELETE", "OPTIONS")


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins.

    CORS_ALLOWED_ORIGINS is a comma separated list; the default "*" lets any
    web origin call the API. Only browsers enforce CORS, so native clients
    are unaffected either way.
    """
    origins = settings.CORS_ALLOWED_ORIGINS

    if "*" in origins:
        if settings.is_production():
            logger.warning("CORS allows all origins in production (CORS_ALLOWED_ORIGINS='*')")
        else:
            logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
        return ["*"]

    logger.info(f"CORS configured with {len(origins)} allowed origins")
    return origins


def _allow_origin_header(request_origin: str | None) -> str | None:
    """Value for Access-Control-Allow-Origin, or None to omit it."""
    if "*" in cors_origins:
        return "*"
    if request_origin and request_origin in cors_origins:
        return request_origin
    return None


# Create FastAPI app
app = FastAPI(
    title="Farm Finance API",
    description="Per-user farm expense and profit records for the crop advisory app",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

cors_origins = _get_cors_origins()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Log validation errors for malformed request bodies.

    Bodies are not logged; they carry the user's financial figures.
    """
    logger.error(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=422,
        content={
            "detail": {
                "error": "validation_error",
                "details": jsonable_encoder(exc.errors()),
            }
        }
    )


@app.exception_handler(StarletteHTTPException)
async def normalized_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Give framework errors (404, 405) the same {"error", "details"} shape
    our routes use.
    """
    if isinstance(exc.detail, str):
        exc = StarletteHTTPException(
            status_code=exc.status_code,
            detail={
                "error": _HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
                "details": exc.detail,
            },
            headers=exc.headers,
        )
    return await http_exception_handler(request, exc)


# Simple cross-origin requests carrying an Origin header are decorated here.
# Preflights never reach it: the boundary middleware below sits outside it.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=list(_ALLOWED_METHODS),
    allow_headers=settings.CORS_ALLOWED_HEADERS,
)


def _preflight_response(request: Request) -> Response:
    """Empty 200 for any OPTIONS request, whatever headers it asks for."""
    response = Response(status_code=status.HTTP_200_OK)
    response.headers["Access-Control-Allow-Methods"] = ", ".join(_ALLOWED_METHODS)
    requested_headers = request.headers.get("access-control-request-headers")
    if requested_headers:
        response.headers["Access-Control-Allow-Headers"] = requested_headers
    return response


@app.middleware("http")
async def cors_headers_and_error_boundary(request: Request, call_next):
    """
    Outermost handler boundary.

    - OPTIONS requests short-circuit with an empty 200, on any path and
      without auth
    - Any exception that escaped the routes becomes a generic 500
    - Every response gets the permissive cross-origin headers, including
      requests that did not send an Origin header
    """
    if request.method == "OPTIONS":
        response = _preflight_response(request)
    else:
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error on {request.method} {request.url.path}: {e}", exc_info=True)
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": {
                        "error": "internal_error",
                        "details": "Internal server error"
                    }
                }
            )

    allow_origin = _allow_origin_header(request.headers.get("origin"))
    if allow_origin:
        response.headers["Access-Control-Allow-Origin"] = allow_origin
        response.headers.setdefault(
            "Access-Control-Allow-Headers", ", ".join(settings.CORS_ALLOWED_HEADERS)
        )

    return response


# Register routers
app.include_router(health_router)
app.include_router(farm_finance_router)

logger.info("FastAPI app initialized successfully")
