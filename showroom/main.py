"""
FastAPI application entry point.
Main application instance with middleware and route configuration.
"""
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import logging

from showroom.config import settings
from showroom.dependencies import get_storage
from showroom.services.cloudinary_service import validate_cloudinary_config
from showroom.routes import admin, catalog, cms, contact
from showroom.services.storage import Storage
from showroom.utils.rate_limit import limiter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI application instance
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS Middleware Configuration
# Admin sessions use cookies, so credentials are allowed and origins are explicit
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,  # Cache preflight requests for 1 hour
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request with its response status."""
    method = request.method
    path = request.url.path
    logger.debug(f"Incoming {method} request to {path} from origin: {request.headers.get('origin', 'No origin header')}")

    try:
        response = await call_next(request)
        logger.info(f"Response status: {response.status_code} for {method} {path}")
        return response
    except Exception as e:
        logger.error(
            f"Error processing {method} {path}: {str(e)}\n"
            f"  Error type: {type(e).__name__}",
            exc_info=True
        )
        raise


# Include routers
app.include_router(catalog.router, prefix="/api", tags=["catalog"])
app.include_router(contact.router, prefix="/api", tags=["contact"])
app.include_router(admin.router, prefix="/api", tags=["admin"])
app.include_router(cms.router, prefix="/api", tags=["CMS"])


def add_cors_headers(response: JSONResponse, request: Request) -> JSONResponse:
    """
    Add CORS headers to error responses for allowed origins.

    Args:
        response: The JSONResponse to add headers to
        request: The incoming request

    Returns:
        JSONResponse with CORS headers added
    """
    origin = request.headers.get("origin")
    if origin and origin in settings.CORS_ORIGINS:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Vary"] = "Origin"

    return response


# Exception Handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions (400, 401, 404, etc.) with CORS headers."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"HTTPException on {request.method} {request.url.path}:\n"
        f"  Status: {exc.status_code}\n"
        f"  Detail: {exc.detail}"
    )

    # Handle both string and dict detail formats
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail, "detail": str(exc.detail)}

    response = JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None)
    )

    return add_cors_headers(response, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """Handle request validation errors."""
    logger.warning(
        f"Validation error on {request.method} {request.url.path}:\n"
        f"  Errors: {exc.errors()}"
    )
    response = JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation error",
            "detail": [
                {"loc": list(error.get("loc", [])), "msg": error.get("msg"), "type": error.get("type")}
                for error in exc.errors()
            ]
        }
    )
    return add_cors_headers(response, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}:\n"
        f"  Error: {str(exc)}\n"
        f"  Error type: {type(exc).__name__}",
        exc_info=True
    )
    response = JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred"
        }
    )
    return add_cors_headers(response, request)


# Root Endpoints
@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": settings.API_TITLE,
        "status": "healthy",
        "version": settings.API_VERSION
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/health/db")
async def health_check_db(storage: Storage = Depends(get_storage)):
    """
    Storage health check endpoint.
    Pings the configured storage backend.
    """
    if await storage.ping():
        return {
            "database": "connected",
            "backend": settings.STORAGE_BACKEND,
            "status": "healthy"
        }
    return {
        "database": "error",
        "backend": settings.STORAGE_BACKEND,
        "status": "unhealthy",
        "error": "Database connection failed"
    }


@app.get("/health/cloudinary")
async def health_check_cloudinary():
    """
    Cloudinary health check endpoint.
    Validates Cloudinary configuration.
    """
    if validate_cloudinary_config():
        return {
            "cloudinary": "configured",
            "status": "healthy",
            "cloud_name": settings.CLOUDINARY_CLOUD_NAME
        }
    return {
        "cloudinary": "not_configured",
        "status": "warning" if settings.IMAGE_SINK != "cloudinary" else "unhealthy",
        "message": "Cloudinary credentials not set in environment variables"
    }


def _uses_mongo() -> bool:
    return settings.STORAGE_BACKEND == "mongo" or settings.IMAGE_SINK == "gridfs"


@app.on_event("startup")
async def startup_event():
    """
    Connect the configured backends on application startup.
    Non-blocking: the app starts even if a backend connection fails.
    """
    logger.info(
        f"Starting with storage backend '{settings.STORAGE_BACKEND}' "
        f"and image sink '{settings.IMAGE_SINK}'"
    )

    if settings.STORAGE_BACKEND == "sql":
        from showroom.database import init_db
        try:
            await init_db()
        except Exception as e:
            logger.error(
                f"Failed to initialize database on startup: {str(e)}\n"
                f"The application will continue to run, but storage-dependent endpoints will return empty results."
            )

    if _uses_mongo():
        from showroom.mongodb import init_mongo
        try:
            await init_mongo()
        except Exception as e:
            logger.error(
                f"Failed to connect to MongoDB on startup: {str(e)}\n"
                f"Please check your MONGODB_URI configuration and network connectivity."
            )


@app.on_event("shutdown")
async def shutdown_event():
    """Close backend connections on application shutdown."""
    if settings.STORAGE_BACKEND == "sql":
        from showroom.database import close_db
        await close_db()
    if _uses_mongo():
        from showroom.mongodb import close_mongo
        close_mongo()
