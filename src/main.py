from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from src.config import settings
from src.database import init_db
from src.exceptions import AppError
from src.middleware.logging import RequestLoggingMiddleware, configure_logging
from src.auth.router import router as auth_router
from src.packages.router import public_router as catalog_router, admin_router as catalog_admin_router
from src.bookings.router import router as bookings_router
from src.contact.router import router as contact_router

configure_logging()
logger = structlog.get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("application_starting", environment=settings.ENVIRONMENT)
    init_db()
    yield
    logger.info("application_stopped")

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Tour package booking API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(RequestLoggingMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error responses
def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("request_error", error_type=type(exc).__name__, message=exc.message)
    else:
        logger.info("request_rejected", error_type=type(exc).__name__, status_code=exc.status_code)
    return error_response(exc.status_code, exc.message)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        text = str(first.get("msg", message)).replace("Value error, ", "")
        message = f"{field}: {text}" if field else text
    return error_response(status.HTTP_400_BAD_REQUEST, message)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

# Include routers
app.include_router(auth_router, prefix=f"{settings.API_PREFIX}/auth", tags=["Authentication"])
app.include_router(catalog_router, prefix=f"{settings.API_PREFIX}/common", tags=["Packages"])
app.include_router(contact_router, prefix=f"{settings.API_PREFIX}/common", tags=["Contact"])
app.include_router(catalog_admin_router, prefix=f"{settings.API_PREFIX}/admin", tags=["Package Management"])
app.include_router(bookings_router, prefix=f"{settings.API_PREFIX}/booking", tags=["Bookings"])

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": f"{settings.PROJECT_NAME} API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
