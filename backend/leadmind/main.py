import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from .config import settings
from .api.routes import router, set_content_store
from .api.admin import router as admin_router
from .api.middleware import setup_middleware
from .core.catalog import ContentStore
from .core.validation import ValidationError

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting LeadMind assessment service...")

    try:
        for path in settings.catalog_files:
            if not os.path.exists(path):
                raise FileNotFoundError(f"Content file not found: {path}")

        set_content_store(ContentStore.from_settings(settings))
        logger.info("Content catalogs loaded and validated")

        if not settings.ADMIN_API_KEY:
            logger.warning("ADMIN_API_KEY not set - staff endpoints disabled")

    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title="LeadMind Assessment",
    description="Leadership type diagnosis and team concern analysis",
    version="1.0.0",
    lifespan=lifespan
)

setup_middleware(app)

app.include_router(router, prefix="/api/v1", tags=["Assessment"])
app.include_router(admin_router, prefix="/api/v1", tags=["Admin"])


@app.get("/", response_class=HTMLResponse)
async def root():
    return HTMLResponse(content="""
    <!DOCTYPE html>
    <html>
    <head><title>LeadMind Assessment</title></head>
    <body style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px;">
        <h1>LeadMind Assessment API</h1>
        <ul>
            <li><strong>GET</strong> /api/v1/questions - Diagnosis questions</li>
            <li><strong>POST</strong> /api/v1/diagnosis/score - Score answers</li>
            <li><strong>GET</strong> /api/v1/concerns - Concern keywords</li>
            <li><strong>POST</strong> /api/v1/concerns/analyze - Analyze selected concerns</li>
            <li><strong>POST</strong> /api/v1/assessments - Save assessment progress</li>
            <li><strong>GET</strong> /api/v1/followership - Followership types and compatibility</li>
            <li><strong>POST</strong> /api/v1/service-request - Request follow-up services</li>
        </ul>
        <p><a href="/docs">Interactive API Documentation</a> | <a href="/api/v1/health">Health Check</a></p>
    </body>
    </html>
    """)


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle validation errors globally"""
    logger.warning(f"Validation error on {request.url}: {exc}")
    return JSONResponse(
        status_code=400,
        content={
            "error_type": "validation_error",
            "message": exc.args[0] if exc.args else str(exc),
            "details": exc.errors
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors globally"""
    logger.error(f"Unexpected error on {request.url}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error_type": "internal_error",
            "message": "An unexpected error occurred",
            "request_id": getattr(request.state, "request_id", "unknown")
        }
    )
