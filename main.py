"""
Reading Analytics Backend API
FastAPI application with Firebase integration
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn

from app.core.config import settings
from app.core.firebase_config import initialize_firebase
from app.core.middleware import RateLimitMiddleware, SecurityHeadersMiddleware, register_exception_handlers
from app.api.v1.router import api_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Startup
    logger.info("🚀 Starting Reading Analytics Backend...")
    logger.debug(f"Debug mode: {settings.DEBUG}")
    logger.debug(f"Reading store: {settings.READING_STORE}")

    if settings.uses_firestore and initialize_firebase():
        logger.info("✅ Firebase initialized")

    yield

    # Shutdown
    logger.info("🛑 Shutting down Reading Analytics Backend...")


# Create FastAPI app
app = FastAPI(
    title="Reading Analytics API",
    description="Article reading tracking and analytics for teachers and students",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

register_exception_handlers(app)

# Security middleware (order matters - these run first)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    RateLimitMiddleware,
    calls=settings.RATE_LIMIT_CALLS,
    period=settings.RATE_LIMIT_PERIOD
)

allowed_origins = settings.cors_origins

# In production, don't use wildcard
if settings.DEBUG:
    logger.warning("⚠️  CORS wildcard enabled - DEBUG mode. Disable in production!")
    allowed_origins.append("*")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_router, prefix="/api/v1")


# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "message": "Reading Analytics Backend is running"}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
        access_log=True,
        log_config=None  # Use our custom logging config
    )
