"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Rate limiting
- The frozen ShortenerConfig shared by all services

Run with:
    uvicorn shortlink.main:app
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shortlink.api import endpoints
from shortlink.core.logging import setup_logging
from shortlink.core.rate_limit import limiter
from shortlink.core.setting import settings
from shortlink.middleware.logging import add_logging_middleware

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Short-Link Service",
    description="URL shortening with collision-free random codes and click counting",
    version="1.0.0",
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
)

# Read once here; services receive it through dependencies
app.state.shortener_config = settings.shortener_config()

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health endpoints defined before routers to match before catch-all route
@app.get("/", tags=["Health"])
async def root():
    """Service information."""
    return {
        "message": "Short-Link Service",
        "version": "1.0.0",
        "docs": "/docs" if settings.docs_enabled else None
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


app.include_router(endpoints.my_links_router, tags=["My Links"])
app.include_router(endpoints.router, tags=["Short Links"])
