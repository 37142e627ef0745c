"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes (accounts, links, analytics, dashboard)
- The redirect catch-all, registered last
- Middleware (logging, CORS)
- Application metadata

Run with: uvicorn shortlink.main:app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shortlink import __version__
from shortlink.api import auth, endpoints
from shortlink.core.setting import settings
from shortlink.db.session import create_tables
from shortlink.middleware.logging import add_logging_middleware, configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Short-Link Service",
    description="URL shortener with accounts, link management and click analytics",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health endpoints defined before the redirect router to match before its catch-all route
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint; also the landing page unknown short codes redirect to.
    """
    return {
        "message": "Short-Link Service",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


app.include_router(auth.router, tags=["Accounts"])
app.include_router(endpoints.router, tags=["Links"])
app.include_router(endpoints.redirect_router, tags=["Redirect"])


@app.on_event("startup")
async def startup_event():
    """Create missing tables when running without migrations."""
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
    logger.info(f"Short-link service started ({settings.ENV_SETTING.value})")
