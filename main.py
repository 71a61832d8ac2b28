import logging

from fastapi import FastAPI
from tinyurl_app.config import settings
from tinyurl_app.api.errors import register_error_handlers
from tinyurl_app.api.v1 import auth, urls, redirect

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener with per-account ownership of short links",
    debug=settings.debug
)

register_error_handlers(app)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}




######## Include routers
app.include_router(auth.router, prefix="/api/v1")
app.include_router(urls.router, prefix="/api/v1")
app.include_router(redirect.router)
