"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware


def create_app(
    registry,
    config,
    lifespan=None,
) -> FastAPI:
    """Create and configure FastAPI application.
    
    Args:
        registry: Link registry instance (may be set later in the lifespan)
        config: Configuration instance
        lifespan: Optional lifespan context manager
        
    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Registry",
        description="Short links with click counts and a three-day retention window",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    
    # Store instances in app state for access in routes
    app.state.registry = registry
    app.state.config = config
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, prefix=_route_prefix(config.path_prefix), tags=["Redirect"])
    
    return app


def _route_prefix(path_prefix: Optional[str]) -> str:
    """Normalize a configured prefix: leading slash, no trailing."""
    p = (path_prefix or "").strip().strip("/")
    return "/" + p if p else ""
