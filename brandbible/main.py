"""Main FastAPI application entry point."""

import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import chat, exports, generator, health
from .core import BrandGateway, BrandOrchestrator
from .providers import GeminiClient
from .utils.config import PipelineConfig, load_config
from .utils.logger import get_logger
from .utils.sessions import SessionStore

logger = get_logger(__name__)


def attach_components(
    app: FastAPI,
    gateway: BrandGateway,
    pipeline: Optional[PipelineConfig] = None,
    public_base_url: Optional[str] = None,
    sessions: Optional[SessionStore] = None,
):
    """Store the shared components the routers read from app.state."""
    pipeline = pipeline or PipelineConfig()
    app.state.gateway = gateway
    app.state.pipeline = pipeline
    app.state.orchestrator = BrandOrchestrator(gateway, pipeline)
    app.state.public_base_url = public_base_url
    app.state.chat_sessions = sessions if sessions is not None else SessionStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown.
    
    Opens the Gemini client on startup and closes it on shutdown.
    """
    logger.info("Application starting up...")
    
    config = load_config()
    
    gemini = GeminiClient(
        api_key=config.gemini_api_key,
        base_url=config.gemini_base_url,
        timeout=config.timeout_gemini_seconds,
    )
    await gemini.initialize()
    
    attach_components(
        app,
        BrandGateway(gemini, config.models),
        pipeline=config.pipeline,
        public_base_url=config.public_base_url,
        sessions=SessionStore(
            max_sessions=config.chat_max_sessions,
            idle_ttl_seconds=config.chat_session_ttl_seconds,
        ),
    )
    app.state.config = config
    
    logger.info("Application startup complete")
    
    try:
        yield
    finally:
        logger.info("Application shutting down...")
        await gemini.close()
        logger.info("Application shutdown complete")


def create_app(
    gateway: Optional[BrandGateway] = None,
    pipeline: Optional[PipelineConfig] = None,
    sessions: Optional[SessionStore] = None,
) -> FastAPI:
    """
    Build the application.
    
    Args:
        gateway: Pre-built gateway; when given, no lifespan setup runs
        pipeline: Pipeline switches used together with `gateway`
        sessions: Chat session store used together with `gateway`
    """
    app = FastAPI(
        title="Brand Bible",
        description="AI-powered brand identity generation and branding chat",
        version=__version__,
        lifespan=lifespan if gateway is None else None,
    )
    
    if gateway is not None:
        attach_components(app, gateway, pipeline, sessions=sessions)
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(generator.router, prefix="/generate", tags=["generator"])
    app.include_router(exports.router, prefix="/export", tags=["export"])
    app.include_router(chat.router, prefix="/chat", tags=["chat"])
    
    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": "brand-bible",
            "version": __version__,
            "status": "running",
            "docs": "/docs",
        }
    
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    
    port = int(os.getenv("PORT", 8000))
    
    uvicorn.run(
        "brandbible.main:app",
        host="0.0.0.0",
        port=port,
        log_level="info",
    )
