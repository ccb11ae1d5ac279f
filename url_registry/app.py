#!/usr/bin/env python3
"""
Main entry point for the link registry web service.

Usage:
    url-registry-server

Environment variables:
    STORAGE_BACKEND - file, memory or redis
    STORAGE_DIR - Directory for the file backend
    REDIS_URL - Redis connection URL (redis backend)
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    SWEEP_INTERVAL_SECONDS - Seconds between expired-link sweeps
    LOG_LEVEL - Logging level
"""

import asyncio
import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .config import load_config
from .factory import create_registry
from .lib.errors import PersistenceError
from .lib.registry import LinkRegistry
from .lib.common.logging_config import setup_logging
from .web_app import create_app


async def sweep_periodically(
    registry: LinkRegistry,
    interval_seconds: float,
    logger: logging.Logger,
) -> None:
    """Remove expired links every interval until cancelled."""
    while True:
        try:
            await registry.sweep_expired()
        except PersistenceError as e:
            logger.error(f"Expired-link sweep failed: {e}")
        except Exception:
            logger.exception("Unexpected error during expired-link sweep")
        await asyncio.sleep(interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger
    
    logger.info("Starting link registry service...")
    logger.info(f"Using {config.storage_backend} storage")
    
    registry = create_registry(config, logger=logger)
    app.state.registry = registry
    
    sweep_task = asyncio.create_task(
        sweep_periodically(registry, config.sweep_interval_seconds, logger)
    )
    
    logger.info("Service started successfully")
    
    yield
    
    logger.info("Shutting down link registry service...")
    
    sweep_task.cancel()
    try:
        await sweep_task
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.exception("Expired-link sweep task failed")
    finally:
        await registry.close()
    
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()
    
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    
    logger.info("URL Registry Service")
    logger.info(f"Configuration: {config.model_dump()}")
    
    # Registry is created in the lifespan
    app = create_app(registry=None, config=config, lifespan=lifespan)
    app.state.logger = logger
    
    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )
    
    server = uvicorn.Server(uvicorn_config)
    
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True
    
    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)
    
    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
