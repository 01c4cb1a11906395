"""
FastAPI application initialization and configuration.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .middleware import log_requests_middleware
from .endpoints import (
    chat_completions_router,
    health_router,
    session_router,
)
from .state import close_dispatch_context

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_dispatch_context()
    logger.debug("Upstream transport closed")


# Create FastAPI app
app = FastAPI(title="Copilot Interceptor", version="1.0.0", lifespan=lifespan)

# Add middleware
app.middleware("http")(log_requests_middleware)

# Register routers
app.include_router(health_router)
app.include_router(session_router)
app.include_router(chat_completions_router)

logger.debug("FastAPI application initialized with all routers and middleware")
