"""Main application module for the chat relay."""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatrelay import __version__
from chatrelay.api.router import api_router
from chatrelay.config import WS_PATH, Settings
from chatrelay.utils.log import configure, get_logger
from chatrelay.ws.endpoints.chat import relay
from chatrelay.ws.router import ws_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close every relay connection when the application shuts down."""
    yield
    await relay.close_all()


app = FastAPI(
    title="chatrelay",
    description="Broadcast chat relay with a WebSocket interface",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(api_router)
app.include_router(ws_router)


@app.get("/", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "message": "chatrelay is running"}


def start(settings: Optional[Settings] = None):
    """Start the application server."""
    settings = settings or Settings.from_env()
    configure(level=settings.log_level, log_file=settings.log_file)
    logger.success(f"Relay listening on ws://{settings.host}:{settings.port}{WS_PATH}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    start()
