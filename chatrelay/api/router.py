"""Router configuration for RESTful API endpoints."""

from fastapi import APIRouter

from chatrelay.api.endpoints import relay

api_router = APIRouter(prefix="/api")

api_router.include_router(relay.router, prefix="/relay", tags=["Relay"])
