"""Relay status API endpoints."""

from fastapi import APIRouter

from chatrelay.ws.endpoints.chat import relay as broadcast_relay
from chatrelay.ws.endpoints.chat.models import RelayStatus

router = APIRouter()


@router.get("/status", response_model=RelayStatus)
async def get_status():
    """Report the connections currently registered with the relay."""
    return broadcast_relay.status()
