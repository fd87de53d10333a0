"""Message model for relayed chat text."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """Immutable text payload submitted by one connection."""

    model_config = ConfigDict(frozen=True)

    sender_id: str = Field(..., description="Submitting connection id")
    text: str = Field(..., description="Payload, forwarded unchanged")
    received_at: datetime = Field(
        default_factory=datetime.now, description="Arrival time at the relay"
    )
