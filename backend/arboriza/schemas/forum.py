"""
Arboriza Backend - Forum Schemas
=================================

What:  Request and response models for rooms, membership and messages.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    """Body of POST /api/rooms."""
    name: Optional[str] = None
    description: Optional[str] = None
    creator_id: Optional[int] = None


class RoomResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    creator_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class RoomListItem(RoomResponse):
    message_count: int = Field(default=0, description="Messages posted in the room")


class MessageCreate(BaseModel):
    """Body of POST /api/rooms/{roomId}/messages."""
    sender_id: Optional[int] = None
    content: Optional[str] = None


class MessageOut(BaseModel):
    id: int
    room_id: int
    sender_id: int
    content: str
    timestamp: datetime

    model_config = {"from_attributes": True}


class JoinRequest(BaseModel):
    """Body of POST /api/rooms/{roomId}/join."""
    user_id: Optional[int] = None
