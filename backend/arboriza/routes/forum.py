"""
Arboriza Backend - Forum Route Handlers
========================================

What:  Chat rooms, their messages and room membership.

Messages are not pushed; clients poll GET /api/rooms/{roomId}/messages.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from arboriza.database import get_db_session
from arboriza.schemas.common import ErrorResponse, MessageResponse
from arboriza.schemas.forum import (
    JoinRequest,
    MessageCreate,
    MessageOut,
    RoomCreate,
    RoomListItem,
    RoomResponse,
)
from arboriza.services.forum_service import forum_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rooms", tags=["Forum"])


@router.get(
    "",
    response_model=List[RoomListItem],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List rooms with message counts, newest first",
)
async def list_rooms(db: AsyncSession = Depends(get_db_session)) -> List[RoomListItem]:
    return await forum_service.list_rooms(db)


@router.post(
    "",
    status_code=201,
    response_model=RoomResponse,
    responses={
        400: {"description": "name or creator_id missing", "model": ErrorResponse},
        500: {"description": "Transaction rolled back (code and message in details)", "model": ErrorResponse},
    },
    summary="Create a room; the creator becomes its first member",
)
async def create_room(
    body: RoomCreate,
    db: AsyncSession = Depends(get_db_session),
) -> RoomResponse:
    return await forum_service.create_room(
        db, name=body.name, creator_id=body.creator_id, description=body.description
    )


@router.get(
    "/{roomId}/messages",
    response_model=List[MessageOut],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Latest messages of a room, oldest first",
)
async def list_messages(
    roomId: int,
    request: Request,
    limit: int | None = Query(default=None, ge=1, description="How many recent messages (default 50)"),
    db: AsyncSession = Depends(get_db_session),
) -> List[MessageOut]:
    if limit is None:
        limit = request.app.state.settings.messages_default_limit
    return await forum_service.list_messages(db, room_id=roomId, limit=limit)


@router.post(
    "/{roomId}/messages",
    status_code=201,
    response_model=MessageOut,
    responses={
        400: {"description": "sender_id or content missing", "model": ErrorResponse},
        403: {"description": "Sender is not a member of the room", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Post a message (members only)",
)
async def send_message(
    roomId: int,
    body: MessageCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MessageOut:
    return await forum_service.send_message(
        db, room_id=roomId, sender_id=body.sender_id, content=body.content
    )


@router.post(
    "/{roomId}/join",
    response_model=MessageResponse,
    responses={
        400: {"description": "user_id missing", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Join a room (idempotent)",
)
async def join_room(
    roomId: int,
    body: JoinRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    message = await forum_service.join_room(db, room_id=roomId, user_id=body.user_id)
    return MessageResponse(message=message)
