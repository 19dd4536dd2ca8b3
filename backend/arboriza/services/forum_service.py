"""
Arboriza Backend - Forum Service
=================================

What:  Chat rooms, room membership and messages.
Who:   Called by routes/forum.py.

Rules:
    - Creating a room also makes its creator a member; both rows are
      committed in one transaction or neither is.
    - Only members can post. Membership is checked before the insert.
    - Joining is idempotent: an existing membership is reported, not rewritten.
    - Messages are fetched newest first with a LIMIT and returned oldest
      first, so a client renders the latest `limit` messages top to bottom.

Concurrency:
    No locking beyond the store's own. A membership check and the following
    insert run as separate statements.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from arboriza.exceptions import ForbiddenError, StoreError, ValidationError
from arboriza.models.forum import Message, Room, RoomMember
from arboriza.schemas.forum import MessageOut, RoomListItem, RoomResponse

logger = logging.getLogger(__name__)

ALREADY_MEMBER = "User is already a member"
JOINED = "Successfully joined room"


class ForumService:

    async def list_rooms(self, db: AsyncSession) -> List[RoomListItem]:
        """Every room with its message count, newest room first."""
        query = (
            select(Room, func.count(Message.id).label("message_count"))
            .outerjoin(Message, Message.room_id == Room.id)
            .group_by(Room.id)
            .order_by(Room.created_at.desc(), Room.id.desc())
        )

        try:
            result = await db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Error fetching rooms: %s", str(e), exc_info=True)
            raise StoreError(message="Failed to fetch rooms")

        return [
            RoomListItem(
                id=room.id,
                name=room.name,
                description=room.description,
                creator_id=room.creator_id,
                created_at=room.created_at,
                message_count=count,
            )
            for room, count in rows
        ]

    async def create_room(
        self,
        db: AsyncSession,
        name: Optional[str],
        creator_id: Optional[int],
        description: Optional[str] = None,
    ) -> RoomResponse:
        """
        Insert a room and its creator's membership atomically.

        Raises:
            ValidationError: name or creator_id missing (→ 400)
            StoreError:      either insert failed, nothing committed (→ 500,
                             driver code and message exposed)
        """
        if not name or not creator_id:
            raise ValidationError(
                message="Name and creator ID are required",
                context={"fields": ["name", "creator_id"]},
            )

        try:
            async with db.begin():
                room = Room(name=name, description=description, creator_id=creator_id)
                db.add(room)
                await db.flush()

                db.add(RoomMember(room_id=room.id, user_id=creator_id))
                await db.flush()
                await db.refresh(room)
        except SQLAlchemyError as e:
            logger.error("Room creation rolled back: %s", str(e), exc_info=True)
            raise StoreError.from_exception(
                e, message="Database operation failed", expose_detail=True
            )

        logger.info("Room %s created by user %s", room.id, creator_id)
        return RoomResponse.model_validate(room)

    async def list_messages(
        self,
        db: AsyncSession,
        room_id: int,
        limit: int = 50,
    ) -> List[MessageOut]:
        """The `limit` most recent messages of a room, oldest first."""
        query = (
            select(Message)
            .where(Message.room_id == room_id)
            .order_by(Message.timestamp.desc(), Message.id.desc())
            .limit(limit)
        )

        try:
            result = await db.execute(query)
            messages = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Error fetching messages for room %s: %s", room_id, str(e))
            raise StoreError(message="Failed to fetch messages")

        messages.reverse()
        return [MessageOut.model_validate(message) for message in messages]

    async def send_message(
        self,
        db: AsyncSession,
        room_id: int,
        sender_id: Optional[int],
        content: Optional[str],
    ) -> MessageOut:
        """
        Post a message as a member of the room.

        Raises:
            ValidationError: sender_id or content missing (→ 400)
            ForbiddenError:  sender is not a member (→ 403), nothing written
            StoreError:      lookup or insert failed (→ 500)
        """
        if not sender_id or not content:
            raise ValidationError(
                message="Sender ID and content are required",
                context={"fields": ["sender_id", "content"]},
            )

        try:
            if not await self._is_member(db, room_id, sender_id):
                raise ForbiddenError(context={"room_id": room_id, "user_id": sender_id})

            message = Message(room_id=room_id, sender_id=sender_id, content=content)
            db.add(message)
            await db.flush()
            await db.refresh(message)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Error sending message to room %s: %s", room_id, str(e), exc_info=True)
            raise StoreError(message="Failed to send message")

        return MessageOut.model_validate(message)

    async def join_room(self, db: AsyncSession, room_id: int, user_id: Optional[int]) -> str:
        """
        Make a user a member of a room; a no-op when already a member.

        Returns the acknowledgement message for the client.
        """
        if not user_id:
            raise ValidationError(message="User ID is required", field="user_id")

        try:
            if await self._is_member(db, room_id, user_id):
                return ALREADY_MEMBER

            db.add(RoomMember(room_id=room_id, user_id=user_id))
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Error joining room %s: %s", room_id, str(e), exc_info=True)
            raise StoreError(message="Failed to join room")

        logger.info("User %s joined room %s", user_id, room_id)
        return JOINED

    @staticmethod
    async def _is_member(db: AsyncSession, room_id: int, user_id: int) -> bool:
        result = await db.execute(
            select(RoomMember.user_id).where(
                RoomMember.room_id == room_id,
                RoomMember.user_id == user_id,
            )
        )
        return result.first() is not None


forum_service = ForumService()
