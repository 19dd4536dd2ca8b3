"""
Arboriza Backend - Plant Comment Service
=========================================

What:  The comment thread attached to each plant.

Query plans:
    list:    SELECT pc.*, u.username AS author
             FROM plant_comments pc JOIN users u ON pc.user_id = u.id
             WHERE pc.plant_id = :plant_id
             ORDER BY pc.created_at DESC
    create:  INSERT INTO plant_comments (...) VALUES (...)
             RETURNING *, (SELECT username FROM users WHERE id = :user_id) AS author
"""

import logging
from typing import List, Optional

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from arboriza.exceptions import StoreError, ValidationError
from arboriza.models.plant import PlantComment
from arboriza.models.user import User
from arboriza.schemas.plant import CommentResponse

logger = logging.getLogger(__name__)


class CommentService:

    async def list_comments(self, db: AsyncSession, plant_id: int) -> List[CommentResponse]:
        """Comments of a plant with their author's username, newest first."""
        query = (
            select(PlantComment, User.username.label("author"))
            .join(User, PlantComment.user_id == User.id)
            .where(PlantComment.plant_id == plant_id)
            .order_by(PlantComment.created_at.desc(), PlantComment.id.desc())
        )

        try:
            result = await db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Error fetching comments for plant %s: %s", plant_id, str(e))
            raise StoreError(message="Failed to fetch comments")

        return [
            CommentResponse(
                id=comment.id,
                plant_id=comment.plant_id,
                user_id=comment.user_id,
                comment_text=comment.comment_text,
                created_at=comment.created_at,
                author=author,
            )
            for comment, author in rows
        ]

    async def add_comment(
        self,
        db: AsyncSession,
        plant_id: int,
        user_id: Optional[int],
        text: Optional[str],
    ) -> CommentResponse:
        """
        Insert a comment and resolve its author in the same statement.

        Raises:
            ValidationError: userId or text missing (→ 400)
            StoreError:      insert failed, e.g. unknown plant (→ 500, raw message)
        """
        if not user_id or not text:
            raise ValidationError(
                message="userId and text are required",
                context={"fields": ["userId", "text"]},
            )

        table = PlantComment.__table__
        author = select(User.username).where(User.id == user_id).scalar_subquery()
        stmt = (
            insert(table)
            .values(plant_id=plant_id, user_id=user_id, comment_text=text)
            .returning(*table.c, author.label("author"))
        )

        try:
            result = await db.execute(stmt)
            row = result.mappings().one()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Error adding comment to plant %s: %s", plant_id, str(e), exc_info=True
            )
            raise StoreError.from_exception(
                e, message="Failed to add comment", expose_detail=True
            )

        return CommentResponse.model_validate(dict(row))


comment_service = CommentService()
