"""
Arboriza Backend - Plant & Comment Models
==========================================

What:  ORM models for user-registered plants (`plantas`) and their comment
       threads (`plant_comments`).

Table Design:
    - A plant needs at least one of nome_cientifico / nome_popular and both
      coordinates. The name rule is checked by PlantService before insert;
      the coordinates are NOT NULL columns as well.
    - Plants are immutable once registered.
    - Comments are listed newest first, hence the (plant_id, created_at)
      index.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from arboriza.database import Base


class Plant(Base):
    """A tree registered by a user (or imported from a field survey)."""

    __tablename__ = "plantas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nome_cientifico: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    nome_popular: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    detalhes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    data_plantio: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Where the record came from (survey, citizen report, ...)
    fonte: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    usuario_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=True,
    )

    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return (
            f"<Plant(id={self.id}, nome_cientifico='{self.nome_cientifico}', "
            f"nome_popular='{self.nome_popular}')>"
        )


class PlantComment(Base):
    """One comment in a plant's discussion thread."""

    __tablename__ = "plant_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    plant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("plantas.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )

    comment_text: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("idx_plant_comments_plant_created", "plant_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<PlantComment(id={self.id}, plant_id={self.plant_id}, user_id={self.user_id})>"
