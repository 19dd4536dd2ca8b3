"""Create initial schema

Revision ID: 001
Revises: None
Create Date: 2025-03-02 00:00:00.000000+00:00

What:  Users, plants and their comments, the two species datasets and the
       forum tables (rooms, room_members, messages).

Rollback: downgrade() drops every table (destructive, all data lost). The
species datasets must be re-imported afterwards.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(255), nullable=False, comment="Lowercased login name"),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        # The real guard for case-insensitive uniqueness (usernames are lowercased)
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "plantas",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nome_cientifico", sa.String(255), nullable=True),
        sa.Column("nome_popular", sa.String(255), nullable=True),
        sa.Column("detalhes", sa.Text(), nullable=True),
        sa.Column("data_plantio", sa.Date(), nullable=True),
        sa.Column("fonte", sa.String(255), nullable=True),
        sa.Column("usuario_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "plant_comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "plant_id",
            sa.Integer(),
            sa.ForeignKey("plantas.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("comment_text", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_plant_comments_plant_created",
        "plant_comments",
        ["plant_id", "created_at"],
    )

    op.create_table(
        "arvores_tombadas",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nome_cientifico", sa.String(255), nullable=True),
        sa.Column("nome_popular", sa.String(255), nullable=True),
        sa.Column("familia", sa.String(255), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("rpa", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_arvores_tombadas_rpa", "arvores_tombadas", ["rpa"])

    op.create_table(
        "censo_arboreo",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nome_cientifico", sa.String(255), nullable=True),
        sa.Column("nome_popular", sa.String(255), nullable=True),
        sa.Column("y_wgs84", sa.Float(), nullable=True, comment="Latitude"),
        sa.Column("x_wgs84", sa.Float(), nullable=True, comment="Longitude"),
        sa.Column("altura", sa.Float(), nullable=True),
        sa.Column("dap", sa.Float(), nullable=True),
        sa.Column("rpa", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_censo_arboreo_rpa", "censo_arboreo", ["rpa"])

    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("creator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "room_members",
        sa.Column(
            "room_id",
            sa.Integer(),
            sa.ForeignKey("rooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        # One membership row per (room, user)
        sa.PrimaryKeyConstraint("room_id", "user_id"),
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "room_id",
            sa.Integer(),
            sa.ForeignKey("rooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_messages_room_timestamp",
        "messages",
        ["room_id", "timestamp"],
    )


def downgrade() -> None:
    op.drop_index("idx_messages_room_timestamp", table_name="messages")
    op.drop_table("messages")
    op.drop_table("room_members")
    op.drop_table("rooms")
    op.drop_index("ix_censo_arboreo_rpa", table_name="censo_arboreo")
    op.drop_table("censo_arboreo")
    op.drop_index("ix_arvores_tombadas_rpa", table_name="arvores_tombadas")
    op.drop_table("arvores_tombadas")
    op.drop_index("idx_plant_comments_plant_created", table_name="plant_comments")
    op.drop_table("plant_comments")
    op.drop_table("plantas")
    op.drop_table("users")
