"""
Arboriza Backend - ORM Models
==============================

Importing this package registers every table with `Base.metadata`, which
Alembic autogenerate and `Database.create_all()` rely on.
"""

from arboriza.models.forum import Message, Room, RoomMember
from arboriza.models.plant import Plant, PlantComment
from arboriza.models.species import ArvoreTombada, CensoArboreo
from arboriza.models.user import User

__all__ = [
    "ArvoreTombada",
    "CensoArboreo",
    "Message",
    "Plant",
    "PlantComment",
    "Room",
    "RoomMember",
    "User",
]
