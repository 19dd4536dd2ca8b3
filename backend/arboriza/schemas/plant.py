"""
Arboriza Backend - Plant & Comment Schemas
===========================================

What:  Request and response models for plant registration, the plant list
       and plant comments.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class PlantCreate(BaseModel):
    """
    Body of POST /api/plants.

    At least one of nome_cientifico / nome_popular plus both coordinates are
    required; PlantService enforces this.
    """
    nome_cientifico: Optional[str] = None
    nome_popular: Optional[str] = None
    detalhes: Optional[str] = None
    data_plantio: Optional[date] = Field(default=None, description="Planting date (YYYY-MM-DD)")
    fonte: Optional[str] = Field(default=None, description="Source of the record")
    usuario_id: Optional[int] = Field(default=None, description="Registering user")
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class PlantResponse(BaseModel):
    """A stored plant row."""
    id: int
    nome_cientifico: Optional[str] = None
    nome_popular: Optional[str] = None
    detalhes: Optional[str] = None
    data_plantio: Optional[date] = None
    fonte: Optional[str] = None
    usuario_id: Optional[int] = None
    latitude: float
    longitude: float
    created_at: datetime

    model_config = {"from_attributes": True}


class PlantListItem(PlantResponse):
    """
    Row of GET /api/plantas.

    `tipo` and `count` are constants the map client expects because it
    renders plants and species clusters with the same component.
    """
    tipo: str = "planta"
    count: int = 1


class PlantCreateResponse(BaseModel):
    success: bool = True
    plant: PlantResponse
    message: str = "Plant registered successfully"


class CommentCreate(BaseModel):
    """Body of POST /api/plants/{plantId}/comments."""
    userId: Optional[int] = Field(default=None, description="Commenting user")
    text: Optional[str] = Field(default=None, description="Comment text")


class CommentResponse(BaseModel):
    """A comment row plus the commenter's username."""
    id: int
    plant_id: int
    user_id: int
    comment_text: str
    created_at: datetime
    author: Optional[str] = Field(default=None, description="Username of the commenter")

    model_config = {"from_attributes": True}
