"""
Arboriza Backend - Plant Route Handlers
========================================

What:  Plant list/registration and per-plant comment threads.

Note the two prefixes: the list lives at /api/plantas (the map client's
original path) while registration and comments live under /api/plants.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from arboriza.database import get_db_session
from arboriza.schemas.common import ErrorResponse
from arboriza.schemas.plant import (
    CommentCreate,
    CommentResponse,
    PlantCreate,
    PlantCreateResponse,
    PlantListItem,
)
from arboriza.services.comment_service import comment_service
from arboriza.services.plant_service import plant_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Plants"])


@router.get(
    "/plantas",
    response_model=List[PlantListItem],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List registered plants",
)
async def list_plants(
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive substring of the popular or scientific name",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[PlantListItem]:
    return await plant_service.list_plants(db, search=search)


@router.post(
    "/plants",
    status_code=201,
    response_model=PlantCreateResponse,
    responses={
        400: {"description": "No name or missing coordinates", "model": ErrorResponse},
        500: {"description": "Store rejected the row (raw message in details)", "model": ErrorResponse},
    },
    summary="Register a plant",
)
async def create_plant(
    body: PlantCreate,
    db: AsyncSession = Depends(get_db_session),
) -> PlantCreateResponse:
    plant = await plant_service.create_plant(db, body)
    return PlantCreateResponse(plant=plant)


@router.get(
    "/plants/{plantId}/comments",
    response_model=List[CommentResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List a plant's comments, newest first",
)
async def list_comments(
    plantId: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[CommentResponse]:
    return await comment_service.list_comments(db, plant_id=plantId)


@router.post(
    "/plants/{plantId}/comments",
    status_code=201,
    response_model=CommentResponse,
    responses={
        400: {"description": "userId or text missing", "model": ErrorResponse},
        500: {"description": "Store rejected the row (raw message in details)", "model": ErrorResponse},
    },
    summary="Comment on a plant",
)
async def add_comment(
    plantId: int,
    body: CommentCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.add_comment(
        db, plant_id=plantId, user_id=body.userId, text=body.text
    )
