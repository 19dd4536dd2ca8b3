"""
Arboriza Backend - Plant Service
=================================

What:  Listing and registering user plants (`plantas`).
Who:   Called by routes/plants.py.

Validation (before any store access):
    - at least one of nome_cientifico / nome_popular
    - both latitude and longitude present (0.0 is a valid coordinate)

Store failures on insert are reported with the driver's own message under
`details` so the field-survey client can show constraint violations as-is.
"""

import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from arboriza.exceptions import StoreError, ValidationError
from arboriza.models.plant import Plant
from arboriza.schemas.plant import PlantCreate, PlantListItem, PlantResponse

logger = logging.getLogger(__name__)


class PlantService:

    async def list_plants(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
    ) -> List[PlantListItem]:
        """
        All plants, optionally filtered by a case-insensitive substring of
        either name, ordered by scientific name.
        """
        query = select(Plant)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(Plant.nome_popular.ilike(pattern), Plant.nome_cientifico.ilike(pattern))
            )
        query = query.order_by(Plant.nome_cientifico)

        try:
            result = await db.execute(query)
            plants = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Error listing plants: %s", str(e), exc_info=True)
            raise StoreError(message="Internal server error")

        return [PlantListItem.model_validate(plant) for plant in plants]

    async def create_plant(self, db: AsyncSession, data: PlantCreate) -> PlantResponse:
        """
        Register a plant and return the stored row.

        Raises:
            ValidationError: no name, or a coordinate missing (→ 400)
            StoreError:      insert failed; raw driver message exposed (→ 500)
        """
        if not data.nome_cientifico and not data.nome_popular:
            raise ValidationError(
                message="At least the scientific or the popular name must be provided",
                context={"fields": ["nome_cientifico", "nome_popular"]},
            )
        if data.latitude is None or data.longitude is None:
            raise ValidationError(
                message="Geographic coordinates are required",
                context={"fields": ["latitude", "longitude"]},
            )

        # Empty strings are stored as NULL
        plant = Plant(
            nome_cientifico=data.nome_cientifico or None,
            nome_popular=data.nome_popular or None,
            detalhes=data.detalhes or None,
            data_plantio=data.data_plantio,
            fonte=data.fonte or None,
            usuario_id=data.usuario_id,
            latitude=data.latitude,
            longitude=data.longitude,
        )

        try:
            db.add(plant)
            await db.flush()
            await db.refresh(plant)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error registering plant: %s", str(e))
            raise StoreError.from_exception(
                e, message="Could not register plant", expose_detail=True
            )

        logger.info("Plant %s registered (usuario_id=%s)", plant.id, plant.usuario_id)
        return PlantResponse.model_validate(plant)


plant_service = PlantService()
