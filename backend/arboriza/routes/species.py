"""
Arboriza Backend - Species Catalogue Route Handlers
====================================================

What:  GET /api/especies (filtered union of both tree datasets) and
       GET /api/filtros (dropdown values for those filters).
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from arboriza.database import Database, get_database, get_db_session
from arboriza.schemas.common import ErrorResponse
from arboriza.schemas.species import FiltersResponse, SpeciesRecord
from arboriza.services.species_service import species_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Species"])


@router.get(
    "/especies",
    response_model=List[SpeciesRecord],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Search the species catalogue",
    description=(
        "Heritage trees and census trees in one list, tagged by `tipo` and "
        "ordered by popular name. An empty list means nothing matched."
    ),
)
async def search_species(
    search: Optional[str] = Query(default=None, description="Substring of either name, case-insensitive"),
    familia: Optional[str] = Query(default=None, description="Exact botanical family (heritage trees only)"),
    rpa: Optional[int] = Query(default=None, description="Exact administrative region number"),
    db: AsyncSession = Depends(get_db_session),
) -> List[SpeciesRecord]:
    return await species_service.search(db, search=search, familia=familia, rpa=rpa)


@router.get(
    "/filtros",
    response_model=FiltersResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Filter values for the species search",
)
async def get_filters(database: Database = Depends(get_database)) -> FiltersResponse:
    return await species_service.filters(database)
