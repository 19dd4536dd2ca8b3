"""
Arboriza Backend - Species Catalogue Service
=============================================

What:  Read-only access to the species datasets: the filtered species search
       and the values for the client's filter dropdowns.
How:   search() runs the statement built by SpeciesQueryBuilder on the
       request's session. filters() runs its two lookups concurrently, each on
       its own session from the application's Database, since one
       AsyncSession cannot run two statements at once. When one lookup
       fails the other is cancelled and awaited before the error is raised.
"""

import asyncio
import logging
from typing import List, Optional

from sqlalchemy import select, union
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from arboriza.database import Database
from arboriza.exceptions import StoreError
from arboriza.models.species import ArvoreTombada, CensoArboreo
from arboriza.queries.species import SpeciesQueryBuilder
from arboriza.schemas.species import FiltersResponse, SpeciesRecord

logger = logging.getLogger(__name__)


class SpeciesService:

    async def search(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        familia: Optional[str] = None,
        rpa: Optional[int] = None,
    ) -> List[SpeciesRecord]:
        """Union of both datasets matching the supplied filters; [] when nothing matches."""
        builder = SpeciesQueryBuilder(search=search, familia=familia, rpa=rpa)
        stmt = builder.build()
        logger.debug("Species search with params %s", builder.params)

        try:
            result = await db.execute(stmt)
            rows = result.mappings().all()
        except SQLAlchemyError as e:
            logger.error("Error searching species: %s", str(e), exc_info=True)
            raise StoreError(message="Internal server error")

        return [SpeciesRecord.model_validate(dict(row)) for row in rows]

    async def filters(self, database: Database) -> FiltersResponse:
        """
        Distinct families (heritage trees only) and distinct region numbers
        (both datasets), rpas sorted ascending. Either lookup failing fails
        the whole call.
        """
        familias_query = (
            select(ArvoreTombada.familia)
            .where(ArvoreTombada.familia.is_not(None))
            .distinct()
            .order_by(ArvoreTombada.familia)
        )
        rpas_query = union(
            select(ArvoreTombada.rpa).where(ArvoreTombada.rpa.is_not(None)).distinct(),
            select(CensoArboreo.rpa).where(CensoArboreo.rpa.is_not(None)).distinct(),
        )

        lookups = [
            asyncio.ensure_future(self._fetch_column(database, familias_query)),
            asyncio.ensure_future(self._fetch_column(database, rpas_query)),
        ]
        try:
            familias, rpas = await asyncio.gather(*lookups)
        except SQLAlchemyError as e:
            logger.error("Error fetching filters: %s", str(e), exc_info=True)
            raise StoreError(message="Internal server error")
        finally:
            await self._settle(lookups)

        return FiltersResponse(
            familias=list(familias),
            rpas=sorted(int(rpa) for rpa in rpas),
        )

    @staticmethod
    async def _settle(lookups: List[asyncio.Future]) -> None:
        """Cancel lookups still running and collect every outcome, failures included."""
        for lookup in lookups:
            if not lookup.done():
                lookup.cancel()
        outcomes = await asyncio.gather(*lookups, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, Exception):
                logger.debug("Filter lookup ended with %r", outcome)

    @staticmethod
    async def _fetch_column(database: Database, query) -> List:
        async with database.session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())


species_service = SpeciesService()
