"""
Arboriza Backend - Species Search Query Builder
================================================

What:  Builds the species-catalogue statement: the heritage-tree table and the
       tree census merged with UNION ALL into one tagged record shape.
How:   Each branch starts from a fixed SELECT, then accumulates a list of
       predicates for the filters the caller actually supplied. Every value
       goes through `_bind()`, which appends it to an ordered parameter map
       under the next positional name (p1, p2, ...). Predicates are joined with
       AND and attached to their branch.

Branches:
    arvores_tombadas   tipo='arvore_tombada', altura/dap padded with NULL
                       filters: search, familia, rpa (in that order)
    censo_arboreo      tipo='censo', familia padded with NULL,
                       y_wgs84/x_wgs84 exposed as latitude/longitude,
                       always requires nome_cientifico IS NOT NULL
                       filters: search, rpa (familia does not exist here)

    The predicate list is reset for the census branch while placeholder
    numbering continues, so search=ficus, familia=Moraceae, rpa=3 produces
    p1..p3 in the first branch and p4..p5 in the second.

Guarantee:
    Caller-supplied values only ever appear as bound parameters; the SQL text
    contains placeholders and the two constant tags.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import Float, String, and_, bindparam, cast, literal_column, null, or_, select, union_all
from sqlalchemy.sql.elements import BindParameter, ColumnElement
from sqlalchemy.sql.selectable import CompoundSelect, Select

from arboriza.models.species import ArvoreTombada, CensoArboreo

TIPO_TOMBADA = "arvore_tombada"
TIPO_CENSO = "censo"


class SpeciesQueryBuilder:
    """
    One-shot builder for a species search.

    Usage:
        builder = SpeciesQueryBuilder(search="ipê", rpa=3)
        stmt = builder.build()
        rows = (await db.execute(stmt)).mappings().all()

    `params` holds the bound values in placeholder order after `build()`.
    """

    def __init__(
        self,
        search: Optional[str] = None,
        familia: Optional[str] = None,
        rpa: Optional[int] = None,
    ):
        # Empty strings count as "not supplied"; rpa 0 is a real region number
        self.search = search or None
        self.familia = familia or None
        self.rpa = rpa
        self.params: Dict[str, Any] = {}

    def _bind(self, value: Any) -> BindParameter:
        """Register a value under the next positional placeholder name."""
        name = f"p{len(self.params) + 1}"
        self.params[name] = value
        return bindparam(name, value)

    def _search_condition(self, *columns) -> ColumnElement:
        """Case-insensitive substring match on any of the name columns, one shared placeholder."""
        pattern = self._bind(f"%{self.search}%")
        return or_(*(column.ilike(pattern) for column in columns))

    def _tombada_branch(self) -> Select:
        table = ArvoreTombada
        stmt = select(
            literal_column(f"'{TIPO_TOMBADA}'").label("tipo"),
            table.id,
            table.nome_cientifico,
            table.nome_popular,
            table.familia,
            table.latitude,
            table.longitude,
            cast(null(), Float).label("altura"),
            cast(null(), Float).label("dap"),
            table.rpa,
        )

        conditions: List[ColumnElement] = []
        if self.search:
            conditions.append(self._search_condition(table.nome_popular, table.nome_cientifico))
        if self.familia:
            conditions.append(table.familia == self._bind(self.familia))
        if self.rpa is not None:
            conditions.append(table.rpa == self._bind(self.rpa))

        if conditions:
            stmt = stmt.where(and_(*conditions))
        return stmt

    def _censo_branch(self) -> Select:
        table = CensoArboreo
        stmt = select(
            literal_column(f"'{TIPO_CENSO}'").label("tipo"),
            table.id,
            table.nome_cientifico,
            table.nome_popular,
            cast(null(), String).label("familia"),
            table.y_wgs84.label("latitude"),
            table.x_wgs84.label("longitude"),
            table.altura,
            table.dap,
            table.rpa,
        ).where(table.nome_cientifico.is_not(None))

        # Fresh predicate list; placeholder numbering carries on from branch one
        conditions: List[ColumnElement] = []
        if self.search:
            conditions.append(self._search_condition(table.nome_popular, table.nome_cientifico))
        if self.rpa is not None:
            conditions.append(table.rpa == self._bind(self.rpa))

        if conditions:
            stmt = stmt.where(and_(*conditions))
        return stmt

    def build(self) -> CompoundSelect:
        """Assemble the UNION ALL statement ordered by popular name."""
        self.params = {}
        return union_all(
            self._tombada_branch(),
            self._censo_branch(),
        ).order_by(literal_column("nome_popular"))
