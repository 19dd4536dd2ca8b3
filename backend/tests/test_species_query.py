"""
Arboriza Backend - Species Query Builder Unit Tests
====================================================

What:  Tests for SpeciesQueryBuilder statement assembly (no database).

What we test:
    ✅ Only supplied filters produce predicates
    ✅ Placeholders numbered p1..pn, continuing into the census branch
    ✅ familia never reaches the census branch
    ✅ Caller values never appear in the SQL text
"""

from arboriza.queries.species import SpeciesQueryBuilder


def _sql(stmt) -> str:
    return str(stmt.compile())


def _branches(sql: str):
    tombada, censo = sql.split("UNION ALL")
    return tombada, censo


class TestSpeciesQueryBuilderParams:

    def test_no_filters_binds_nothing(self):
        builder = SpeciesQueryBuilder()
        sql = _sql(builder.build())

        assert builder.params == {}
        tombada, censo = _branches(sql)
        assert "WHERE" not in tombada
        assert "censo_arboreo.nome_cientifico IS NOT NULL" in censo

    def test_all_filters_numbered_in_order(self):
        builder = SpeciesQueryBuilder(search="ficus", familia="Moraceae", rpa=3)
        builder.build()

        assert builder.params == {
            "p1": "%ficus%",
            "p2": "Moraceae",
            "p3": 3,
            "p4": "%ficus%",
            "p5": 3,
        }

    def test_census_branch_continues_numbering(self):
        builder = SpeciesQueryBuilder(search="ipe", rpa=6)
        tombada, censo = _branches(_sql(builder.build()))

        assert ":p1" in tombada and ":p2" in tombada
        assert ":p3" in censo and ":p4" in censo
        assert ":p1" not in censo

    def test_familia_only_filters_first_branch(self):
        builder = SpeciesQueryBuilder(familia="Fabaceae")
        tombada, censo = _branches(_sql(builder.build()))

        assert builder.params == {"p1": "Fabaceae"}
        assert "arvores_tombadas.familia = :p1" in tombada
        assert ":p" not in censo

    def test_search_placeholder_shared_by_both_name_columns(self):
        builder = SpeciesQueryBuilder(search="pau")
        tombada, _ = _branches(_sql(builder.build()))

        assert tombada.count(":p1") == 2
        assert "nome_popular" in tombada and "nome_cientifico" in tombada

    def test_rpa_zero_is_a_filter(self):
        builder = SpeciesQueryBuilder(rpa=0)
        builder.build()

        assert builder.params == {"p1": 0, "p2": 0}

    def test_empty_strings_are_not_filters(self):
        builder = SpeciesQueryBuilder(search="", familia="")
        builder.build()

        assert builder.params == {}

    def test_build_twice_resets_params(self):
        builder = SpeciesQueryBuilder(search="ipe")
        builder.build()
        builder.build()

        assert list(builder.params) == ["p1", "p2"]


class TestSpeciesQueryBuilderShape:

    def test_values_never_inlined(self):
        hostile = "x' OR '1'='1"
        builder = SpeciesQueryBuilder(search=hostile, familia=hostile)
        sql = _sql(builder.build())

        assert hostile not in sql
        assert "'1'='1" not in sql

    def test_tags_and_column_mapping(self):
        sql = _sql(SpeciesQueryBuilder().build())
        tombada, censo = _branches(sql)

        assert "'arvore_tombada' AS tipo" in tombada
        assert "'censo' AS tipo" in censo
        assert "censo_arboreo.y_wgs84 AS latitude" in censo
        assert "censo_arboreo.x_wgs84 AS longitude" in censo
        assert "ORDER BY nome_popular" in censo
