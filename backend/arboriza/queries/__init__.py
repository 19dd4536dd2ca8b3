# Queries package init
"""
Arboriza Backend - Query Builders
==================================

What:  Statement builders for queries whose shape depends on the request.
       The rest of the application expresses its statements inline in the
       services.

    - species.py: SpeciesQueryBuilder (GET /api/especies)
"""
