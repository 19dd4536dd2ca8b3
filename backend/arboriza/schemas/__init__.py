# Schemas package init
"""
Arboriza Backend - Pydantic Request/Response Schemas
=====================================================

What:  The API contract, kept separate from the SQLAlchemy models.

Request bodies declare every field Optional: presence checks belong to the
services so that a missing field is reported as a 400 validation_error with
the API's own message instead of FastAPI's generic 422.
"""
