"""
Arboriza Backend - Application Package
=======================================

REST backend for the urban tree inventory: plant registration with
geolocation, the species catalogue built from the heritage-tree and census
datasets, plant comments, login, and a community chat forum.

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services & Query Builders         │  ← validation, statements
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async engine & sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
