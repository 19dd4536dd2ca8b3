"""
Arboriza Backend - Species Catalogue Schemas
=============================================
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class SpeciesRecord(BaseModel):
    """
    One row of the species union.

    tipo='arvore_tombada' rows have familia and no altura/dap;
    tipo='censo' rows have altura/dap and no familia.
    """
    tipo: str = Field(description="Source dataset: arvore_tombada or censo")
    id: int
    nome_cientifico: Optional[str] = None
    nome_popular: Optional[str] = None
    familia: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altura: Optional[float] = Field(default=None, description="Height in metres")
    dap: Optional[float] = Field(default=None, description="Diameter at breast height")
    rpa: Optional[int] = Field(default=None, description="Administrative region number")

    model_config = {"from_attributes": True}


class FiltersResponse(BaseModel):
    """Values the client offers in its filter dropdowns."""
    familias: List[str]
    rpas: List[int]
