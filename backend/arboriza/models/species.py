"""
Arboriza Backend - Species Source Datasets
===========================================

What:  ORM models for the two municipal tree datasets the species catalogue
       is built from. Both tables are loaded by the data import and only read
       by this service.

    arvores_tombadas  Trees under heritage protection ("tombadas"). Carries
                      the botanical family but no measurements.
    censo_arboreo     The urban tree census. Coordinates are stored as
                      WGS84 x/y, carries height (altura) and trunk diameter
                      at breast height (dap) but no family.

    Both carry `rpa`, the number of the city's administrative region.
"""

from typing import Optional

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from arboriza.database import Base


class ArvoreTombada(Base):
    __tablename__ = "arvores_tombadas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nome_cientifico: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    nome_popular: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    familia: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rpa: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<ArvoreTombada(id={self.id}, nome_cientifico='{self.nome_cientifico}')>"


class CensoArboreo(Base):
    __tablename__ = "censo_arboreo"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nome_cientifico: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    nome_popular: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # y is latitude, x is longitude
    y_wgs84: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    x_wgs84: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    altura: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    dap: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rpa: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<CensoArboreo(id={self.id}, nome_cientifico='{self.nome_cientifico}')>"
