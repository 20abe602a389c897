from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from vedic_engine.domain.kundali.schemas import PlanetPosition


# ─────────────────────────────────────────────
# Transit Schemas
# ─────────────────────────────────────────────

class TransitPlanet(BaseModel):
    """
    Represents a planet's transit position at a given time.
    """
    name: str
    longitude: float = Field(ge=0.0, lt=360.0)
    sign: int = Field(ge=1, le=12)
    sign_name: str
    degree: float = Field(ge=0.0, lt=30.0)
    house: int = Field(ge=1, le=12)
    nakshatra: str
    retrograde: bool = False

    def to_position(self) -> PlanetPosition:
        return PlanetPosition(
            planet=self.name,
            longitude=self.longitude,
            sign=self.sign,
            degree_in_sign=self.degree,
            house=self.house,
            retrograde=self.retrograde,
        )


class TransitChart(BaseModel):
    """
    Represents a full transit chart for a specific datetime.

    ``approximate`` is True for mean-motion results, False for positions
    taken from an ephemeris.
    """
    timestamp: str
    julian_day: float
    reference_sign: int = Field(ge=1, le=12)
    planets: Dict[str, TransitPlanet]
    approximate: bool
    source: str
    calculation_version: str


# ─────────────────────────────────────────────
# Gochar Schemas
# ─────────────────────────────────────────────

class GocharPlanet(BaseModel):
    """
    Represents a planet's gochar (relative position).
    """
    planet: str
    from_lagna_house: Optional[int] = None
    from_moon_house: Optional[int] = None
    retrograde: bool = False


class Gochar(BaseModel):
    """
    Represents gochar interpretation base data.
    """
    planets: Dict[str, GocharPlanet]
    approximate: bool
    calculation_version: str = Field(
        default="v1",
        description="Version of gochar calculation logic"
    )


# ─────────────────────────────────────────────
# Saturn / Sade Sati Schemas
# ─────────────────────────────────────────────

class SaturnTransitEntry(BaseModel):
    """
    One row of the Saturn transit table: Saturn occupies ``sign``
    from ``start`` (inclusive) to ``end`` (exclusive).
    """
    sign: int = Field(ge=1, le=12)
    start: date
    end: date


class SaturnSignResolution(BaseModel):
    sign: int = Field(ge=1, le=12)
    sign_name: str
    stale: bool = False
    table_version: str
    valid_through: date


class SadeSatiWindow(BaseModel):
    """
    Saturn's stay in one of the three Sade Sati signs.
    """
    moon_sign: int = Field(ge=1, le=12)
    phase: str
    sign: int = Field(ge=1, le=12)
    sign_name: str
    start: date
    end: date


class SadeSatiSpan(BaseModel):
    start: date
    end: date


class SadeSatiReport(BaseModel):
    """
    The three phase windows of the Sade Sati nearest the table, plus the
    spans one Saturn cycle before and after.
    """
    moon_sign: int = Field(ge=1, le=12)
    resolved: bool = True
    signs: List[int]
    phases: List[SadeSatiWindow]
    start: date
    end: date
    past: SadeSatiSpan
    future: SadeSatiSpan


class SadeSatiStatus(BaseModel):
    moon_sign: int = Field(ge=1, le=12)
    resolved: bool = True
    saturn: SaturnSignResolution
    in_sade_sati: bool
    label: str
    phase: Optional[str] = None
    dhaiya: Optional[str] = None
    description: str
