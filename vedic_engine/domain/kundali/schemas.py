from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vedic_engine.domain.kundali.constants import PLANETS, SIGNS
from vedic_engine.domain.kundali.errors import ConfigurationError


# Numerical slack when comparing derived longitudes
ANTIPODE_TOLERANCE = 1e-6


# ─────────────────────────────────────────────
# Birth Input
# ─────────────────────────────────────────────

class BirthInput(BaseModel):
    """
    Immutable birth / query parameters at the engine boundary.
    """
    model_config = ConfigDict(frozen=True)

    date: date
    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    timezone_offset_hours: float = Field(ge=-14.0, le=14.0)

    def local_datetime(self) -> datetime:
        parts = [int(p) for p in self.time.split(":")]
        return datetime.combine(self.date, time(*parts))

    def utc_datetime(self) -> datetime:
        """
        Birth instant as an aware UTC datetime.
        """
        offset = timezone(timedelta(hours=self.timezone_offset_hours))
        return self.local_datetime().replace(tzinfo=offset).astimezone(timezone.utc)


# ─────────────────────────────────────────────
# Core Atomic Schemas
# ─────────────────────────────────────────────

class SignPlacement(BaseModel):
    """
    Sign, degree-in-sign and house of a longitude relative to a reference sign.
    """
    longitude: float = Field(ge=0.0, lt=360.0)
    sign: int = Field(ge=1, le=12)
    sign_name: str
    degree_in_sign: float = Field(ge=0.0, lt=30.0)
    house: int = Field(ge=1, le=12)


class PlanetPosition(BaseModel):
    """
    Represents a single planet's position in a chart.

    ``house`` is always counted from some reference sign (ascendant,
    natal Moon or an arbitrary rashi).
    """
    planet: str
    longitude: float = Field(ge=0.0, lt=360.0)
    sign: int = Field(ge=1, le=12)
    degree_in_sign: float = Field(ge=0.0, lt=30.0)
    house: int = Field(ge=1, le=12)
    nakshatra: Optional[int] = Field(default=None, ge=1, le=27)
    retrograde: bool = False

    @model_validator(mode="after")
    def _sign_matches_longitude(self) -> "PlanetPosition":
        expected = int(self.longitude // 30) + 1
        if self.sign != expected:
            raise ConfigurationError(
                f"{self.planet}: sign {self.sign} does not match longitude "
                f"{self.longitude} (expected {expected})"
            )
        return self

    @property
    def sign_name(self) -> str:
        return SIGNS[self.sign - 1]


class BirthChart(BaseModel):
    """
    Natal chart: ascendant plus one position per classical planet.
    """
    ascendant_sign: int = Field(ge=1, le=12)
    ascendant_longitude: Optional[float] = Field(default=None, ge=0.0, lt=360.0)
    positions: List[PlanetPosition]

    @model_validator(mode="after")
    def _check_planets(self) -> "BirthChart":
        names = [p.planet for p in self.positions]
        if sorted(names) != sorted(PLANETS):
            raise ConfigurationError(
                f"Chart must contain exactly one entry per planet {PLANETS}, got {names}"
            )

        rahu = self.position("Rahu")
        ketu = self.position("Ketu")
        gap = (ketu.longitude - rahu.longitude) % 360.0
        if abs(gap - 180.0) > ANTIPODE_TOLERANCE:
            raise ConfigurationError(
                f"Rahu ({rahu.longitude}) and Ketu ({ketu.longitude}) are not 180° apart"
            )
        if rahu.retrograde != ketu.retrograde:
            raise ConfigurationError("Ketu retrograde flag must mirror Rahu")
        return self

    def position(self, planet: str) -> PlanetPosition:
        for p in self.positions:
            if p.planet == planet:
                return p
        raise ConfigurationError(f"Planet {planet} missing from chart")

    @property
    def moon(self) -> PlanetPosition:
        return self.position("Moon")

    def by_planet(self) -> Dict[str, PlanetPosition]:
        return {p.planet: p for p in self.positions}


# ─────────────────────────────────────────────
# Derived Schemas
# ─────────────────────────────────────────────

class NakshatraProfile(BaseModel):
    """
    Classification of a nakshatra across the Ashtakoot axes.

    ``resolved`` is False when the input name matched no nakshatra and
    the documented defaults were substituted.
    """
    query: str
    name: Optional[str] = None
    index: Optional[int] = Field(default=None, ge=1, le=27)
    gana: str
    yoni: Optional[str] = None
    nadi: str
    dasha_lord: str
    resolved: bool = True


class NakshatraPada(BaseModel):
    name: str
    index: int = Field(ge=1, le=27)
    pada: int = Field(ge=1, le=4)


class SpecialPoint(BaseModel):
    """
    Derived sensitive chart point (Bhrigu Bindu, Gulika, Mandi).
    """
    name: str
    longitude: float = Field(ge=0.0, lt=360.0)
    sign: int = Field(ge=1, le=12)
    sign_name: str
    degree_in_sign: float = Field(ge=0.0, lt=30.0)
    house: int = Field(ge=1, le=12)
