from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class DashaPeriod(BaseModel):
    """
    A Mahadasha or Antardasha.

    ``start_offset_years`` is measured from the start of the enclosing
    cycle (Mahadasha) or enclosing Mahadasha (Antardasha).
    """
    planet: str
    start_offset_years: float = Field(ge=0.0)
    duration_years: float = Field(gt=0.0)
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    antardashas: List["DashaPeriod"] = Field(default_factory=list)


class CurrentDasha(BaseModel):
    """
    Planetary periods running at a given instant.
    """
    moon_nakshatra: str
    resolved: bool = True
    elapsed_years: float = Field(ge=0.0)
    mahadasha: str
    mahadasha_ends_at: datetime
    antardasha: str
    antardasha_ends_at: datetime
