from typing import List, Optional, Union

from pydantic import BaseModel, Field, model_validator

from vedic_engine.domain.kundali.errors import ConfigurationError


# ─────────────────────────────────────────────
# Inputs
# ─────────────────────────────────────────────

class MoonDetails(BaseModel):
    """
    The only chart facts Ashtakoot matching looks at.

    ``moon_sign`` may be a sign id (1..12) or a sign name.
    """
    moon_sign: Union[int, str]
    moon_nakshatra: str


# ─────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────

class KootaResult(BaseModel):
    """
    Score of a single Ashtakoot factor.
    """
    name: str
    obtained: int = Field(ge=0)
    maximum: int = Field(ge=1, le=8)
    status: str
    description: Optional[str] = None
    value_a: Optional[str] = None
    value_b: Optional[str] = None

    @model_validator(mode="after")
    def _within_maximum(self) -> "KootaResult":
        if self.obtained > self.maximum:
            raise ConfigurationError(
                f"{self.name}: obtained {self.obtained} exceeds maximum {self.maximum}"
            )
        return self


class CompatibilityScore(BaseModel):
    """
    Complete Guna Milan result (36 points).

    ``resolved`` is False when either partner's Moon sign or nakshatra
    could not be matched and defaults were used.
    """
    kootas: List[KootaResult]
    total_obtained: int = Field(ge=0, le=36)
    maximum_total: int = 36
    percentage: float
    rating: str
    recommended: bool
    resolved: bool = True

    @model_validator(mode="after")
    def _total_matches(self) -> "CompatibilityScore":
        if len(self.kootas) != 8:
            raise ConfigurationError(f"Expected 8 kootas, got {len(self.kootas)}")
        if self.total_obtained != sum(k.obtained for k in self.kootas):
            raise ConfigurationError("total_obtained must equal the sum of koota scores")
        return self

    def koota(self, name: str) -> KootaResult:
        for k in self.kootas:
            if k.name == name:
                return k
        raise KeyError(name)
