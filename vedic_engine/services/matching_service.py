"""
Kundali Milan (Ashta Koot Matching) Service

Calculates compatibility score based on 8 factors (36 max points).
"""

import logging
from typing import Any, Dict, Mapping

from vedic_engine.domain.kundali.converters import raw_planets_to_chart
from vedic_engine.domain.kundali.engine import KundaliEngine
from vedic_engine.domain.kundali.schemas import BirthInput
from vedic_engine.domain.matching.ashtakoot_scorer import AshtakootScorer
from vedic_engine.domain.matching.schemas import CompatibilityScore, MoonDetails


logger = logging.getLogger(__name__)


class MatchingService:
    """
    Service to calculate Ashta Koot matching between two Kundalis.

    Accepts Moon details directly, two birth records (charts generated
    through the engine) or two raw provider payloads.
    """

    def __init__(
        self,
        scorer: AshtakootScorer | None = None,
        engine: KundaliEngine | None = None,
    ):
        self.scorer = scorer or AshtakootScorer()
        self._engine = engine

    @property
    def engine(self) -> KundaliEngine:
        # Built lazily so Moon-detail matching needs no ephemeris
        if self._engine is None:
            self._engine = KundaliEngine()
        return self._engine

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def match(self, a: MoonDetails, b: MoonDetails) -> CompatibilityScore:
        result = self.scorer.score(a, b)
        logger.info(
            f"Matched {a.moon_nakshatra}/{a.moon_sign} with "
            f"{b.moon_nakshatra}/{b.moon_sign}: {result.total_obtained}/36 ({result.rating})"
        )
        return result

    def match_births(self, birth_a: BirthInput, birth_b: BirthInput) -> CompatibilityScore:
        chart_a = self.engine.generate(birth_a)
        chart_b = self.engine.generate(birth_b)
        return self.scorer.score_charts(chart_a, chart_b)

    def match_payloads(
        self,
        payload_a: Mapping[str, Any],
        payload_b: Mapping[str, Any],
    ) -> CompatibilityScore:
        """
        Match two raw provider planet payloads.
        """
        return self.scorer.score_charts(
            raw_planets_to_chart(payload_a),
            raw_planets_to_chart(payload_b),
        )

    def summary(self, result: CompatibilityScore) -> Dict[str, Any]:
        """
        Plain-dict view of a score for presentation code.
        """
        return {
            "total_score": result.total_obtained,
            "max_score": result.maximum_total,
            "percentage": result.percentage,
            "rating": result.rating,
            "recommended": result.recommended,
            "resolved": result.resolved,
            "factors": [k.model_dump() for k in result.kootas],
        }
