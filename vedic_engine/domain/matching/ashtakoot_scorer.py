"""
Ashtakoot (Guna Milan) compatibility scoring.

Calculates the 8-factor, 36-point score from each partner's Moon sign
and Moon nakshatra.
"""

import logging
import math
from typing import List, Optional, Tuple

from vedic_engine.config import settings
from vedic_engine.domain.kundali.constants import NAKSHATRAS, SIGNS, SIGN_LORDS
from vedic_engine.domain.kundali.nakshatra_resolver import NakshatraResolver
from vedic_engine.domain.kundali.schemas import BirthChart, NakshatraProfile
from vedic_engine.domain.kundali.sign_house_mapper import SignHouseMapper
from vedic_engine.domain.matching.schemas import (
    CompatibilityScore,
    KootaResult,
    MoonDetails,
)


logger = logging.getLogger(__name__)


class AshtakootScorer:
    """
    Scores two charts across the eight Ashtakoot factors.
    """

    # ─────────────────────────────────────────────
    # Constants / Lookup Tables
    # ─────────────────────────────────────────────

    MAXIMUMS = (
        ("Varna", 1), ("Vashya", 2), ("Tara", 3), ("Yoni", 4),
        ("Graha Maitri", 5), ("Gana", 6), ("Bhakoot", 7), ("Nadi", 8),
    )

    # Sign quartiles: ceil(sign / 3)
    VARNA_NAMES = ("Brahmin", "Kshatriya", "Vaishya", "Shudra")

    ELEMENT_GROUPS = (
        ("Fire", frozenset({1, 5, 9})),
        ("Earth", frozenset({2, 6, 10})),
        ("Air", frozenset({3, 7, 11})),
        ("Water", frozenset({4, 8, 12})),
    )

    # Janma, Sampat, Vipat, Kshema, Pratyak, Sadhak, Vadha, Mitra, Ati-Mitra
    TARA_POINTS = (0, 3, 0, 3, 0, 3, 0, 3, 3)

    YONI_FRIENDLY = (
        frozenset({"Horse", "Elephant"}),
        frozenset({"Cat", "Monkey"}),
        frozenset({"Rat", "Cow"}),
        frozenset({"Tiger", "Lion"}),
        frozenset({"Dog", "Mongoose"}),
    )

    GANA_SCORES = {
        frozenset({"Deva", "Manushya"}): 5,
        frozenset({"Rakshasa", "Manushya"}): 3,
        frozenset({"Deva", "Rakshasa"}): 0,
    }

    BHAKOOT_GOOD = frozenset({1, 2, 4, 5, 7, 8, 10, 11})
    BHAKOOT_BAD = frozenset({3, 6, 9, 12})

    def __init__(
        self,
        resolver: NakshatraResolver | None = None,
        mapper: SignHouseMapper | None = None,
    ):
        self.resolver = resolver or NakshatraResolver()
        self.mapper = mapper or SignHouseMapper()

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def score(self, a: MoonDetails, b: MoonDetails) -> CompatibilityScore:
        """
        Calculate the Ashtakoot score for two partners.
        """
        sign_a, sign_a_ok = self._resolve_sign(a.moon_sign)
        sign_b, sign_b_ok = self._resolve_sign(b.moon_sign)
        nak_a = self.resolver.resolve(a.moon_nakshatra)
        nak_b = self.resolver.resolve(b.moon_nakshatra)

        kootas: List[KootaResult] = []

        # 1. Varna (1 point)
        varna_a = self.VARNA_NAMES[math.ceil(sign_a / 3) - 1]
        varna_b = self.VARNA_NAMES[math.ceil(sign_b / 3) - 1]
        kootas.append(self._result(
            "Varna", self._calc_varna(sign_a, sign_b),
            "Spiritual/ego compatibility based on Moon signs", varna_a, varna_b,
        ))

        # 2. Vashya (2 points)
        kootas.append(self._result(
            "Vashya", self._calc_vashya(sign_a, sign_b),
            "Mutual attraction and control between partners",
            self._element(sign_a), self._element(sign_b),
        ))

        # 3. Tara (3 points)
        kootas.append(self._result(
            "Tara", self._calc_tara(nak_a, nak_b),
            "Health and longevity of the bond (nakshatra distance)",
            nak_a.name, nak_b.name,
        ))

        # 4. Yoni (4 points)
        kootas.append(self._result(
            "Yoni", self._calc_yoni(nak_a.yoni, nak_b.yoni),
            "Intimacy and temperament compatibility", nak_a.yoni, nak_b.yoni,
        ))

        # 5. Graha Maitri (5 points)
        kootas.append(self._result(
            "Graha Maitri", self._calc_graha_maitri(sign_a, sign_b),
            "Mental friendship via Moon sign lords",
            SIGN_LORDS[SIGNS[sign_a - 1]], SIGN_LORDS[SIGNS[sign_b - 1]],
        ))

        # 6. Gana (6 points)
        kootas.append(self._result(
            "Gana", self._calc_gana(nak_a.gana, nak_b.gana),
            "Temperament (Deva, Manushya, Rakshasa)", nak_a.gana, nak_b.gana,
        ))

        # 7. Bhakoot (7 points)
        kootas.append(self._result(
            "Bhakoot", self._calc_bhakoot(sign_a, sign_b),
            "Emotional harmony and prosperity", SIGNS[sign_a - 1], SIGNS[sign_b - 1],
        ))

        # 8. Nadi (8 points)
        kootas.append(self._result(
            "Nadi", self._calc_nadi(nak_a.nadi, nak_b.nadi),
            "Health and progeny (same Nadi is a dosha)", nak_a.nadi, nak_b.nadi,
        ))

        total = sum(k.obtained for k in kootas)
        resolved = all((sign_a_ok, sign_b_ok, nak_a.resolved, nak_b.resolved))
        logger.debug(f"Ashtakoot total {total}/36 (resolved={resolved})")

        return CompatibilityScore(
            kootas=kootas,
            total_obtained=total,
            percentage=round(total / 36 * 100, 1),
            rating=self.rating(total),
            recommended=total >= settings.MATCH_RECOMMENDED_THRESHOLD,
            resolved=resolved,
        )

    def score_charts(self, chart_a: BirthChart, chart_b: BirthChart) -> CompatibilityScore:
        """
        Score two natal charts using their Moon placements only.
        """
        return self.score(self._moon_details(chart_a), self._moon_details(chart_b))

    @staticmethod
    def rating(total: int) -> str:
        if total >= 33:
            return "Excellent"
        if total >= 25:
            return "Good"
        if total >= 18:
            return "Acceptable"
        return "Poor"

    # ─────────────────────────────────────────────
    # Per-Factor Calculations
    # ─────────────────────────────────────────────

    def _calc_varna(self, sign_a: int, sign_b: int) -> int:
        return 1 if math.ceil(sign_a / 3) == math.ceil(sign_b / 3) else 0

    def _calc_vashya(self, sign_a: int, sign_b: int) -> int:
        if sign_a == sign_b or self._same_element(sign_a, sign_b):
            return 2
        return 0

    def _calc_tara(self, nak_a: NakshatraProfile, nak_b: NakshatraProfile) -> int:
        if nak_a.index is None or nak_b.index is None:
            return 0
        distance = abs(nak_a.index - nak_b.index) % 9
        return self.TARA_POINTS[distance]

    def _calc_yoni(self, yoni_a: Optional[str], yoni_b: Optional[str]) -> int:
        if yoni_a is None or yoni_b is None:
            return 0
        if yoni_a == yoni_b:
            return 4
        if frozenset({yoni_a, yoni_b}) in self.YONI_FRIENDLY:
            return 2
        return 0

    def _calc_graha_maitri(self, sign_a: int, sign_b: int) -> int:
        """
        Element-group stand-in for planetary friendship of the sign lords.
        """
        if sign_a == sign_b or self._same_element(sign_a, sign_b):
            return 5
        return 3

    def _calc_gana(self, gana_a: str, gana_b: str) -> int:
        if gana_a == gana_b:
            return 6
        return self.GANA_SCORES.get(frozenset({gana_a, gana_b}), 0)

    def _calc_bhakoot(self, sign_a: int, sign_b: int) -> int:
        if sign_a == sign_b:
            return 7
        distance = abs(sign_a - sign_b)
        if distance in self.BHAKOOT_GOOD:
            return 7
        if distance in self.BHAKOOT_BAD:
            return 0
        return 3

    def _calc_nadi(self, nadi_a: str, nadi_b: str) -> int:
        # Same Nadi is the Nadi dosha
        return 0 if nadi_a == nadi_b else 8

    # ─────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────

    def _result(
        self,
        name: str,
        obtained: int,
        description: str,
        value_a: Optional[str],
        value_b: Optional[str],
    ) -> KootaResult:
        maximum = dict(self.MAXIMUMS)[name]
        if obtained == maximum:
            status = "Excellent"
        elif obtained > 0:
            status = "Good"
        else:
            status = "Poor"
        return KootaResult(
            name=name,
            obtained=obtained,
            maximum=maximum,
            status=status,
            description=description,
            value_a=value_a,
            value_b=value_b,
        )

    def _resolve_sign(self, sign) -> Tuple[int, bool]:
        if isinstance(sign, int):
            if 1 <= sign <= 12:
                return sign, True
            logger.warning(f"Moon sign id {sign} out of range; defaulting to Aries")
            return 1, False
        return self.mapper.resolve_sign(sign)

    def _same_element(self, sign_a: int, sign_b: int) -> bool:
        return any(
            sign_a in group and sign_b in group
            for _, group in self.ELEMENT_GROUPS
        )

    def _element(self, sign: int) -> str:
        for name, group in self.ELEMENT_GROUPS:
            if sign in group:
                return name
        return ""

    def _moon_details(self, chart: BirthChart) -> MoonDetails:
        moon = chart.moon
        if moon.nakshatra is not None:
            nakshatra = NAKSHATRAS[moon.nakshatra - 1]
        else:
            nakshatra = self.resolver.from_longitude(moon.longitude).name
        return MoonDetails(moon_sign=moon.sign, moon_nakshatra=nakshatra)
