import logging
from typing import Dict, List, Optional, Sequence

from vedic_engine.domain.kundali.schemas import BirthChart, SpecialPoint
from vedic_engine.domain.kundali.sign_house_mapper import SignHouseMapper, normalize


logger = logging.getLogger(__name__)


class SpecialPointCalculator:
    """
    Derives sensitive points (Bhrigu Bindu, Gulika, Mandi) from a chart.

    Houses come from explicit cusps when given, else from equal houses
    starting at the ascendant degree, else from whole signs counted from
    the ascendant sign.
    """

    def __init__(self, mapper: SignHouseMapper | None = None):
        self.mapper = mapper or SignHouseMapper()

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def calculate(
        self,
        chart: BirthChart,
        cusps: Optional[Sequence[float]] = None,
        gulika: Optional[float] = None,
        mandi: Optional[float] = None,
    ) -> Dict[str, SpecialPoint]:
        """
        All special points of a chart, keyed by name.

        ``gulika`` and ``mandi`` are longitudes from the upstream
        provider; a missing Mandi takes Gulika's longitude.
        """
        house_cusps = self._cusps(chart, cusps)

        planets = chart.by_planet()
        points: Dict[str, SpecialPoint] = {
            "Bhrigu Bindu": self.point(
                "Bhrigu Bindu",
                self.bhrigu_bindu(planets["Moon"].longitude, planets["Rahu"].longitude),
                chart.ascendant_sign,
                house_cusps,
            ),
        }

        for name, lon in self.gulika_mandi(gulika, mandi).items():
            points[name] = self.point(name, lon, chart.ascendant_sign, house_cusps)

        logger.debug(f"Special points: {', '.join(points)}")
        return points

    @staticmethod
    def bhrigu_bindu(moon_longitude: float, rahu_longitude: float) -> float:
        """
        Midpoint of the arc from Rahu forward (increasing longitude) to the Moon.
        """
        moon = normalize(moon_longitude)
        rahu = normalize(rahu_longitude)
        if moon < rahu:
            moon += 360.0
        return normalize((moon + rahu) / 2.0)

    @staticmethod
    def gulika_mandi(
        gulika: Optional[float],
        mandi: Optional[float] = None,
    ) -> Dict[str, float]:
        result: Dict[str, float] = {}
        if gulika is not None:
            result["Gulika"] = normalize(gulika)
            # Mandi is commonly reported with Gulika's position
            result["Mandi"] = normalize(mandi if mandi is not None else gulika)
        elif mandi is not None:
            result["Mandi"] = normalize(mandi)
        return result

    def point(
        self,
        name: str,
        longitude: float,
        reference_sign: int,
        cusps: Optional[List[float]] = None,
    ) -> SpecialPoint:
        placement = self.mapper.place(longitude, reference_sign, cusps)
        return SpecialPoint(
            name=name,
            longitude=placement.longitude,
            sign=placement.sign,
            sign_name=placement.sign_name,
            degree_in_sign=placement.degree_in_sign,
            house=placement.house,
        )

    # ─────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────

    def _cusps(
        self,
        chart: BirthChart,
        cusps: Optional[Sequence[float]],
    ) -> Optional[List[float]]:
        if cusps is not None:
            return self.mapper.normalize_cusps(cusps)
        if chart.ascendant_longitude is not None:
            return self.mapper.equal_house_cusps(chart.ascendant_longitude)
        return None
