import logging
from datetime import datetime
from typing import Dict, Optional, Sequence

from pydantic import BaseModel

from vedic_engine.domain.dasha.schemas import CurrentDasha
from vedic_engine.domain.dasha.timeline import DashaTimeline
from vedic_engine.domain.kundali.constants import NAKSHATRAS
from vedic_engine.domain.kundali.nakshatra_resolver import NakshatraResolver
from vedic_engine.domain.kundali.schemas import (
    BirthChart,
    BirthInput,
    NakshatraProfile,
    SpecialPoint,
)
from vedic_engine.domain.kundali.sources import PlanetPositionSource, SwissEphemerisSource
from vedic_engine.domain.kundali.special_points import SpecialPointCalculator
from vedic_engine.domain.transits.sade_sati import SadeSatiCycleResolver
from vedic_engine.domain.transits.schemas import SadeSatiStatus


logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
# Report Schema
# ─────────────────────────────────────────────

class ChartReport(BaseModel):
    """
    Natal chart plus the values derived from it.
    """
    birth: BirthInput
    chart: BirthChart
    approximate: bool
    source: str
    moon_nakshatra: NakshatraProfile
    dasha: CurrentDasha
    special_points: Dict[str, SpecialPoint]
    sade_sati: SadeSatiStatus


class KundaliEngine:
    """
    Orchestrates kundali calculation.

    This class:
    - Accepts birth inputs
    - Delegates positions to a PlanetPositionSource
    - Derives nakshatra, dasha, special points and Sade Sati
    """

    def __init__(
        self,
        source: PlanetPositionSource | None = None,
        resolver: NakshatraResolver | None = None,
        dasha: DashaTimeline | None = None,
        special_points: SpecialPointCalculator | None = None,
        sade_sati: SadeSatiCycleResolver | None = None,
    ):
        self.source = source or SwissEphemerisSource()
        self.resolver = resolver or NakshatraResolver()
        self.dasha = dasha or DashaTimeline(self.resolver)
        self.special_points = special_points or SpecialPointCalculator()
        self.sade_sati = sade_sati or SadeSatiCycleResolver()

    def generate(self, birth: BirthInput) -> BirthChart:
        """
        Generate the core D1 chart.
        """
        chart = self.source.fetch_chart(birth)
        logger.info(
            f"Generated chart for {birth.date} {birth.time} via {self.source.name} "
            f"(ascendant sign {chart.ascendant_sign})"
        )
        return chart

    def report(
        self,
        birth: BirthInput,
        now: Optional[datetime] = None,
        cusps: Optional[Sequence[float]] = None,
        gulika: Optional[float] = None,
        mandi: Optional[float] = None,
    ) -> ChartReport:
        """
        Generate the chart and everything derived from it as of ``now``.
        """
        chart = self.generate(birth)
        return self.derive(birth, chart, self.source, now, cusps, gulika, mandi)

    def derive(
        self,
        birth: BirthInput,
        chart: BirthChart,
        source: PlanetPositionSource | None = None,
        now: Optional[datetime] = None,
        cusps: Optional[Sequence[float]] = None,
        gulika: Optional[float] = None,
        mandi: Optional[float] = None,
    ) -> ChartReport:
        """
        Derived values for an already built chart.

        ``now`` must be timezone-aware; it defaults to the current UTC time.
        """
        source = source or self.source
        moon = chart.moon
        if moon.nakshatra is not None:
            moon_nakshatra = self.resolver.profile(moon.nakshatra)
        else:
            moon_nakshatra = self.resolver.profile(
                self.resolver.from_longitude(moon.longitude).index
            )

        dasha = self.dasha.current_dasha(
            NAKSHATRAS[moon_nakshatra.index - 1],
            birth.utc_datetime(),
            now,
        )

        return ChartReport(
            birth=birth,
            chart=chart,
            approximate=source.approximate,
            source=source.name,
            moon_nakshatra=moon_nakshatra,
            dasha=dasha,
            special_points=self.special_points.calculate(chart, cusps, gulika, mandi),
            sade_sati=self.sade_sati.status(moon.sign, now),
        )
