import logging
import math
from datetime import datetime
from types import MappingProxyType
from typing import Dict

from vedic_engine.config import settings
from vedic_engine.domain.kundali.constants import PLANETS
from vedic_engine.domain.kundali.nakshatra_resolver import NakshatraResolver
from vedic_engine.domain.kundali.sign_house_mapper import SignHouseMapper, normalize
from vedic_engine.domain.transits.schemas import TransitChart, TransitPlanet


logger = logging.getLogger(__name__)


# Longitudes at J2000.0 (2000-01-01 12:00 UT), degrees
BASE_POSITIONS = MappingProxyType({
    "Sun": 280.4665,
    "Moon": 218.3162,
    "Mars": 355.4333,
    "Mercury": 252.2509,
    "Jupiter": 34.3515,
    "Venus": 181.9798,
    "Saturn": 49.5581,
    "Rahu": 95.9967,
})

# Mean daily motion, degrees/day; the lunar node regresses
MEAN_DAILY_MOTION = MappingProxyType({
    "Sun": 0.9856,
    "Moon": 13.1764,
    "Mars": 0.5240,
    "Mercury": 4.0923,
    "Jupiter": 0.0831,
    "Venus": 1.6021,
    "Saturn": 0.0335,
    "Rahu": -0.0529,
})


def julian_day(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
    timezone_offset_hours: float = 0.0,
) -> float:
    """
    Julian Day of a proleptic Gregorian civil time at a UTC offset.
    """
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3

    jdn = (
        day + (153 * m + 2) // 5 + 365 * y
        + math.floor(y / 4) - math.floor(y / 100) + math.floor(y / 400)
        - 32045
    )

    hours = hour + minute / 60.0 + second / 3600.0 - timezone_offset_hours
    return jdn + hours / 24.0 - 0.5


class TransitApproximator:
    """
    Mean-motion planetary longitudes for when no ephemeris is reachable.

    longitude = base at J2000 + mean daily motion x days since J2000.
    Error grows with distance from the epoch (Mercury and Venus are off
    by tens of degrees within a few years); results are flagged
    ``approximate``.
    """

    calculation_version = "mean-motion-v1"
    source = "mean-motion"

    def __init__(
        self,
        mapper: SignHouseMapper | None = None,
        resolver: NakshatraResolver | None = None,
    ):
        self.mapper = mapper or SignHouseMapper()
        self.resolver = resolver or NakshatraResolver()

    def longitudes(self, jd: float) -> Dict[str, float]:
        """
        Approximate longitude of all nine planets at Julian Day ``jd``.
        """
        days = jd - settings.TRANSIT_EPOCH_JD
        result = {
            planet: normalize(BASE_POSITIONS[planet] + MEAN_DAILY_MOTION[planet] * days)
            for planet in BASE_POSITIONS
        }
        result["Ketu"] = normalize(result["Rahu"] + 180.0)
        return result

    def calculate(
        self,
        target: datetime,
        timezone_offset_hours: float = 0.0,
        reference_sign: int = 1,
    ) -> TransitChart:
        """
        Approximate transit chart for a civil date/time.

        An aware ``target`` supplies its own UTC offset; houses are
        counted from ``reference_sign``.
        """
        if target.tzinfo is not None:
            timezone_offset_hours = target.utcoffset().total_seconds() / 3600.0

        jd = julian_day(
            target.year, target.month, target.day,
            target.hour, target.minute, target.second + target.microsecond / 1e6,
            timezone_offset_hours,
        )
        logger.debug(f"Approximating transits for {target.isoformat()} (JD {jd:.5f})")

        longitudes = self.longitudes(jd)
        rahu_retrograde = MEAN_DAILY_MOTION["Rahu"] < 0

        planets: Dict[str, TransitPlanet] = {}
        for name in PLANETS:
            lon = longitudes[name]
            placement = self.mapper.map(lon, reference_sign)

            if name == "Moon":
                retrograde = False
            elif name in ("Rahu", "Ketu"):
                retrograde = rahu_retrograde
            else:
                retrograde = MEAN_DAILY_MOTION[name] < 0

            planets[name] = TransitPlanet(
                name=name,
                longitude=placement.longitude,
                sign=placement.sign,
                sign_name=placement.sign_name,
                degree=placement.degree_in_sign,
                house=placement.house,
                nakshatra=self.resolver.from_longitude(lon).name,
                retrograde=retrograde,
            )

        return TransitChart(
            timestamp=target.isoformat(),
            julian_day=jd,
            reference_sign=reference_sign,
            planets=planets,
            approximate=True,
            source=self.source,
            calculation_version=self.calculation_version,
        )
