import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

import swisseph as swe

from vedic_engine.config import settings
from vedic_engine.domain.kundali.constants import PLANETS, SIGNS
from vedic_engine.domain.kundali.errors import CalculationError, UnsupportedAyanamsaError
from vedic_engine.domain.kundali.nakshatra_resolver import NakshatraResolver
from vedic_engine.domain.kundali.schemas import BirthChart, BirthInput, PlanetPosition
from vedic_engine.domain.kundali.sign_house_mapper import SignHouseMapper, normalize
from vedic_engine.domain.transits.transit_approximator import (
    MEAN_DAILY_MOTION,
    TransitApproximator,
    julian_day,
)


logger = logging.getLogger(__name__)


class PlanetPositionSource(ABC):
    """
    Abstract source of natal planetary positions.

    Each source must:
    - Implement `planet_longitudes` (Sun..Rahu, Ketu is derived)
    - Implement `ascendant_longitude`

    Sources may be slow or fail; retries and caching belong to callers.
    """

    name: str
    approximate: bool = True

    def __init__(
        self,
        mapper: SignHouseMapper | None = None,
        resolver: NakshatraResolver | None = None,
    ):
        self.mapper = mapper or SignHouseMapper()
        self.resolver = resolver or NakshatraResolver()

    @abstractmethod
    def planet_longitudes(self, birth: BirthInput) -> Dict[str, Tuple[float, bool]]:
        """
        Sidereal (longitude, retrograde) for every planet except Ketu.
        """
        raise NotImplementedError

    @abstractmethod
    def ascendant_longitude(self, birth: BirthInput) -> Optional[float]:
        """
        Sidereal ascendant, or None when the source cannot compute one.
        """
        raise NotImplementedError

    # ─────────────────────────────────────────────
    # Shared helpers
    # ─────────────────────────────────────────────

    def fetch_planet_positions(self, birth: BirthInput) -> List[PlanetPosition]:
        return self.fetch_chart(birth).positions

    def fetch_chart(self, birth: BirthInput) -> BirthChart:
        """
        Assemble a whole-sign BirthChart from the source's longitudes.

        Without an ascendant, houses are counted from the Moon sign.
        """
        longitudes = self.planet_longitudes(birth)
        asc = self.ascendant_longitude(birth)

        if asc is not None:
            reference = self.mapper.sign_of(asc)
        else:
            reference = self.mapper.sign_of(longitudes["Moon"][0])
            logger.warning(
                f"{self.name}: no ascendant available; counting houses from "
                f"Moon sign {SIGNS[reference - 1]}"
            )

        rahu_lon, rahu_retro = longitudes["Rahu"]
        longitudes = dict(longitudes)
        longitudes["Ketu"] = (normalize(rahu_lon + 180.0), rahu_retro)

        positions = []
        for planet in PLANETS:
            lon, retrograde = longitudes[planet]
            placement = self.mapper.map(lon, reference)
            positions.append(PlanetPosition(
                planet=planet,
                longitude=placement.longitude,
                sign=placement.sign,
                degree_in_sign=placement.degree_in_sign,
                house=placement.house,
                nakshatra=self.resolver.from_longitude(lon).index,
                retrograde=retrograde and planet != "Moon",
            ))

        return BirthChart(
            ascendant_sign=reference,
            ascendant_longitude=asc,
            positions=positions,
        )


class ApproximateSource(PlanetPositionSource):
    """
    Mean-motion fallback used when no ephemeris is available.
    """

    name = "mean-motion"
    approximate = True

    def __init__(
        self,
        approximator: TransitApproximator | None = None,
        mapper: SignHouseMapper | None = None,
        resolver: NakshatraResolver | None = None,
    ):
        super().__init__(mapper, resolver)
        self.approximator = approximator or TransitApproximator(self.mapper, self.resolver)

    def planet_longitudes(self, birth: BirthInput) -> Dict[str, Tuple[float, bool]]:
        local = birth.local_datetime()
        jd = julian_day(
            local.year, local.month, local.day,
            local.hour, local.minute, local.second,
            birth.timezone_offset_hours,
        )
        longitudes = self.approximator.longitudes(jd)
        return {
            planet: (longitudes[planet], MEAN_DAILY_MOTION[planet] < 0)
            for planet in MEAN_DAILY_MOTION
        }

    def ascendant_longitude(self, birth: BirthInput) -> Optional[float]:
        return None


class SwissEphemerisSource(PlanetPositionSource):
    """
    Sidereal positions from the Swiss Ephemeris.

    Uses the configured ayanamsa, the mean lunar node for Rahu and
    whole-sign houses. Falls back to the built-in Moshier ephemeris when
    no ephemeris files are configured.
    """

    name = "swisseph"
    approximate = False

    AYANAMSA_MODES = {
        "lahiri": swe.SIDM_LAHIRI,
        "raman": swe.SIDM_RAMAN,
        "krishnamurti": swe.SIDM_KRISHNAMURTI,
    }

    PLANET_MAPPING = {
        "Sun": swe.SUN,
        "Moon": swe.MOON,
        "Mars": swe.MARS,
        "Mercury": swe.MERCURY,
        "Jupiter": swe.JUPITER,
        "Venus": swe.VENUS,
        "Saturn": swe.SATURN,
        "Rahu": swe.MEAN_NODE,
    }

    def __init__(
        self,
        ayanamsa: str | None = None,
        ephemeris_path: str | None = None,
        mapper: SignHouseMapper | None = None,
        resolver: NakshatraResolver | None = None,
    ):
        super().__init__(mapper, resolver)

        self.ayanamsa = ayanamsa or settings.AYANAMSA
        mode = self.AYANAMSA_MODES.get(self.ayanamsa.lower())
        if mode is None:
            raise UnsupportedAyanamsaError(
                f"Ayanamsa '{self.ayanamsa}' is not supported; "
                f"use one of {sorted(self.AYANAMSA_MODES)}"
            )
        self.sid_mode = mode

        path = ephemeris_path or settings.EPHEMERIS_PATH
        if path:
            swe.set_ephe_path(path)

    def julian_day(self, birth: BirthInput) -> float:
        utc = birth.utc_datetime()
        hour_decimal = utc.hour + utc.minute / 60.0 + utc.second / 3600.0
        return swe.julday(utc.year, utc.month, utc.day, hour_decimal)

    def planet_longitudes(self, birth: BirthInput) -> Dict[str, Tuple[float, bool]]:
        jd = self.julian_day(birth)
        swe.set_sid_mode(self.sid_mode, 0, 0)

        result: Dict[str, Tuple[float, bool]] = {}
        for name, pid in self.PLANET_MAPPING.items():
            try:
                xx, _ = swe.calc_ut(jd, pid, swe.FLG_SIDEREAL | swe.FLG_SPEED)
            except swe.Error as e:
                raise CalculationError(f"Swiss Ephemeris failed for {name}: {e}") from e
            result[name] = (normalize(xx[0]), xx[3] < 0)

        logger.debug(f"Swiss Ephemeris positions at JD {jd:.5f} ({self.ayanamsa})")
        return result

    def ascendant_longitude(self, birth: BirthInput) -> Optional[float]:
        jd = self.julian_day(birth)
        swe.set_sid_mode(self.sid_mode, 0, 0)
        try:
            _, ascmc = swe.houses_ex(
                jd, birth.latitude, birth.longitude, b"W", swe.FLG_SIDEREAL
            )
        except swe.Error as e:
            raise CalculationError(f"Swiss Ephemeris failed for ascendant: {e}") from e
        return normalize(ascmc[0])
