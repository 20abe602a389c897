from typing import Dict, Optional

from vedic_engine.domain.kundali.constants import PLANETS
from vedic_engine.domain.kundali.nakshatra_resolver import NakshatraResolver
from vedic_engine.domain.kundali.schemas import BirthChart, PlanetPosition
from vedic_engine.domain.kundali.sign_house_mapper import SignHouseMapper


# Sidereal longitudes of a sample chart; Ketu is derived from Rahu
SAMPLE_LONGITUDES = {
    "Sun": 10.0,
    "Moon": 95.0,
    "Mars": 200.5,
    "Mercury": 25.0,
    "Jupiter": 300.0,
    "Venus": 350.0,
    "Saturn": 140.0,
    "Rahu": 60.0,
}


def build_chart(
    longitudes: Optional[Dict[str, float]] = None,
    ascendant_sign: int = 1,
    ascendant_longitude: Optional[float] = None,
    rahu_retrograde: bool = True,
) -> BirthChart:
    mapper = SignHouseMapper()
    resolver = NakshatraResolver()
    lons = dict(SAMPLE_LONGITUDES)
    lons.update(longitudes or {})
    lons["Ketu"] = (lons["Rahu"] + 180.0) % 360.0

    positions = []
    for planet in PLANETS:
        placement = mapper.map(lons[planet], ascendant_sign)
        positions.append(PlanetPosition(
            planet=planet,
            longitude=placement.longitude,
            sign=placement.sign,
            degree_in_sign=placement.degree_in_sign,
            house=placement.house,
            nakshatra=resolver.from_longitude(lons[planet]).index,
            retrograde=rahu_retrograde if planet in ("Rahu", "Ketu") else False,
        ))

    return BirthChart(
        ascendant_sign=ascendant_sign,
        ascendant_longitude=ascendant_longitude,
        positions=positions,
    )


def sample_payload() -> Dict[str, Dict]:
    """
    Provider-shaped planets payload (mixed degree fields and flag types).
    """
    return {
        "Ascendant": {"current_sign": 4, "fullDegree": 100.5},
        "Sun": {"current_sign": 1, "fullDegree": 10.0, "isRetro": "false",
                "nakshatra_name": "Ashwini"},
        "Moon": {"current_sign": 2, "normDegree": 15.0, "isRetro": "true",
                 "nakshatra_name": "Rohini"},
        "Mars": {"current_sign": 7, "fullDegree": 200.5, "isRetro": True},
        "Mercury": {"zodiac_sign_name": "Aries", "normDegree": 25.0, "isRetro": False},
        "Jupiter": {"current_sign": 11, "fullDegree": "300.0", "isRetro": "false"},
        "Venus": {"current_sign": 12, "fullDegree": 350.0},
        "Saturn": {"current_sign": 5, "fullDegree": 140.0, "isRetro": "true"},
        "Rahu": {"current_sign": 7, "fullDegree": 200.0, "isRetro": "true"},
        "Ketu": {"current_sign": 1, "fullDegree": 21.0, "isRetro": "true"},
    }
