import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from vedic_engine.domain.kundali.constants import PLANETS
from vedic_engine.domain.kundali.errors import ConfigurationError, UnresolvedLookupError
from vedic_engine.domain.kundali.nakshatra_resolver import NakshatraResolver
from vedic_engine.domain.kundali.schemas import BirthChart, PlanetPosition
from vedic_engine.domain.kundali.sign_house_mapper import SignHouseMapper, normalize


logger = logging.getLogger(__name__)


_mapper = SignHouseMapper()
_resolver = NakshatraResolver()


# ─────────────────────────────────────────────
# Provider payload → Domain
# ─────────────────────────────────────────────

def raw_planets_to_chart(payload: Mapping[str, Any]) -> BirthChart:
    """
    Convert a provider planets payload into a domain BirthChart.

    Each planet entry carries ``current_sign`` (1-12) or
    ``zodiac_sign_name``, an absolute ``fullDegree`` or in-sign
    ``normDegree``, ``isRetro`` (bool or "true"/"false") and an optional
    ``nakshatra_name``. Houses are whole signs from the ``Ascendant``
    entry. Ketu is re-derived opposite Rahu.
    """
    asc_data = payload.get("Ascendant") or payload.get("ascendant")
    if asc_data:
        asc_lon, asc_sign = _longitude(asc_data, "Ascendant")
    else:
        logger.warning("Payload has no Ascendant; counting houses from Aries")
        asc_lon, asc_sign = None, 1

    positions: Dict[str, PlanetPosition] = {}
    for name in PLANETS:
        if name == "Ketu":
            continue
        data = payload.get(name)
        if not data:
            raise ConfigurationError(f"Planet {name} missing from payload")

        lon, _ = _longitude(data, name)
        positions[name] = _position(
            name, lon, asc_sign, _is_retro(data.get("isRetro")), data.get("nakshatra_name"),
        )

    rahu = positions["Rahu"]
    positions["Ketu"] = _position(
        "Ketu", normalize(rahu.longitude + 180.0), asc_sign, rahu.retrograde, None,
    )

    return BirthChart(
        ascendant_sign=asc_sign,
        ascendant_longitude=asc_lon,
        positions=list(positions.values()),
    )


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def _longitude(data: Mapping[str, Any], name: str) -> Tuple[Optional[float], int]:
    """
    Absolute longitude and sign id of a payload entry.
    """
    sign = data.get("current_sign")
    if sign is None and data.get("zodiac_sign_name"):
        try:
            sign = _mapper.sign_id(data["zodiac_sign_name"])
        except UnresolvedLookupError as e:
            raise ConfigurationError(f"{name}: {e}") from e

    if data.get("fullDegree") is not None:
        lon = normalize(float(data["fullDegree"]))
        return lon, _mapper.sign_of(lon)

    if sign is None:
        raise ConfigurationError(f"{name}: payload has neither fullDegree nor a sign")

    sign = int(sign)
    if data.get("normDegree") is None:
        return None, sign
    return _mapper.to_longitude(sign, float(data["normDegree"])), sign


def _position(
    name: str,
    longitude: Optional[float],
    ascendant_sign: int,
    retrograde: bool,
    nakshatra_name: Optional[str],
) -> PlanetPosition:
    if longitude is None:
        raise ConfigurationError(f"{name}: payload carries no degree")

    placement = _mapper.map(longitude, ascendant_sign)

    if nakshatra_name:
        profile = _resolver.resolve(nakshatra_name)
        nakshatra = profile.index
    else:
        nakshatra = None
    if nakshatra is None:
        nakshatra = _resolver.from_longitude(longitude).index

    return PlanetPosition(
        planet=name,
        longitude=placement.longitude,
        sign=placement.sign,
        degree_in_sign=placement.degree_in_sign,
        house=placement.house,
        nakshatra=nakshatra,
        # The Moon never retrogrades
        retrograde=retrograde and name != "Moon",
    )


def _is_retro(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True
