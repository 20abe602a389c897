import logging
from typing import List, Optional, Sequence, Tuple

from vedic_engine.domain.kundali.constants import SIGNS, SIGN_SPAN
from vedic_engine.domain.kundali.errors import ConfigurationError, UnresolvedLookupError
from vedic_engine.domain.kundali.schemas import SignPlacement
from vedic_engine.domain.kundali.text import normalize_name


logger = logging.getLogger(__name__)


def normalize(longitude: float) -> float:
    """
    Normalize any real longitude into [0, 360).
    """
    value = float(longitude) % 360.0
    # -1e-17 % 360.0 == 360.0 in IEEE arithmetic
    if value >= 360.0:
        value = 0.0
    return value


class SignHouseMapper:
    """
    Converts ecliptic longitudes into sign / degree / house placements.

    Houses are either whole-sign houses counted from a reference sign, or
    house-cusp houses found by scanning twelve cusp longitudes.
    """

    # ─────────────────────────────────────────────
    # Signs
    # ─────────────────────────────────────────────

    @staticmethod
    def sign_of(longitude: float) -> int:
        return int(normalize(longitude) // SIGN_SPAN) + 1

    @staticmethod
    def house_from_reference(sign: int, reference_sign: int) -> int:
        """
        Whole-sign house of ``sign`` counted inclusively from ``reference_sign``.
        """
        for value in (sign, reference_sign):
            if not 1 <= value <= 12:
                raise ConfigurationError(f"Invalid sign id: {value}")
        return ((sign - 1 - (reference_sign - 1) + 12) % 12) + 1

    def map(self, longitude: float, reference_sign: int = 1) -> SignPlacement:
        """
        Map a longitude to its sign, degree within sign and house.
        """
        lon = normalize(longitude)
        sign_index = int(lon // SIGN_SPAN)
        degree = lon - sign_index * SIGN_SPAN

        return SignPlacement(
            longitude=lon,
            sign=sign_index + 1,
            sign_name=SIGNS[sign_index],
            degree_in_sign=degree,
            house=self.house_from_reference(sign_index + 1, reference_sign),
        )

    @staticmethod
    def to_longitude(sign: int, degree_in_sign: float) -> float:
        """
        Inverse of :meth:`map`: absolute longitude of a sign + degree pair.
        """
        if not 1 <= sign <= 12:
            raise ConfigurationError(f"Invalid sign id: {sign}")
        if not 0.0 <= degree_in_sign < SIGN_SPAN:
            raise ConfigurationError(f"Degree in sign out of range: {degree_in_sign}")
        return normalize((sign - 1) * SIGN_SPAN + degree_in_sign)

    @staticmethod
    def sign_id(name: str) -> int:
        """
        Resolve a sign name (case/diacritic-insensitive substring) to its id.

        Raises UnresolvedLookupError when nothing matches.
        """
        query = normalize_name(name)
        if query:
            for index, sign in enumerate(SIGNS):
                if normalize_name(sign) in query:
                    return index + 1
        raise UnresolvedLookupError("sign", name)

    def resolve_sign(self, name: str, default: int = 1) -> Tuple[int, bool]:
        """
        Like :meth:`sign_id` but falls back to ``default`` (Aries).

        Returns (sign_id, resolved).
        """
        try:
            return self.sign_id(name), True
        except UnresolvedLookupError as e:
            logger.warning(f"{e}; defaulting to {SIGNS[default - 1]}")
            return default, False

    # ─────────────────────────────────────────────
    # House cusps
    # ─────────────────────────────────────────────

    @staticmethod
    def equal_house_cusps(ascendant_longitude: float) -> List[float]:
        """
        Twelve equal houses, house 1 starting at the ascendant degree.
        """
        asc = normalize(ascendant_longitude)
        return [normalize(asc + i * SIGN_SPAN) for i in range(12)]

    @staticmethod
    def normalize_cusps(cusps: Sequence[float]) -> List[float]:
        """
        Validate a provider cusp list and put it in house 1..12 order.

        Some providers list cusps from house 12 down to house 1; such a
        list runs backwards through the zodiac and is reversed. Direction
        is judged from the gaps between neighbours, since a list in house
        order also has its first cusp above its last whenever it wraps
        through 0°.
        """
        if cusps is None or len(cusps) != 12:
            raise ConfigurationError(
                f"House cusps must contain exactly 12 longitudes, got "
                f"{0 if cusps is None else len(cusps)}"
            )
        ordered = [normalize(c) for c in cusps]
        forward = sum(
            1 for i in range(12)
            if 0.0 < (ordered[(i + 1) % 12] - ordered[i]) % 360.0 < 180.0
        )
        if forward < 6:
            ordered.reverse()
        return ordered

    def house_from_cusps(self, longitude: float, cusps: Sequence[float]) -> int:
        """
        House (1..12) containing ``longitude`` given house-start cusps.

        House i spans [cusps[i], cusps[i+1]); when cusps[i] > cusps[i+1]
        the span wraps through 0°.
        """
        if cusps is None or len(cusps) != 12:
            raise ConfigurationError(
                f"House cusps must contain exactly 12 longitudes, got "
                f"{0 if cusps is None else len(cusps)}"
            )

        lon = normalize(longitude)
        for i in range(12):
            start = normalize(cusps[i])
            end = normalize(cusps[(i + 1) % 12])

            if start < end:
                if start <= lon < end:
                    return i + 1
            elif start > end:
                if lon >= start or lon < end:
                    return i + 1
            elif lon == start:
                return i + 1

        raise ConfigurationError(
            f"Longitude {lon} falls in no house for cusps {list(cusps)}"
        )

    def place(
        self,
        longitude: float,
        reference_sign: int,
        cusps: Optional[Sequence[float]] = None,
    ) -> SignPlacement:
        """
        Map a longitude, taking the house from cusps when they are known.
        """
        placement = self.map(longitude, reference_sign)
        if cusps is not None:
            placement.house = self.house_from_cusps(longitude, cusps)
        return placement
