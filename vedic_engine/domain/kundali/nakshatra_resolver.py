"""
Nakshatra lookup and classification.

Every table below is indexed by nakshatra position (0 = Ashwini,
26 = Revati) and is read-only module data.
"""

import logging
from typing import List, Tuple

from vedic_engine.domain.kundali.constants import NAKSHATRAS, NAKSHATRA_SPAN, PADA_SPAN
from vedic_engine.domain.kundali.errors import UnresolvedLookupError
from vedic_engine.domain.kundali.schemas import NakshatraPada, NakshatraProfile
from vedic_engine.domain.kundali.sign_house_mapper import normalize
from vedic_engine.domain.kundali.text import normalize_name


logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
# Classification tables
# ─────────────────────────────────────────────

GANA = (
    "Deva", "Manushya", "Rakshasa", "Manushya", "Deva", "Manushya",     # 1-6
    "Deva", "Deva", "Rakshasa", "Rakshasa", "Manushya", "Manushya",     # 7-12
    "Deva", "Rakshasa", "Deva", "Rakshasa", "Deva", "Rakshasa",         # 13-18
    "Rakshasa", "Manushya", "Manushya", "Deva", "Rakshasa", "Rakshasa", # 19-24
    "Manushya", "Manushya", "Deva",                                     # 25-27
)

# 14 Yoni groups; Krittika and Pushya share Sheep
YONI = (
    "Horse", "Elephant", "Sheep", "Serpent", "Serpent", "Dog",
    "Cat", "Sheep", "Cat", "Rat", "Rat", "Cow",
    "Buffalo", "Tiger", "Buffalo", "Tiger", "Deer", "Deer",
    "Dog", "Monkey", "Mongoose", "Monkey", "Lion", "Horse",
    "Lion", "Cow", "Elephant",
)

NADI = (
    "Adi", "Madhya", "Antya", "Antya", "Madhya", "Adi",
    "Adi", "Madhya", "Antya", "Antya", "Madhya", "Adi",
    "Adi", "Madhya", "Antya", "Antya", "Madhya", "Adi",
    "Adi", "Madhya", "Madhya", "Adi", "Adi", "Adi",
    "Madhya", "Antya", "Antya",
)

# Starting Vimshottari lord; each planet rules three nakshatras
DASHA_LORD = (
    "Ketu", "Venus", "Sun", "Moon", "Mars", "Rahu", "Jupiter", "Saturn", "Mercury",
    "Ketu", "Venus", "Sun", "Moon", "Mars", "Rahu", "Jupiter", "Saturn", "Mercury",
    "Ketu", "Venus", "Sun", "Moon", "Mars", "Rahu", "Jupiter", "Saturn", "Mercury",
)

DEFAULT_GANA = "Manushya"
DEFAULT_NADI = "Madhya"
DEFAULT_DASHA_LORD = "Ketu"

# Spellings seen in provider payloads, in addition to the canonical names
ALIASES = {
    "Ashwini": ("aswini", "ashvini", "asvini"),
    "Krittika": ("kritika", "krithika"),
    "Mrigashira": ("mrigashirsha", "mrigasira", "mrigasirsha", "mrigshira"),
    "Ardra": ("arudra", "aridra"),
    "Pushya": ("pushyami", "pusya"),
    "Ashlesha": ("aslesha", "ashlesa"),
    "Magha": ("makha",),
    "Purva Phalguni": ("poorva phalguni", "purvaphalguni"),
    "Uttara Phalguni": ("uttaraphalguni", "uttra phalguni"),
    "Hasta": ("hastha",),
    "Chitra": ("chithra",),
    "Swati": ("svati", "swathi"),
    "Vishakha": ("visakha", "vishaka"),
    "Jyeshtha": ("jyeshta", "jyestha"),
    "Mula": ("moola",),
    "Purva Ashadha": ("purvashadha", "poorvashada", "poorva ashadha", "purva shadha"),
    "Uttara Ashadha": ("uttarashadha", "uttara shadha"),
    "Shravana": ("sravana", "shravan"),
    "Dhanishta": ("dhanishtha", "dhanista"),
    "Shatabhisha": ("satabhisha", "shatabhishak", "shatataraka"),
    "Purva Bhadrapada": ("poorva bhadrapada", "purva bhadra"),
    "Uttara Bhadrapada": ("uttara bhadra",),
    "Revati": ("revathi",),
}


def _build_lookup() -> Tuple[Tuple[str, int], ...]:
    keys: List[Tuple[str, int]] = []
    for index, name in enumerate(NAKSHATRAS):
        keys.append((normalize_name(name), index))
        for alias in ALIASES.get(name, ()):
            keys.append((normalize_name(alias), index))
    # Longest key first so "purva phalguni" is tried before shorter aliases
    keys.sort(key=lambda kv: len(kv[0]), reverse=True)
    return tuple(keys)


_LOOKUP = _build_lookup()


class NakshatraResolver:
    """
    Resolves nakshatras by name or longitude and classifies them.
    """

    def index_of(self, name: str) -> int:
        """
        1-indexed nakshatra number for a (possibly decorated) name.

        Matching is case- and diacritic-insensitive and accepts the name
        anywhere in the string, e.g. "Rohini (2)".
        """
        query = normalize_name(name)
        if query:
            for key, index in _LOOKUP:
                if key in query:
                    return index + 1
        raise UnresolvedLookupError("nakshatra", name)

    def resolve(self, name: str) -> NakshatraProfile:
        """
        Classify a nakshatra name; unknown names get the documented defaults.
        """
        try:
            index = self.index_of(name)
        except UnresolvedLookupError as e:
            logger.warning(
                f"{e}; using defaults gana={DEFAULT_GANA} nadi={DEFAULT_NADI} "
                f"dasha_lord={DEFAULT_DASHA_LORD}"
            )
            return NakshatraProfile(
                query=name or "",
                gana=DEFAULT_GANA,
                nadi=DEFAULT_NADI,
                dasha_lord=DEFAULT_DASHA_LORD,
                resolved=False,
            )

        return self.profile(index, query=name)

    def profile(self, index: int, query: str = "") -> NakshatraProfile:
        i = index - 1
        return NakshatraProfile(
            query=query or NAKSHATRAS[i],
            name=NAKSHATRAS[i],
            index=index,
            gana=GANA[i],
            yoni=YONI[i],
            nadi=NADI[i],
            dasha_lord=DASHA_LORD[i],
        )

    def from_longitude(self, longitude: float) -> NakshatraPada:
        """
        Nakshatra and pada (quarter) containing a sidereal longitude.
        """
        lon = normalize(longitude)
        i = min(int(lon // NAKSHATRA_SPAN), 26)
        within = lon - i * NAKSHATRA_SPAN
        pada = min(int(within // PADA_SPAN), 3) + 1
        return NakshatraPada(name=NAKSHATRAS[i], index=i + 1, pada=pada)

    def dasha_lord(self, name: str) -> str:
        return self.resolve(name).dasha_lord
