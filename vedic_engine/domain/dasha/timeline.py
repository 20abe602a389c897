import logging
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import List, Optional

from vedic_engine.config import settings
from vedic_engine.domain.dasha.schemas import CurrentDasha, DashaPeriod
from vedic_engine.domain.kundali.errors import ConfigurationError
from vedic_engine.domain.kundali.nakshatra_resolver import NakshatraResolver


logger = logging.getLogger(__name__)


# Order of Dasha lords
VIMSHOTTARI_ORDER = (
    "Ketu", "Venus", "Sun", "Moon", "Mars",
    "Rahu", "Jupiter", "Saturn", "Mercury",
)

# Mahadasha length in years; sums to 120
VIMSHOTTARI_YEARS = MappingProxyType({
    "Ketu": 7, "Venus": 20, "Sun": 6, "Moon": 10, "Mars": 7,
    "Rahu": 18, "Jupiter": 16, "Saturn": 19, "Mercury": 17,
})

CYCLE_YEARS = 120


def antardasha_years(mahadasha: str, sub_lord: str) -> float:
    """
    Antardasha length: (sub lord's years / 120) x Mahadasha years.
    """
    return VIMSHOTTARI_YEARS[sub_lord] / CYCLE_YEARS * VIMSHOTTARI_YEARS[mahadasha]


def _years(delta: timedelta) -> float:
    return delta.total_seconds() / 86400.0 / settings.DAYS_PER_YEAR


def _delta(years: float) -> timedelta:
    return timedelta(days=years * settings.DAYS_PER_YEAR)


def _cycle_from(planet: str) -> List[str]:
    start = VIMSHOTTARI_ORDER.index(planet)
    return [VIMSHOTTARI_ORDER[(start + i) % 9] for i in range(9)]


class DashaTimeline:
    """
    Vimshottari Mahadasha / Antardasha calculator.

    The cycle starts at the lord of the birth Moon's nakshatra and
    repeats every 120 years.
    """

    def __init__(self, resolver: NakshatraResolver | None = None):
        self.resolver = resolver or NakshatraResolver()

    # ─────────────────────────────────────────────
    # Sequences
    # ─────────────────────────────────────────────

    def mahadasha_sequence(self, start_planet: str) -> List[DashaPeriod]:
        """
        One full 120-year cycle of Mahadashas beginning at ``start_planet``.
        """
        periods = []
        offset = 0.0
        for planet in _cycle_from(start_planet):
            years = float(VIMSHOTTARI_YEARS[planet])
            periods.append(DashaPeriod(
                planet=planet,
                start_offset_years=offset,
                duration_years=years,
            ))
            offset += years
        return periods

    def antardasha_sequence(self, mahadasha: str) -> List[DashaPeriod]:
        """
        The nine Antardashas of a Mahadasha, starting with its own lord.
        """
        periods = []
        offset = 0.0
        for planet in _cycle_from(mahadasha):
            years = antardasha_years(mahadasha, planet)
            periods.append(DashaPeriod(
                planet=planet,
                start_offset_years=offset,
                duration_years=years,
            ))
            offset += years
        return periods

    # ─────────────────────────────────────────────
    # Current periods
    # ─────────────────────────────────────────────

    def current_dasha(
        self,
        moon_nakshatra: str,
        birth_instant: datetime,
        now: Optional[datetime] = None,
    ) -> CurrentDasha:
        """
        Mahadasha and Antardasha running at ``now``.

        Elapsed years are consumed period by period, wrapping the nine
        lords as often as needed; birth after ``now`` is rejected.
        """
        if now is None:
            now = datetime.now(timezone.utc) if birth_instant.tzinfo else datetime.now()

        try:
            elapsed = _years(now - birth_instant)
        except TypeError as e:
            raise ConfigurationError(
                "birth_instant and now must both be naive or both timezone-aware"
            ) from e
        if elapsed < 0:
            raise ConfigurationError(
                f"Birth instant {birth_instant.isoformat()} is after {now.isoformat()}"
            )

        profile = self.resolver.resolve(moon_nakshatra)

        # Mahadasha
        index = VIMSHOTTARI_ORDER.index(profile.dasha_lord)
        remaining = elapsed
        while True:
            mahadasha = VIMSHOTTARI_ORDER[index]
            md_years = VIMSHOTTARI_YEARS[mahadasha]
            if remaining < md_years:
                break
            remaining -= md_years
            index = (index + 1) % 9

        # Antardasha
        local = remaining
        lords = _cycle_from(mahadasha)
        for i, antardasha in enumerate(lords):
            ad_years = antardasha_years(mahadasha, antardasha)
            if local < ad_years or i == len(lords) - 1:
                break
            local -= ad_years

        ad_remaining = max(ad_years - local, 0.0)
        logger.debug(
            f"Dasha for {moon_nakshatra}: elapsed={elapsed:.4f}y "
            f"{mahadasha}/{antardasha} remaining={ad_remaining:.4f}y"
        )

        return CurrentDasha(
            moon_nakshatra=moon_nakshatra,
            resolved=profile.resolved,
            elapsed_years=elapsed,
            mahadasha=mahadasha,
            mahadasha_ends_at=now + _delta(md_years - remaining),
            antardasha=antardasha,
            antardasha_ends_at=now + _delta(ad_remaining),
        )

    # ─────────────────────────────────────────────
    # Dated timeline
    # ─────────────────────────────────────────────

    def mahadasha_timeline(
        self,
        moon_nakshatra: str,
        birth_instant: datetime,
        cycles: int = 1,
    ) -> List[DashaPeriod]:
        """
        Dated Mahadashas from birth, each with its dated Antardashas.
        """
        if cycles < 1:
            raise ConfigurationError(f"cycles must be >= 1, got {cycles}")

        start_planet = self.resolver.resolve(moon_nakshatra).dasha_lord
        timeline: List[DashaPeriod] = []

        for cycle in range(cycles):
            for period in self.mahadasha_sequence(start_planet):
                offset = cycle * CYCLE_YEARS + period.start_offset_years
                md_start = birth_instant + _delta(offset)

                subs = []
                for sub in self.antardasha_sequence(period.planet):
                    sub_start = md_start + _delta(sub.start_offset_years)
                    subs.append(sub.model_copy(update={
                        "start": sub_start,
                        "end": sub_start + _delta(sub.duration_years),
                    }))

                timeline.append(period.model_copy(update={
                    "start_offset_years": offset,
                    "start": md_start,
                    "end": md_start + _delta(period.duration_years),
                    "antardashas": subs,
                }))

        return timeline
