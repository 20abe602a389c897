"""
Saturn transit table and Sade Sati resolution.

Saturn's sign is read from a hand-maintained table of sign-entry dates
(month precision) rather than an ephemeris. The table has an explicit
validity range and must be extended before ``valid_through``; dates
outside it fall back to ``settings.DEFAULT_SATURN_SIGN`` with a
StaleTableWarning.
"""

import logging
import warnings
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple, Union

from vedic_engine.config import settings
from vedic_engine.domain.kundali.constants import SIGNS
from vedic_engine.domain.kundali.errors import ConfigurationError, StaleTableWarning
from vedic_engine.domain.kundali.sign_house_mapper import SignHouseMapper
from vedic_engine.domain.transits.schemas import (
    SadeSatiReport,
    SadeSatiSpan,
    SadeSatiStatus,
    SadeSatiWindow,
    SaturnSignResolution,
    SaturnTransitEntry,
)


logger = logging.getLogger(__name__)


# (sign id, entry, exit); one full Saturn cycle
SATURN_TRANSITS = (
    (10, date(2020, 1, 1), date(2022, 4, 1)),    # Capricorn
    (11, date(2022, 4, 1), date(2025, 3, 1)),    # Aquarius
    (12, date(2025, 3, 1), date(2027, 6, 1)),    # Pisces
    (1, date(2027, 6, 1), date(2029, 10, 1)),    # Aries
    (2, date(2029, 10, 1), date(2032, 1, 1)),    # Taurus
    (3, date(2032, 1, 1), date(2034, 4, 1)),     # Gemini
    (4, date(2034, 4, 1), date(2037, 6, 1)),     # Cancer
    (5, date(2037, 6, 1), date(2039, 9, 1)),     # Leo
    (6, date(2039, 9, 1), date(2042, 11, 1)),    # Virgo
    (7, date(2042, 11, 1), date(2045, 2, 1)),    # Libra
    (8, date(2045, 2, 1), date(2047, 5, 1)),     # Scorpio
    (9, date(2047, 5, 1), date(2050, 8, 1)),     # Sagittarius
)

TABLE_VERSION = "2020.1"

PHASES = ("12th", "1st", "2nd")

PHASE_TITLES = {
    "12th": "Sade Sati (Rising)",
    "1st": "Sade Sati (Peak)",
    "2nd": "Sade Sati (Setting)",
}

PHASE_DESCRIPTIONS = {
    "12th": "Saturn is in the 12th house from your Moon. This is the first phase of Sade Sati.",
    "1st": "Saturn is transiting over your natal Moon. This is the peak phase of Sade Sati.",
    "2nd": "Saturn is in the 2nd house from your Moon. This is the final phase of Sade Sati.",
}

DHAIYA_DESCRIPTIONS = {
    "4th": "Saturn is in the 4th house from your Moon (Ardha-Ashtama Shani).",
    "8th": "Saturn is in the 8th house from your Moon (Ashtama Shani).",
}


def shift_cycles(day: date, cycles: int) -> date:
    """
    Move a date by whole Saturn cycles.

    The cycle length is rounded to whole years and applied to the year
    only, so the result keeps the month and day of the input.
    """
    years = round(cycles * settings.SATURN_CYCLE_YEARS)
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return day.replace(year=day.year + years, day=28)


class SaturnTransitTable:
    """
    Versioned, ordered and contiguous table of Saturn sign occupancy.
    """

    def __init__(
        self,
        rows: Sequence[Tuple[int, date, date]] = SATURN_TRANSITS,
        version: str = TABLE_VERSION,
    ):
        if not rows:
            raise ConfigurationError("Saturn transit table is empty")

        self.version = version
        self.entries: List[SaturnTransitEntry] = [
            SaturnTransitEntry(sign=sign, start=start, end=end)
            for sign, start, end in rows
        ]

        for prev, entry in zip(self.entries, self.entries[1:]):
            if entry.start != prev.end:
                raise ConfigurationError(
                    f"Saturn transit table {version} is not contiguous at {entry.start}"
                )
        for entry in self.entries:
            if entry.start >= entry.end:
                raise ConfigurationError(
                    f"Saturn transit entry for {SIGNS[entry.sign - 1]} ends before it starts"
                )

    @property
    def valid_from(self) -> date:
        return self.entries[0].start

    @property
    def valid_through(self) -> date:
        return self.entries[-1].end

    def lookup(self, day: date) -> Optional[SaturnTransitEntry]:
        """
        Entry whose [start, end) contains ``day``; None outside the table.
        """
        for entry in self.entries:
            if entry.start <= day < entry.end:
                return entry
        return None

    def occurrence(self, sign: int) -> SaturnTransitEntry:
        """
        First stay of Saturn in ``sign`` recorded in the table.
        """
        for entry in self.entries:
            if entry.sign == sign:
                return entry
        raise ConfigurationError(
            f"Saturn transit table {self.version} has no entry for {SIGNS[sign - 1]}"
        )


class SadeSatiCycleResolver:
    """
    Resolves Saturn's sign and the Sade Sati periods of a Moon sign.
    """

    def __init__(
        self,
        table: SaturnTransitTable | None = None,
        mapper: SignHouseMapper | None = None,
    ):
        self.table = table or SaturnTransitTable()
        self.mapper = mapper or SignHouseMapper()

    # ─────────────────────────────────────────────
    # Saturn
    # ─────────────────────────────────────────────

    def saturn_sign(self, now: Union[date, datetime, None] = None) -> SaturnSignResolution:
        """
        Sign Saturn occupies on ``now`` (default: today).

        Outside the table's range this warns and returns the configured
        default sign with ``stale=True``.
        """
        day = self._as_date(now)
        entry = self.table.lookup(day)

        if entry is not None:
            sign, stale = entry.sign, False
        else:
            sign, _ = self.mapper.resolve_sign(settings.DEFAULT_SATURN_SIGN)
            stale = True
            message = (
                f"{day} is outside Saturn transit table {self.table.version} "
                f"({self.table.valid_from} to {self.table.valid_through}); "
                f"assuming Saturn in {SIGNS[sign - 1]}"
            )
            warnings.warn(message, StaleTableWarning, stacklevel=2)
            logger.warning(message)

        return SaturnSignResolution(
            sign=sign,
            sign_name=SIGNS[sign - 1],
            stale=stale,
            table_version=self.table.version,
            valid_through=self.table.valid_through,
        )

    # ─────────────────────────────────────────────
    # Sade Sati
    # ─────────────────────────────────────────────

    def sade_sati_signs(self, moon_sign: Union[int, str]) -> Tuple[int, int, int]:
        """
        The 12th, 1st and 2nd signs from the Moon sign.
        """
        moon, _ = self._moon_sign(moon_sign)
        return (moon - 2) % 12 + 1, moon, moon % 12 + 1

    def sade_sati_windows(self, moon_sign: Union[int, str]) -> List[SadeSatiWindow]:
        """
        Contiguous 12th / 1st / 2nd phase windows anchored on the table's
        stay of Saturn over the Moon sign itself.

        A 12th-sign stay recorded after the anchor belongs to the next
        cycle and is moved one cycle back; a 2nd-sign stay recorded before
        it is moved one cycle forward. A moved window is clipped to meet
        the anchor.
        """
        moon, _ = self._moon_sign(moon_sign)
        twelfth_sign, first_sign, second_sign = self.sade_sati_signs(moon)

        first = self.table.occurrence(first_sign)

        twelfth = self.table.occurrence(twelfth_sign)
        twelfth_start, twelfth_end = twelfth.start, twelfth.end
        if twelfth_start > first.start:
            twelfth_start = shift_cycles(twelfth_start, -1)
            twelfth_end = first.start

        second = self.table.occurrence(second_sign)
        second_start, second_end = second.start, second.end
        if second_start < first.start:
            second_end = shift_cycles(second_end, 1)
            second_start = first.end

        spans = (
            (twelfth_sign, twelfth_start, twelfth_end),
            (first_sign, first.start, first.end),
            (second_sign, second_start, second_end),
        )
        return [
            SadeSatiWindow(
                moon_sign=moon,
                phase=phase,
                sign=sign,
                sign_name=SIGNS[sign - 1],
                start=start,
                end=end,
            )
            for phase, (sign, start, end) in zip(PHASES, spans)
        ]

    def report(self, moon_sign: Union[int, str]) -> SadeSatiReport:
        """
        Sade Sati windows plus the spans one cycle before and after.
        """
        moon, resolved = self._moon_sign(moon_sign)
        windows = self.sade_sati_windows(moon)
        start, end = windows[0].start, windows[-1].end

        return SadeSatiReport(
            moon_sign=moon,
            resolved=resolved,
            signs=[w.sign for w in windows],
            phases=windows,
            start=start,
            end=end,
            past=SadeSatiSpan(start=shift_cycles(start, -1), end=shift_cycles(end, -1)),
            future=SadeSatiSpan(start=shift_cycles(start, 1), end=shift_cycles(end, 1)),
        )

    def status(
        self,
        moon_sign: Union[int, str],
        now: Union[date, datetime, None] = None,
    ) -> SadeSatiStatus:
        """
        Whether Saturn is currently in Sade Sati or Dhaiya from the Moon.
        """
        moon, resolved = self._moon_sign(moon_sign)
        saturn = self.saturn_sign(now)
        house = self.mapper.house_from_reference(saturn.sign, moon)

        phase = {12: "12th", 1: "1st", 2: "2nd"}.get(house)
        dhaiya = {4: "4th", 8: "8th"}.get(house)

        if phase:
            label = PHASE_TITLES[phase]
            description = PHASE_DESCRIPTIONS[phase]
        elif dhaiya:
            label = "Dhaiya (Small Panoti)"
            description = DHAIYA_DESCRIPTIONS[dhaiya]
        else:
            label = "None"
            description = "Saturn is not in a critical position relative to your Moon."

        logger.debug(
            f"Saturn in {saturn.sign_name}, house {house} from Moon {SIGNS[moon - 1]}"
        )

        return SadeSatiStatus(
            moon_sign=moon,
            resolved=resolved,
            saturn=saturn,
            in_sade_sati=phase is not None,
            label=label,
            phase=phase,
            dhaiya=dhaiya,
            description=description,
        )

    # ─────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────

    def _moon_sign(self, moon_sign: Union[int, str]) -> Tuple[int, bool]:
        if isinstance(moon_sign, int):
            if not 1 <= moon_sign <= 12:
                raise ConfigurationError(f"Invalid sign id: {moon_sign}")
            return moon_sign, True
        return self.mapper.resolve_sign(moon_sign)

    @staticmethod
    def _as_date(now: Union[date, datetime, None]) -> date:
        if now is None:
            return date.today()
        if isinstance(now, datetime):
            return now.date()
        return now
