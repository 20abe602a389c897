import unittest
from datetime import datetime, timedelta, timezone

from vedic_engine.domain.dasha.timeline import (
    VIMSHOTTARI_ORDER,
    VIMSHOTTARI_YEARS,
    DashaTimeline,
    antardasha_years,
)
from vedic_engine.domain.kundali.errors import ConfigurationError


BIRTH = datetime(1990, 5, 17, 4, 30, tzinfo=timezone.utc)


def years(n):
    return timedelta(days=n * 365.25)


class TestVimshottariTables(unittest.TestCase):
    def test_mahadashas_sum_to_120(self):
        self.assertEqual(sum(VIMSHOTTARI_YEARS.values()), 120)

    def test_antardashas_sum_to_mahadasha(self):
        for md in VIMSHOTTARI_ORDER:
            total = sum(antardasha_years(md, sub) for sub in VIMSHOTTARI_ORDER)
            self.assertAlmostEqual(total, VIMSHOTTARI_YEARS[md], places=9)

    def test_sun_antardashas(self):
        periods = DashaTimeline().antardasha_sequence("Sun")
        self.assertEqual(periods[0].planet, "Sun")
        self.assertAlmostEqual(periods[0].duration_years, 0.3)
        self.assertAlmostEqual(sum(p.duration_years for p in periods), 6.0)


class TestDashaTimeline(unittest.TestCase):
    def setUp(self):
        self.timeline = DashaTimeline()

    def test_mahadasha_sequence(self):
        periods = self.timeline.mahadasha_sequence("Moon")
        self.assertEqual([p.planet for p in periods][:3], ["Moon", "Mars", "Rahu"])
        self.assertEqual(periods[-1].planet, "Sun")
        self.assertAlmostEqual(periods[-1].start_offset_years + periods[-1].duration_years, 120.0)

    def test_zero_elapsed_starts_with_nakshatra_lord(self):
        for nakshatra, lord in [("Ashwini", "Ketu"), ("Rohini", "Moon"), ("Revati", "Mercury")]:
            current = self.timeline.current_dasha(nakshatra, BIRTH, BIRTH)
            self.assertEqual(current.mahadasha, lord)
            self.assertEqual(current.antardasha, lord)
            self.assertEqual(current.elapsed_years, 0.0)

    def test_antardasha_end_at_birth(self):
        current = self.timeline.current_dasha("Ashwini", BIRTH, BIRTH)
        expected = BIRTH + years(7 * 7 / 120)
        self.assertAlmostEqual(
            (current.antardasha_ends_at - expected).total_seconds(), 0.0, delta=1.0
        )
        self.assertAlmostEqual(
            (current.mahadasha_ends_at - (BIRTH + years(7))).total_seconds(), 0.0, delta=1.0
        )

    def test_second_mahadasha(self):
        now = BIRTH + years(10)
        current = self.timeline.current_dasha("Ashwini", BIRTH, now)
        self.assertEqual(current.mahadasha, "Venus")
        self.assertEqual(current.antardasha, "Venus")
        # 3 years into Venus/Venus (3.333y long)
        remaining = (current.antardasha_ends_at - now).total_seconds() / 86400 / 365.25
        self.assertAlmostEqual(remaining, 20 * 20 / 120 - 3, places=4)

    def test_wraps_past_full_cycle(self):
        now = BIRTH + years(125)
        current = self.timeline.current_dasha("Ashwini", BIRTH, now)
        self.assertEqual(current.mahadasha, "Ketu")
        self.assertEqual(current.antardasha, "Saturn")

    def test_unresolved_nakshatra_uses_default_lord(self):
        current = self.timeline.current_dasha("???", BIRTH, BIRTH)
        self.assertFalse(current.resolved)
        self.assertEqual(current.mahadasha, "Ketu")

    def test_birth_after_now_is_an_error(self):
        with self.assertRaises(ConfigurationError):
            self.timeline.current_dasha("Ashwini", BIRTH, BIRTH - timedelta(days=1))

    def test_mixed_naive_and_aware_is_an_error(self):
        with self.assertRaises(ConfigurationError):
            self.timeline.current_dasha("Ashwini", BIRTH, datetime(2020, 1, 1))

    def test_defaults_now(self):
        current = self.timeline.current_dasha("Ashwini", BIRTH)
        self.assertGreater(current.elapsed_years, 30)
        naive = self.timeline.current_dasha("Ashwini", BIRTH.replace(tzinfo=None))
        self.assertGreater(naive.elapsed_years, 30)


class TestMahadashaTimeline(unittest.TestCase):
    def setUp(self):
        self.timeline = DashaTimeline()

    def test_full_cycle(self):
        periods = self.timeline.mahadasha_timeline("Ashwini", BIRTH)
        self.assertEqual(len(periods), 9)
        self.assertEqual(periods[0].planet, "Ketu")
        self.assertEqual(periods[0].start, BIRTH)
        self.assertAlmostEqual(
            (periods[-1].end - (BIRTH + years(120))).total_seconds(), 0.0, delta=1.0
        )
        for prev, nxt in zip(periods, periods[1:]):
            self.assertAlmostEqual((nxt.start - prev.end).total_seconds(), 0.0, delta=1.0)

    def test_antardashas_fill_mahadasha(self):
        for period in self.timeline.mahadasha_timeline("Rohini", BIRTH):
            self.assertEqual(len(period.antardashas), 9)
            self.assertEqual(period.antardashas[0].planet, period.planet)
            self.assertEqual(period.antardashas[0].start, period.start)
            self.assertAlmostEqual(
                (period.antardashas[-1].end - period.end).total_seconds(), 0.0, delta=1.0
            )

    def test_multiple_cycles(self):
        periods = self.timeline.mahadasha_timeline("Ashwini", BIRTH, cycles=2)
        self.assertEqual(len(periods), 18)
        self.assertAlmostEqual(periods[9].start_offset_years, 120.0)

    def test_invalid_cycles(self):
        with self.assertRaises(ConfigurationError):
            self.timeline.mahadasha_timeline("Ashwini", BIRTH, cycles=0)


if __name__ == "__main__":
    unittest.main()
