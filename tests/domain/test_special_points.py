import unittest

from vedic_engine.domain.kundali.errors import ConfigurationError
from vedic_engine.domain.kundali.special_points import SpecialPointCalculator
from tests.fixtures import build_chart


class TestBhriguBindu(unittest.TestCase):
    def test_moon_ahead_of_rahu(self):
        self.assertAlmostEqual(SpecialPointCalculator.bhrigu_bindu(100.0, 20.0), 60.0)

    def test_moon_behind_rahu_wraps(self):
        # Arc runs from Rahu at 300 forward through 0 to the Moon at 10
        self.assertAlmostEqual(SpecialPointCalculator.bhrigu_bindu(10.0, 300.0), 335.0)

    def test_conjunct(self):
        self.assertAlmostEqual(SpecialPointCalculator.bhrigu_bindu(45.0, 45.0), 45.0)

    def test_result_in_range(self):
        for moon in range(0, 360, 17):
            for rahu in range(0, 360, 23):
                value = SpecialPointCalculator.bhrigu_bindu(moon, rahu)
                self.assertTrue(0.0 <= value < 360.0)


class TestGulikaMandi(unittest.TestCase):
    def test_mandi_defaults_to_gulika(self):
        self.assertEqual(
            SpecialPointCalculator.gulika_mandi(45.0),
            {"Gulika": 45.0, "Mandi": 45.0},
        )

    def test_explicit_mandi(self):
        self.assertEqual(
            SpecialPointCalculator.gulika_mandi(45.0, 50.0),
            {"Gulika": 45.0, "Mandi": 50.0},
        )

    def test_absent(self):
        self.assertEqual(SpecialPointCalculator.gulika_mandi(None), {})


class TestSpecialPointCalculator(unittest.TestCase):
    def setUp(self):
        self.calculator = SpecialPointCalculator()

    def test_whole_sign_houses_without_ascendant_degree(self):
        # Moon 95, Rahu 60: midpoint 77.5 (Gemini)
        chart = build_chart(ascendant_sign=1)
        points = self.calculator.calculate(chart)
        bindu = points["Bhrigu Bindu"]
        self.assertAlmostEqual(bindu.longitude, 77.5)
        self.assertEqual(bindu.sign, 3)
        self.assertEqual(bindu.house, 3)
        self.assertNotIn("Gulika", points)

    def test_equal_houses_from_ascendant_degree(self):
        chart = build_chart(ascendant_sign=3, ascendant_longitude=80.0)
        points = self.calculator.calculate(chart, gulika=75.0)
        self.assertEqual(points["Bhrigu Bindu"].house, 12)
        self.assertEqual(points["Gulika"].house, 12)
        self.assertEqual(points["Mandi"].longitude, 75.0)

    def test_explicit_cusps(self):
        chart = build_chart(ascendant_sign=1)
        cusps = [70.0 + 30.0 * i for i in range(12)]
        points = self.calculator.calculate(chart, cusps=cusps)
        self.assertEqual(points["Bhrigu Bindu"].house, 1)

    def test_reversed_cusps(self):
        chart = build_chart(ascendant_sign=1)
        cusps = [(70.0 + 30.0 * i) % 360 for i in range(12)]
        points = self.calculator.calculate(chart, cusps=list(reversed(cusps)))
        self.assertEqual(points["Bhrigu Bindu"].house, 1)

    def test_bad_cusps(self):
        chart = build_chart()
        with self.assertRaises(ConfigurationError):
            self.calculator.calculate(chart, cusps=[0.0, 30.0])


if __name__ == "__main__":
    unittest.main()
