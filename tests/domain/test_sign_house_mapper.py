import unittest

from vedic_engine.domain.kundali.errors import ConfigurationError, UnresolvedLookupError
from vedic_engine.domain.kundali.sign_house_mapper import SignHouseMapper, normalize


class TestNormalize(unittest.TestCase):
    def test_wraps_into_range(self):
        self.assertEqual(normalize(360.0), 0.0)
        self.assertAlmostEqual(normalize(-10.0), 350.0)
        self.assertAlmostEqual(normalize(725.5), 5.5)

    def test_tiny_negative_does_not_return_360(self):
        value = normalize(-1e-17)
        self.assertGreaterEqual(value, 0.0)
        self.assertLess(value, 360.0)


class TestSignHouseMapper(unittest.TestCase):
    def setUp(self):
        self.mapper = SignHouseMapper()

    def test_sign_is_floor_of_longitude_over_30(self):
        for lon in [0.0, 29.999, 30.0, 59.5, 179.0, 330.1, 359.999, -0.5, 400.0, -725.0]:
            placement = self.mapper.map(lon)
            expected = int((lon % 360) // 30) + 1
            self.assertEqual(placement.sign, expected, lon)
            self.assertTrue(1 <= placement.sign <= 12)

    def test_degree_in_sign(self):
        placement = self.mapper.map(95.25)
        self.assertEqual(placement.sign, 4)
        self.assertEqual(placement.sign_name, "Cancer")
        self.assertAlmostEqual(placement.degree_in_sign, 5.25)

    def test_house_from_reference(self):
        self.assertEqual(self.mapper.house_from_reference(1, 1), 1)
        self.assertEqual(self.mapper.house_from_reference(12, 1), 12)
        self.assertEqual(self.mapper.house_from_reference(1, 12), 2)
        self.assertEqual(self.mapper.house_from_reference(4, 10), 7)

    def test_map_counts_house_from_reference(self):
        self.assertEqual(self.mapper.map(95.0, reference_sign=4).house, 1)
        self.assertEqual(self.mapper.map(85.0, reference_sign=4).house, 12)

    def test_invalid_reference_sign(self):
        with self.assertRaises(ConfigurationError):
            self.mapper.house_from_reference(1, 13)
        with self.assertRaises(ConfigurationError):
            self.mapper.map(10.0, reference_sign=0)

    def test_round_trip_sign_and_degree(self):
        for sign in range(1, 13):
            for degree in (0.0, 0.5, 14.999, 29.99):
                lon = self.mapper.to_longitude(sign, degree)
                self.assertEqual(self.mapper.map(lon).sign, sign)

    def test_to_longitude_rejects_bad_degree(self):
        with self.assertRaises(ConfigurationError):
            self.mapper.to_longitude(1, 30.0)

    def test_sign_names(self):
        self.assertEqual(self.mapper.sign_id("Scorpio"), 8)
        self.assertEqual(self.mapper.sign_id("  sagittarius "), 9)
        self.assertEqual(self.mapper.sign_id("Moon in Aquarius"), 11)
        with self.assertRaises(UnresolvedLookupError):
            self.mapper.sign_id("Ophiuchus")

    def test_resolve_sign_defaults_to_aries(self):
        self.assertEqual(self.mapper.resolve_sign("Leo"), (5, True))
        with self.assertLogs("vedic_engine.domain.kundali.sign_house_mapper", level="WARNING"):
            self.assertEqual(self.mapper.resolve_sign("Ophiuchus"), (1, False))


class TestHouseCusps(unittest.TestCase):
    def setUp(self):
        self.mapper = SignHouseMapper()

    def test_equal_house_cusps(self):
        cusps = self.mapper.equal_house_cusps(350.0)
        self.assertEqual(len(cusps), 12)
        self.assertAlmostEqual(cusps[0], 350.0)
        self.assertAlmostEqual(cusps[1], 20.0)
        self.assertAlmostEqual(cusps[11], 320.0)

    def test_span_wrapping_through_zero(self):
        cusps = self.mapper.equal_house_cusps(350.0)
        self.assertEqual(self.mapper.house_from_cusps(355.0, cusps), 1)
        self.assertEqual(self.mapper.house_from_cusps(5.0, cusps), 1)
        self.assertEqual(self.mapper.house_from_cusps(20.0, cusps), 2)
        self.assertEqual(self.mapper.house_from_cusps(349.9, cusps), 12)

    def test_unequal_cusps(self):
        cusps = [0, 25, 55, 90, 125, 150, 180, 205, 235, 270, 305, 330]
        self.assertEqual(self.mapper.house_from_cusps(24.9, cusps), 1)
        self.assertEqual(self.mapper.house_from_cusps(100.0, cusps), 4)
        self.assertEqual(self.mapper.house_from_cusps(359.0, cusps), 12)

    def test_wrong_length_is_an_error(self):
        with self.assertRaises(ConfigurationError):
            self.mapper.house_from_cusps(10.0, [0.0] * 11)
        with self.assertRaises(ConfigurationError):
            self.mapper.house_from_cusps(10.0, None)
        with self.assertRaises(ConfigurationError):
            self.mapper.normalize_cusps([0.0] * 13)

    def test_degenerate_cusps_are_an_error(self):
        with self.assertRaises(ConfigurationError):
            self.mapper.house_from_cusps(10.0, [5.0] * 12)

    def test_reversed_cusps_are_reordered(self):
        cusps = self.mapper.equal_house_cusps(0.0)
        ordered = self.mapper.normalize_cusps(list(reversed(cusps)))
        self.assertEqual(ordered, cusps)

    def test_wrapping_cusps_in_house_order_are_kept(self):
        cusps = self.mapper.equal_house_cusps(350.0)
        self.assertEqual(self.mapper.normalize_cusps(cusps), cusps)

    def test_place_prefers_cusps(self):
        cusps = self.mapper.equal_house_cusps(15.0)
        placement = self.mapper.place(10.0, reference_sign=1, cusps=cusps)
        self.assertEqual(placement.sign, 1)
        self.assertEqual(placement.house, 12)
        self.assertEqual(self.mapper.place(10.0, reference_sign=1).house, 1)


if __name__ == "__main__":
    unittest.main()
