"""
Tests for turning GeoNames rows into LocationRecords.
"""

import random
import unittest

from GeoReverse.data.models import CodeLookupTable, LocationRecord
from GeoReverse.data.normalizer import RecordNormalizer, filter_by_population
from GeoReverse.data.reader import read_delimited

from geonames_fixtures import CITY_LINES, COUNTY_LINES, STATE_LINES, VALID_CITY_COUNT


def table(lines, name):
    return CodeLookupTable.from_rows(read_delimited("\n".join(lines), columns=4), name=name)


class TestRecordNormalizer(unittest.TestCase):

    def setUp(self):
        self.normalizer = RecordNormalizer(table(STATE_LINES, "states"), table(COUNTY_LINES, "counties"))
        self.records = self.normalizer.normalize(read_delimited("\n".join(CITY_LINES), columns=19))
        self.by_city = {record.city: record for record in self.records}

    def test_valid_rows_become_records(self):
        self.assertEqual(len(self.records), VALID_CITY_COUNT)
        paris = self.by_city["Paris"]
        self.assertEqual(paris.country_code, "FR")
        self.assertAlmostEqual(paris.latitude, 48.85341)
        self.assertAlmostEqual(paris.longitude, 2.3488)
        self.assertEqual(paris.population, 2138551)
        self.assertEqual(paris.state, "Île-de-France")
        self.assertEqual(paris.county, "Paris")
        self.assertEqual(paris.country, "")

    def test_county_uses_composite_key(self):
        self.assertEqual(self.by_city["Versailles"].county, "Yvelines")
        self.assertEqual(self.by_city["Windhoek"].country_code, "NA")
        self.assertEqual(self.by_city["Windhoek"].state, "Khomas")
        self.assertEqual(self.by_city["Windhoek"].county, "")

    def test_unknown_codes_degrade_to_empty(self):
        nowhere = self.by_city["Nowhere"]
        self.assertEqual(nowhere.state, "")
        self.assertEqual(nowhere.county, "")

    def test_garbled_population_is_zero(self):
        self.assertEqual(self.by_city["Tinyville"].population, 0)

    def test_malformed_rows_are_counted(self):
        self.assertEqual(self.normalizer.skipped, 3)
        for name in ("Lost", "Polar", "Stub"):
            self.assertNotIn(name, self.by_city)

    def test_normalization_is_repeatable(self):
        again = self.normalizer.normalize(read_delimited("\n".join(CITY_LINES), columns=19))
        self.assertEqual(again, self.records)
        self.assertEqual(self.normalizer.skipped, 3)

    def test_too_wide_first_line_only_loses_that_line(self):
        lines = [CITY_LINES[0] + "\textra"] + CITY_LINES[1:4]
        records = self.normalizer.normalize(read_delimited("\n".join(lines), columns=19))
        self.assertEqual([r.city for r in records], ["Versailles", "Berlin", "Windhoek"])
        self.assertEqual(self.normalizer.skipped, 0)


class TestFilterByPopulation(unittest.TestCase):

    def setUp(self):
        self.records = [
            LocationRecord(country_code="FR", city="Paris", latitude=48.85, longitude=2.35, population=2138551),
            LocationRecord(country_code="FR", city="Versailles", latitude=48.80, longitude=2.13, population=85416),
            LocationRecord(country_code="US", city="Tinyville", latitude=40.0, longitude=-100.0, population=0),
        ]

    def test_zero_threshold_keeps_everything(self):
        self.assertEqual(filter_by_population(self.records), self.records)

    def test_threshold_is_inclusive(self):
        kept = filter_by_population(self.records, 85416)
        self.assertEqual([r.city for r in kept], ["Paris", "Versailles"])
        kept = filter_by_population(self.records, 100000)
        self.assertEqual([r.city for r in kept], ["Paris"])

    def test_higher_threshold_keeps_a_subset(self):
        rng = random.Random(3)
        records = [
            LocationRecord(country_code="FR", city=f"Town {i}", latitude=45.0, longitude=2.0,
                           population=rng.choice([0, 10, 1000, rng.randint(0, 10 ** 6)]))
            for i in range(200)
        ]
        thresholds = sorted(rng.randint(0, 10 ** 6) for _ in range(10)) + [0, 10, 1000]
        for low in thresholds:
            for high in thresholds:
                if high < low:
                    continue
                low_set = set(filter_by_population(records, low))
                high_set = set(filter_by_population(records, high))
                self.assertLessEqual(high_set, low_set)

    def test_negative_threshold_rejected(self):
        with self.assertRaises(ValueError):
            filter_by_population(self.records, -1)


if __name__ == "__main__":
    unittest.main()
