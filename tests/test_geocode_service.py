"""
Tests for the GeocodeService facade.
"""

import shutil
import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

from GeoReverse.config import get_config
from GeoReverse.data.models import LocationRecord
from GeoReverse.data.snapshot import SnapshotStore
from GeoReverse.exceptions import ConfigurationError, DataImportError, SnapshotError
from GeoReverse.services.geocode_service import GeocodeService

from geonames_fixtures import FakeFetcher, VALID_CITY_COUNT


class GeocodeServiceTestCase(unittest.TestCase):

    def setUp(self):
        get_config()._initialize()
        self.temp_dir = tempfile.mkdtemp()
        self.snapshot_path = Path(self.temp_dir) / "geocode.gz"
        self.fetcher = FakeFetcher()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def make_service(self, min_population=0, **kwargs):
        kwargs.setdefault("snapshot_path", self.snapshot_path)
        kwargs.setdefault("fetcher", self.fetcher)
        return GeocodeService(min_population=min_population, **kwargs)


class TestQueries(GeocodeServiceTestCase):

    def test_nearest_city_without_threshold(self):
        service = self.make_service()
        results = service.query(48.80, 2.13)
        self.assertEqual(len(results), 1)
        versailles = results[0]
        self.assertEqual(versailles.city, "Versailles")
        self.assertEqual(versailles.country, "France")
        self.assertEqual(versailles.state, "Île-de-France")
        self.assertEqual(versailles.county, "Yvelines")

    def test_threshold_excludes_small_cities(self):
        service = self.make_service(min_population=100000)
        self.assertEqual(service.query(48.80, 2.13)[0].city, "Paris")

    def test_far_away_query_still_returns_one_city(self):
        service = self.make_service()
        self.assertEqual(len(service.query(-89.0, 179.0)), 1)

    def test_unknown_country_code_has_empty_name(self):
        service = self.make_service()
        nowhere = service.query(10.0, 10.0)[0]
        self.assertEqual(nowhere.city, "Nowhere")
        self.assertEqual(nowhere.country, "")

    def test_threshold_above_every_city_gives_empty_results(self):
        service = self.make_service(min_population=10 ** 9)
        self.assertEqual(service.record_count, 0)
        self.assertEqual(service.query(48.8, 2.3), [])

    def test_query_does_not_mutate_shared_records(self):
        service = self.make_service()
        self.assertEqual(service.query(48.85, 2.35)[0].country, "France")
        self.assertTrue(all(record.country == "" for record in service._records))

    def test_concurrent_queries(self):
        service = self.make_service()
        results = []

        def worker():
            for _ in range(50):
                results.append(service.query(52.5, 13.4)[0].city)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(set(results), {"Berlin"})
        self.assertEqual(len(results), 200)

    def test_negative_threshold_rejected(self):
        with self.assertRaises(ValueError):
            self.make_service(min_population=-5)


class TestConstruction(GeocodeServiceTestCase):

    def test_ingestion_saves_unfiltered_records(self):
        service = self.make_service(min_population=100000)
        self.assertFalse(service.snapshot_used)
        self.assertEqual(service.record_count, 3)
        cached = SnapshotStore(self.snapshot_path).load()
        self.assertEqual(len(cached), VALID_CITY_COUNT)

    def test_snapshot_is_reused_without_fetching(self):
        self.make_service(min_population=100000)
        offline = FakeFetcher(fail=True)
        service = self.make_service(min_population=0, fetcher=offline)
        self.assertTrue(service.snapshot_used)
        self.assertEqual(offline.requests, [])
        self.assertEqual(service.record_count, VALID_CITY_COUNT)
        self.assertEqual(service.query(48.80, 2.13)[0].city, "Versailles")

    def test_rebuild_after_snapshot_removed_is_identical(self):
        first = SnapshotStore(self.snapshot_path)
        self.make_service()
        original = first.load()
        first.delete()
        self.make_service()
        self.assertEqual(first.load(), original)

    def test_corrupt_snapshot_triggers_ingestion(self):
        self.snapshot_path.write_bytes(b"\x1f\x8b garbage")
        service = self.make_service()
        self.assertFalse(service.snapshot_used)
        self.assertEqual(len(self.fetcher.requests), 3)
        self.assertEqual(len(SnapshotStore(self.snapshot_path).load()), VALID_CITY_COUNT)

    def test_snapshot_save_failure_is_not_fatal(self):
        with mock.patch.object(SnapshotStore, "save", side_effect=SnapshotError("read-only")):
            service = self.make_service()
        self.assertEqual(service.query(52.5, 13.4)[0].city, "Berlin")
        self.assertFalse(self.snapshot_path.exists())

    def test_force_ingest_skips_a_usable_snapshot(self):
        self.make_service()
        fetcher = FakeFetcher()
        service = self.make_service(fetcher=fetcher, force_ingest=True)
        self.assertFalse(service.snapshot_used)
        self.assertEqual(len(fetcher.requests), 3)

    def test_failed_force_ingest_leaves_snapshot_in_place(self):
        self.make_service()
        original = SnapshotStore(self.snapshot_path).load()
        with self.assertRaises(DataImportError):
            self.make_service(fetcher=FakeFetcher(fail=True), force_ingest=True)
        self.assertEqual(SnapshotStore(self.snapshot_path).load(), original)

    def test_missing_country_file_aborts(self):
        with self.assertRaises(ConfigurationError):
            self.make_service(country_path=Path(self.temp_dir) / "countries.csv")
        self.assertEqual(self.fetcher.requests, [])

    def test_custom_country_file(self):
        countries = Path(self.temp_dir) / "countries.csv"
        countries.write_text('FR,"France, République"\n', encoding="utf-8")
        service = self.make_service(country_path=countries)
        self.assertEqual(service.query(48.85, 2.35)[0].country, "France, République")
        self.assertEqual(service.query(52.5, 13.4)[0].country, "")

    def test_fetch_failure_propagates(self):
        with self.assertRaises(DataImportError):
            self.make_service(fetcher=FakeFetcher(fail=True))
        self.assertFalse(self.snapshot_path.exists())

    def test_snapshot_path_defaults_to_data_directory(self):
        get_config().set("data.directory", self.temp_dir)
        get_config().set("data.snapshot_file", "cities.gz")
        service = GeocodeService(fetcher=self.fetcher)
        self.assertEqual(service.snapshot.path, Path(self.temp_dir) / "cities.gz")
        self.assertTrue(service.snapshot.exists())

    def test_info_and_context_manager(self):
        with self.make_service(min_population=1000) as service:
            info = service.get_info()
            self.assertEqual(info["record_count"], 4)
            self.assertEqual(info["min_population"], 1000)
            self.assertEqual(info["snapshot_path"], str(self.snapshot_path))
            self.assertFalse(info["snapshot_used"])
            self.assertGreater(info["country_count"], 240)
        self.assertEqual(service.record_count, 0)


class TestSnapshotContents(GeocodeServiceTestCase):

    def test_prebuilt_snapshot_needs_no_fetcher(self):
        SnapshotStore(self.snapshot_path).save([
            LocationRecord(country_code="JP", city="Tokyo", latitude=35.6895, longitude=139.69171,
                           population=8336599, state="Tokyo"),
        ])
        service = GeocodeService(snapshot_path=self.snapshot_path, fetcher=FakeFetcher(fail=True))
        tokyo = service.query(35.0, 139.0)[0]
        self.assertEqual(tokyo.city, "Tokyo")
        self.assertEqual(tokyo.country, "Japan")

    def save_paris_and_versailles(self):
        SnapshotStore(self.snapshot_path).save([
            LocationRecord(country_code="FR", city="Paris", latitude=48.8566, longitude=2.3522,
                           population=2000000),
            LocationRecord(country_code="FR", city="Versailles", latitude=48.8049, longitude=2.1204,
                           population=85000),
        ])

    def test_closest_of_two_nearby_cities(self):
        self.save_paris_and_versailles()
        service = GeocodeService(snapshot_path=self.snapshot_path, fetcher=FakeFetcher(fail=True))
        results = service.query(48.85, 2.35)
        self.assertEqual([r.city for r in results], ["Paris"])
        self.assertEqual(results[0].country, "France")
        self.assertEqual(service.query(48.80, 2.12)[0].city, "Versailles")

    def test_raising_the_threshold_only_removes_cities(self):
        self.make_service()
        previous = None
        for threshold in (0, 12, 85416, 100000, 3000000, 10 ** 9):
            service = self.make_service(min_population=threshold, fetcher=FakeFetcher(fail=True))
            cities = {record.city for record in service._records}
            if previous is not None:
                self.assertLessEqual(cities, previous)
            previous = cities
        self.assertEqual(previous, set())


if __name__ == "__main__":
    unittest.main()
