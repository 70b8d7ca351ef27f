"""
Tests for the gzip JSON record snapshot.
"""

import gzip
import json
import os
import shutil
import stat
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from GeoReverse.data.models import LocationRecord
from GeoReverse.data.snapshot import SNAPSHOT_FORMAT, SNAPSHOT_VERSION, SnapshotStore
from GeoReverse.exceptions import SnapshotError


RECORDS = [
    LocationRecord(country_code="FR", city="Paris", latitude=48.85341, longitude=2.3488,
                   population=2138551, state="Île-de-France", county="Paris"),
    LocationRecord(country_code="DE", city="Berlin", latitude=52.52437, longitude=13.41053,
                   population=3426354, state="Berlin"),
]


class TestSnapshotStore(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = Path(self.temp_dir) / "cache" / "geocode.gz"
        self.store = SnapshotStore(self.path)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write_document(self, document):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with gzip.open(self.path, "wt", encoding="utf-8") as f:
            json.dump(document, f)

    def test_missing_file_loads_none(self):
        self.assertFalse(self.store.exists())
        self.assertIsNone(self.store.load())

    def test_save_then_load(self):
        self.store.save(RECORDS)
        self.assertTrue(self.store.exists())
        self.assertEqual(self.store.load(), RECORDS)

    def test_boundary_values_round_trip(self):
        edges = [
            LocationRecord(country_code="AQ", city="South Pole", latitude=-90.0, longitude=-180.0),
            LocationRecord(country_code="", city="", latitude=90.0, longitude=180.0, population=0),
            LocationRecord(country_code="FJ", city="Suva", latitude=-18.14161, longitude=178.44149,
                           population=77366, state="Central", county="Rewa"),
        ]
        self.store.save(edges)
        self.assertEqual(self.store.load(), edges)

    def test_empty_record_list_round_trip(self):
        self.store.save([])
        self.assertEqual(self.store.load(), [])

    @unittest.skipIf(os.name != "posix", "POSIX permissions")
    def test_saved_file_follows_umask(self):
        old_umask = os.umask(0o022)
        try:
            self.store.save(RECORDS)
        finally:
            os.umask(old_umask)
        self.assertEqual(stat.S_IMODE(os.stat(self.path).st_mode), 0o644)

    def test_country_names_are_not_persisted(self):
        self.store.save([RECORDS[0].with_country("France")])
        self.assertEqual(self.store.load()[0].country, "")

    def test_document_layout(self):
        self.store.save(RECORDS)
        with gzip.open(self.path, "rt", encoding="utf-8") as f:
            document = json.load(f)
        self.assertEqual(document["format"], SNAPSHOT_FORMAT)
        self.assertEqual(document["version"], SNAPSHOT_VERSION)
        self.assertEqual(document["count"], 2)
        self.assertIn("created", document)
        self.assertEqual(document["records"][0]["city"], "Paris")

    def test_save_replaces_existing_snapshot_without_leftovers(self):
        self.store.save(RECORDS)
        self.store.save(RECORDS[:1])
        self.assertEqual(self.store.load(), RECORDS[:1])
        self.assertEqual(os.listdir(self.path.parent), ["geocode.gz"])

    def test_garbage_bytes_load_none(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_bytes(b"definitely not gzip")
        self.assertIsNone(self.store.load())

    def test_truncated_stream_loads_none(self):
        self.store.save(RECORDS)
        data = self.path.read_bytes()
        self.path.write_bytes(data[: len(data) // 2])
        self.assertIsNone(self.store.load())

    def test_wrong_version_loads_none(self):
        self.write_document({"format": SNAPSHOT_FORMAT, "version": SNAPSHOT_VERSION + 1,
                             "count": 0, "records": []})
        self.assertIsNone(self.store.load())

    def test_wrong_format_loads_none(self):
        self.write_document({"format": "something-else", "version": SNAPSHOT_VERSION, "records": []})
        self.assertIsNone(self.store.load())
        self.write_document([1, 2, 3])
        self.assertIsNone(self.store.load())

    def test_malformed_record_loads_none(self):
        self.write_document({"format": SNAPSHOT_FORMAT, "version": SNAPSHOT_VERSION, "count": 1,
                             "records": [{"city": "Nowhere"}]})
        self.assertIsNone(self.store.load())

    def test_count_mismatch_loads_none(self):
        self.write_document({"format": SNAPSHOT_FORMAT, "version": SNAPSHOT_VERSION, "count": 5,
                             "records": [RECORDS[0].to_snapshot_dict()]})
        self.assertIsNone(self.store.load())

    def test_failed_write_raises_and_cleans_up(self):
        self.store.save(RECORDS)
        with mock.patch("GeoReverse.data.snapshot.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(SnapshotError):
                self.store.save(RECORDS[:1])
        # The previous snapshot is untouched and no temp file remains
        self.assertEqual(self.store.load(), RECORDS)
        self.assertEqual(os.listdir(self.path.parent), ["geocode.gz"])

    def test_delete(self):
        self.store.save(RECORDS)
        self.assertTrue(self.store.delete())
        self.assertFalse(self.store.exists())
        self.assertFalse(self.store.delete())


if __name__ == "__main__":
    unittest.main()
