"""
Geocode service module for the GeoReverse package.

This module provides the reverse-geocoding facade used by both the CLI and
API layers. Construction does all the heavy lifting (snapshot restore or
full ingestion, population filter, index build); queries are read-only and
safe to run from several threads at once.
"""

import os
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from GeoReverse.config import get_config
from GeoReverse.config.manager import ConfigManager
from GeoReverse.data.importer import (
    DEFAULT_COUNTRY_FILE, ByteSource, GeonamesImporter, get_data_directory, load_country_table
)
from GeoReverse.data.models import LocationRecord
from GeoReverse.data.normalizer import RecordNormalizer, filter_by_population
from GeoReverse.data.snapshot import SnapshotStore
from GeoReverse.exceptions import SnapshotError
from GeoReverse.spatial import SpatialIndex
from GeoReverse.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)


class GeocodeService:
    """
    Nearest-city lookup over the GeoNames reference data.

    The snapshot always holds every normalized city; ``min_population`` only
    narrows what the spatial index can return.

    Args:
        min_population: Only cities with at least this population are
            returned by ``query``. Must be non-negative.
        snapshot_path: Snapshot file. Defaults to ``data.snapshot_file`` in
            the data directory.
        country_path: Comma-delimited ``code,name`` country file. Defaults to
            ``data.country_file`` or the packaged countries.csv.
        fetcher: ByteSource used when the raw data has to be downloaded
        config: Configuration to use instead of the global one
        force_ingest: Rebuild from the raw sources even when a usable snapshot
            exists. The old snapshot is only replaced once ingestion succeeds.

    Raises:
        ConfigurationError: If the country file is missing or empty
        DataImportError: If ingestion is needed and the raw data cannot be fetched
        ValueError: If min_population is negative
    """

    def __init__(
        self,
        min_population: int = 0,
        snapshot_path: Optional[Union[str, Path]] = None,
        country_path: Optional[Union[str, Path]] = None,
        fetcher: Optional[ByteSource] = None,
        config: Optional[ConfigManager] = None,
        force_ingest: bool = False
    ):
        if min_population < 0:
            raise ValueError(f"Minimum population must be non-negative, got {min_population}")

        start_time = time.time()
        self.config = config or get_config()
        self.min_population = min_population
        self.fetcher = fetcher

        if snapshot_path is None:
            snapshot_path = os.path.join(get_data_directory(self.config),
                                         self.config.get("data.snapshot_file", "geocode.gz"))
        if country_path is None:
            country_path = self.config.get("data.country_file") or DEFAULT_COUNTRY_FILE

        self.country_path = Path(country_path)
        self.snapshot = SnapshotStore(snapshot_path)

        self.countries = load_country_table(self.country_path)

        records = None if force_ingest else self.snapshot.load()
        self.snapshot_used = records is not None
        if records is None:
            records = self._ingest()

        self._records: List[LocationRecord] = filter_by_population(records, min_population)
        if min_population:
            logger.info(f"{len(self._records)} of {len(records)} cities have a population of at least {min_population}")

        self._index = SpatialIndex(record.coordinates for record in self._records)
        self.build_seconds = time.time() - start_time
        logger.info(f"Geocode service ready with {len(self._records)} cities in {self.build_seconds:.2f} seconds")

    def _ingest(self) -> List[LocationRecord]:
        """Fetch, normalize and snapshot the full raw dataset."""
        logger.info("Building city records from the GeoNames sources")
        sources = GeonamesImporter(fetcher=self.fetcher, config=self.config).fetch_all()

        normalizer = RecordNormalizer(sources.state_table, sources.county_table)
        records = normalizer.normalize(sources.city_rows)

        try:
            self.snapshot.save(records)
        except SnapshotError as e:
            logger.error(f"Continuing without a snapshot: {e}")

        return records

    @property
    def record_count(self) -> int:
        """Number of cities the index can return."""
        return len(self._records)

    def query(self, lat: float, lon: float) -> List[LocationRecord]:
        """
        Find the city nearest to a coordinate.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            A single-element list with the nearest city, with its country
            name filled in. Empty only when no city passed the population
            filter.
        """
        matches = self._index.nearest(lat, lon, 1)
        results = []
        for distance, idx in matches:
            record = self._records[idx]
            results.append(record.with_country(self.countries.get(record.country_code, "")))
        logger.debug(f"Query ({lat}, {lon}) matched {[r.city for r in results]}")
        return results

    def get_info(self) -> Dict[str, Any]:
        """
        Get information about the loaded dataset.

        Returns:
            Dictionary with record and index statistics
        """
        return {
            "record_count": self.record_count,
            "country_count": len(self.countries),
            "min_population": self.min_population,
            "snapshot_path": str(self.snapshot.path),
            "snapshot_used": self.snapshot_used,
            "country_file": str(self.country_path),
            "index_depth": self._index.depth,
            "build_seconds": round(self.build_seconds, 3),
        }

    def close(self) -> None:
        """Release the in-memory index and records."""
        self._records = []
        self._index = SpatialIndex([])

    def __enter__(self):
        """Context manager entry point."""
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """Context manager exit point."""
        self.close()
