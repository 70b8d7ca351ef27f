"""
Turn raw GeoNames city rows into LocationRecords.
"""

import time
from typing import Iterable, List

from GeoReverse.data.models import CodeLookupTable, LocationRecord
from GeoReverse.data.reader import Row
from GeoReverse.utils.logging import get_logger

logger = get_logger(__name__)

# Column positions in the GeoNames cities dump
COL_CITY = 1
COL_LATITUDE = 4
COL_LONGITUDE = 5
COL_COUNTRY_CODE = 8
COL_STATE_CODE = 10
COL_COUNTY_CODE = 11
COL_POPULATION = 14

REQUIRED_COLUMNS = max(COL_CITY, COL_LATITUDE, COL_LONGITUDE, COL_COUNTRY_CODE) + 1


class RecordNormalizer:
    """
    Join city rows with the state and county code tables.

    Rows that cannot produce a valid record are skipped; ``skipped`` holds
    the count from the last ``normalize`` call.
    """

    def __init__(self, state_table: CodeLookupTable, county_table: CodeLookupTable):
        self.state_table = state_table
        self.county_table = county_table
        self.skipped = 0

    def normalize_row(self, row: Row) -> LocationRecord:
        """
        Build a record from one row.

        Raises:
            ValueError: If the row is too short or its coordinates are unusable
        """
        if len(row) < REQUIRED_COLUMNS:
            raise ValueError(f"Expected at least {REQUIRED_COLUMNS} columns, got {len(row)}")

        country_code = row.get(COL_COUNTRY_CODE).strip()
        admin1 = row.get(COL_STATE_CODE).strip()
        admin2 = row.get(COL_COUNTY_CODE).strip()

        population = row.get_int(COL_POPULATION, 0)
        if population < 0:
            population = 0

        return LocationRecord(
            country_code=country_code,
            city=row.get(COL_CITY).strip(),
            latitude=row.get_float(COL_LATITUDE),
            longitude=row.get_float(COL_LONGITUDE),
            population=population,
            state=self.state_table.get(f"{country_code}.{admin1}", ""),
            county=self.county_table.get(f"{country_code}.{admin1}.{admin2}", ""),
        )

    def normalize(self, rows: Iterable[Row]) -> List[LocationRecord]:
        start_time = time.time()
        self.skipped = 0
        records = []

        for line_number, row in enumerate(rows, 1):
            try:
                records.append(self.normalize_row(row))
            except ValueError as e:
                self.skipped += 1
                logger.debug(f"Skipping city row {line_number}: {e}")

        if self.skipped:
            logger.warning(f"Skipped {self.skipped} malformed city rows")
        logger.info(f"Normalized {len(records)} cities in {time.time() - start_time:.2f} seconds")
        return records


def filter_by_population(records: Iterable[LocationRecord], min_population: int = 0) -> List[LocationRecord]:
    """
    Keep the records whose population is at least ``min_population``.

    Raises:
        ValueError: If the threshold is negative
    """
    if min_population < 0:
        raise ValueError(f"Minimum population must be non-negative, got {min_population}")
    return [record for record in records if record.population >= min_population]
