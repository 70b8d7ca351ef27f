"""
Data importer module for the GeoReverse package.

This module locates the data directory, fetches the raw GeoNames reference
files through a ByteSource and turns them into rows and code tables ready
for normalization.
"""

import io
import os
import sys
import time
import urllib.error
import urllib.request
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from GeoReverse.config import get_config
from GeoReverse.config.manager import ConfigManager
from GeoReverse.data.models import CodeLookupTable
from GeoReverse.data.reader import Row, read_delimited
from GeoReverse.exceptions import ConfigurationError, DataImportError
from GeoReverse.utils.logging import get_logger

logger = get_logger(__name__)

# Widths of the GeoNames dumps
CITY_COLUMNS = 19
STATE_CODE_COLUMNS = 4
COUNTY_CODE_COLUMNS = 4

PACKAGE_DATA_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_COUNTRY_FILE = os.path.join(PACKAGE_DATA_DIR, 'countries.csv')


def get_data_directory(config: Optional[ConfigManager] = None) -> str:
    """
    Get the directory where GeoReverse data is stored.

    This function checks the following locations in order:
    1. The ``data.directory`` configuration setting
    2. GEOREVERSE_DATA_DIR environment variable
    3. ~/.georeverse/data directory
    4. The data directory within the package

    Returns:
        Path to the data directory (created if it is configured explicitly)
    """
    config = config or get_config()

    configured = config.get_data_location()
    if configured:
        os.makedirs(configured, exist_ok=True)
        return configured

    if 'GEOREVERSE_DATA_DIR' in os.environ:
        data_dir = os.environ['GEOREVERSE_DATA_DIR']
        os.makedirs(data_dir, exist_ok=True)
        return data_dir

    home_data_dir = os.path.join(os.path.expanduser('~'), '.georeverse', 'data')
    if os.path.isdir(home_data_dir):
        return home_data_dir

    if hasattr(sys, 'frozen'):
        # For PyInstaller
        return os.path.join(os.path.dirname(sys.executable), 'data')

    return PACKAGE_DATA_DIR


class ByteSource(Protocol):
    """Anything that can retrieve the raw bytes behind a URL."""

    def fetch(self, url: str) -> bytes:
        ...


class UrlFetcher:
    """
    Default ByteSource backed by urllib.

    A single opener is built once and reused for every fetch.
    """

    def __init__(self, timeout: float = 60):
        self.timeout = timeout
        self._opener = urllib.request.build_opener()
        self._opener.addheaders = [('User-Agent', 'GeoReverse')]

    def fetch(self, url: str) -> bytes:
        logger.info(f"Downloading {url}...")
        start_time = time.time()
        try:
            with self._opener.open(url, timeout=self.timeout) as response:
                payload = response.read()
        except (urllib.error.URLError, OSError, ValueError) as e:
            logger.error(f"Failed to download {url}: {e}")
            raise DataImportError(
                f"Failed to download {url}: {e}",
                context={"url": url},
                cause=e
            )
        logger.info(f"Downloaded {len(payload)} bytes from {url} in {time.time() - start_time:.2f} seconds")
        return payload


def _decode(payload: bytes) -> str:
    try:
        return payload.decode('utf-8')
    except UnicodeDecodeError:
        logger.warning("UTF-8 decoding failed, trying with ISO-8859-1")
        return payload.decode('ISO-8859-1')


def load_country_table(path: Union[str, Path]) -> CodeLookupTable:
    """
    Load the country code table from a comma-delimited ``code,name`` file.

    Args:
        path: Path to the country reference file

    Returns:
        CodeLookupTable keyed by ISO country code

    Raises:
        ConfigurationError: If the file is missing, unreadable or has no entries
    """
    try:
        with open(path, 'rb') as f:
            text = _decode(f.read())
    except OSError as e:
        raise ConfigurationError(
            f"Country reference file could not be read: {path}",
            context={"path": str(path)},
            cause=e
        )

    table = CodeLookupTable.from_rows(read_delimited(text, delimiter=',', columns=2, quoted=True),
                                      name="countries")
    if not table:
        raise ConfigurationError(
            f"Country reference file has no entries: {path}",
            context={"path": str(path)}
        )

    logger.info(f"Loaded {len(table)} countries from {path}")
    return table


class RawSources:
    """The parsed raw inputs of one ingestion run."""

    def __init__(self, city_rows: List[Row], state_table: CodeLookupTable,
                 county_table: CodeLookupTable):
        self.city_rows = city_rows
        self.state_table = state_table
        self.county_table = county_table

    def __repr__(self) -> str:
        return (f"RawSources(cities={len(self.city_rows)}, "
                f"states={len(self.state_table)}, counties={len(self.county_table)})")


class GeonamesImporter:
    """
    Fetch and parse the GeoNames reference files.

    Args:
        fetcher: ByteSource used for every download. Defaults to a UrlFetcher
            configured with ``data.download_timeout``.
        config: Configuration to read source URLs from. Defaults to the
            global configuration.
    """

    def __init__(self, fetcher: Optional[ByteSource] = None,
                 config: Optional[ConfigManager] = None) -> None:
        self.config = config or get_config()
        self.fetcher = fetcher or UrlFetcher(timeout=self.config.get("data.download_timeout", 60))
        self.urls: Dict[str, str] = self.config.get_source_urls()
        self.cities_member: str = self.config.get("data.cities_member", "cities1000.txt")

    def fetch_city_rows(self) -> List[Row]:
        """
        Download the cities archive and parse its member file.

        Raises:
            DataImportError: If the download fails or the archive is unusable
        """
        url = self.urls["cities"]
        payload = self.fetcher.fetch(url)
        try:
            with zipfile.ZipFile(io.BytesIO(payload)) as archive:
                raw = archive.read(self.cities_member)
        except KeyError as e:
            raise DataImportError(
                f"Archive {url} does not contain {self.cities_member}",
                context={"url": url, "member": self.cities_member},
                cause=e
            )
        except zipfile.BadZipFile as e:
            raise DataImportError(
                f"Archive {url} is not a valid zip file",
                context={"url": url},
                cause=e
            )

        reader = read_delimited(_decode(raw), delimiter='\t', columns=CITY_COLUMNS)
        rows = list(reader)
        logger.info(f"Parsed {len(rows)} city rows from {self.cities_member}")
        return rows

    def fetch_code_table(self, key: str, columns: int) -> CodeLookupTable:
        """Download one admin code file and build its lookup table."""
        payload = self.fetcher.fetch(self.urls[key])
        table = CodeLookupTable.from_rows(
            read_delimited(_decode(payload), delimiter='\t', columns=columns),
            name=key
        )
        logger.info(f"Loaded {len(table)} {key.replace('_', ' ')}")
        return table

    def fetch_all(self) -> RawSources:
        start_time = time.time()
        state_table = self.fetch_code_table("state_codes", STATE_CODE_COLUMNS)
        county_table = self.fetch_code_table("county_codes", COUNTY_CODE_COLUMNS)
        city_rows = self.fetch_city_rows()
        logger.info(f"Fetched raw sources in {time.time() - start_time:.2f} seconds")
        return RawSources(city_rows, state_table, county_table)
