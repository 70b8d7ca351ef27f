"""
Data handling for GeoReverse: record model, raw source import,
normalization and the on-disk snapshot.
"""

from GeoReverse.data.models import LocationRecord, CodeLookupTable
from GeoReverse.data.reader import Row, read_delimited
from GeoReverse.data.importer import (
    ByteSource, UrlFetcher, GeonamesImporter, get_data_directory, load_country_table
)
from GeoReverse.data.normalizer import RecordNormalizer, filter_by_population
from GeoReverse.data.snapshot import SnapshotStore, SNAPSHOT_VERSION

__all__ = [
    'LocationRecord',
    'CodeLookupTable',
    'Row',
    'read_delimited',
    'ByteSource',
    'UrlFetcher',
    'GeonamesImporter',
    'get_data_directory',
    'load_country_table',
    'RecordNormalizer',
    'filter_by_population',
    'SnapshotStore',
    'SNAPSHOT_VERSION',
]
