"""
Data model for the GeoReverse package.

LocationRecord is one city of the reference dataset; CodeLookupTable maps
GeoNames admin codes to display names.
"""

from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple


@dataclass(frozen=True)
class LocationRecord:
    """
    A single city entry.

    Records are immutable. The country name is not part of the ingested
    data: it is filled in per query by ``with_country`` and never written
    to the snapshot.
    """
    country_code: str
    city: str
    latitude: float
    longitude: float
    population: int = 0
    state: str = ""
    county: str = ""
    country: str = ""

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range [-90, 90]: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range [-180, 180]: {self.longitude}")
        if self.population < 0:
            raise ValueError(f"Population must be non-negative: {self.population}")

    @property
    def coordinates(self) -> Tuple[float, float]:
        """(latitude, longitude) pair used by the spatial index."""
        return self.latitude, self.longitude

    def with_country(self, country: str) -> 'LocationRecord':
        """Return a copy of this record with the country name filled in."""
        return replace(self, country=country)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_snapshot_dict(self) -> Dict[str, Any]:
        """Fields persisted in the snapshot (everything except the country name)."""
        data = asdict(self)
        del data['country']
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'LocationRecord':
        """
        Build a record from a mapping of field names to values.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a value has the wrong type or is out of range
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown LocationRecord fields: {', '.join(sorted(unknown))}")

        population = data.get('population', 0)
        if isinstance(population, bool) or not isinstance(population, int):
            raise ValueError(f"Population must be an integer, got {population!r}")

        return cls(
            country_code=_as_str(data['country_code']),
            city=_as_str(data['city']),
            latitude=_as_float(data['latitude']),
            longitude=_as_float(data['longitude']),
            population=population,
            state=_as_str(data.get('state', "")),
            county=_as_str(data.get('county', "")),
            country=_as_str(data.get('country', "")),
        )


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Expected a string, got {value!r}")
    return value


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected a number, got {value!r}")
    return float(value)


class CodeLookupTable(Mapping[str, str]):
    """
    Read-only mapping from an admin code to its display name.

    Codes are composite GeoNames keys: ``CC`` for countries, ``CC.ADMIN1``
    for states and ``CC.ADMIN1.ADMIN2`` for counties.
    """

    def __init__(self, entries: Optional[Iterable[Tuple[str, str]]] = None, name: str = "codes"):
        self.name = name
        self._names: Dict[str, str] = {}
        for code, display_name in entries or ():
            # A later duplicate wins
            self._names[code] = display_name

    @classmethod
    def from_rows(cls, rows: Iterable[Any], name: str = "codes") -> 'CodeLookupTable':
        """
        Build a table from rows whose first two fields are (code, name).

        Rows with fewer than two fields or an empty code are ignored.
        """
        def pairs():
            for row in rows:
                if len(row) < 2:
                    continue
                code = row.get(0).strip()
                if code:
                    yield code, row.get(1).strip()
        return cls(pairs(), name=name)

    def get(self, code: str, default: str = "") -> str:
        return self._names.get(code, default)

    def __getitem__(self, code: str) -> str:
        return self._names[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"CodeLookupTable(name={self.name!r}, size={len(self)})"
