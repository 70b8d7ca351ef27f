"""
Delimited text reader for the GeoNames reference files.

The reader turns raw text into Row objects with indexed, typed field
access. Parsing is done by pandas; lines with more fields than expected are
skipped and counted instead of aborting the read.
"""

import csv
import io
import math
from typing import Any, Iterator, List, Optional, Sequence

import pandas as pd

from GeoReverse.utils.logging import get_logger

logger = get_logger(__name__)


class Row:
    """One parsed line. Field access is by 0-based column index."""

    __slots__ = ('_fields',)

    def __init__(self, fields: Sequence[str]):
        self._fields = tuple(fields)

    @classmethod
    def from_values(cls, values: Sequence[Any]) -> 'Row':
        """
        Build a row from a pandas record.

        pandas pads short lines with NaN; the row ends at the first padded
        value so ``len(row)`` is the number of fields actually present.
        """
        fields: List[str] = []
        for value in values:
            if not isinstance(value, str):
                break
            fields.append(value)
        return cls(fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Row({list(self._fields)!r})"

    def get(self, index: int, default: str = "") -> str:
        if index < len(self._fields):
            return self._fields[index]
        return default

    def get_float(self, index: int) -> float:
        """
        Parse a field as a finite float.

        Raises:
            ValueError: If the field is missing, empty or not a finite number
        """
        value = float(self.get(index).strip())
        if not math.isfinite(value):
            raise ValueError(f"Column {index} is not a finite number: {value}")
        return value

    def get_int(self, index: int, default: int = 0) -> int:
        """Parse a field as an integer, returning ``default`` when it is missing or garbled."""
        try:
            return int(self.get(index).strip())
        except ValueError:
            return default


class DelimitedReader:
    """
    Iterable over the rows of a delimited text document.

    Args:
        text: Document content
        delimiter: Field separator
        columns: Expected number of fields per line. Lines with more fields
            are skipped; when None the width of the first line is used.
        quoted: Honour double-quoted fields (CSV) instead of treating quotes
            as ordinary characters (GeoNames dumps)
    """

    def __init__(self, text: str, delimiter: str = '\t', columns: Optional[int] = None,
                 quoted: bool = False):
        self.text = text
        self.delimiter = delimiter
        self.columns = columns
        self.quoted = quoted
        self.skipped = 0

    def _on_bad_line(self, fields: List[str]) -> None:
        self.skipped += 1
        return None

    def _frame(self) -> pd.DataFrame:
        return pd.read_csv(
            io.StringIO(self.text),
            sep=self.delimiter,
            header=None,
            index_col=False,
            names=list(range(self.columns)) if self.columns else None,
            dtype=str,
            na_filter=False,
            quoting=csv.QUOTE_MINIMAL if self.quoted else csv.QUOTE_NONE,
            skip_blank_lines=True,
            engine='python',
            on_bad_lines=self._on_bad_line,
        )

    def __iter__(self) -> Iterator[Row]:
        self.skipped = 0
        if not self.text.strip():
            return
        frame = self._frame()
        if self.skipped:
            logger.warning(f"Skipped {self.skipped} lines with too many fields")
        for values in frame.itertuples(index=False, name=None):
            yield Row.from_values(values)


def read_delimited(text: str, delimiter: str = '\t', columns: Optional[int] = None,
                   quoted: bool = False) -> DelimitedReader:
    """Convenience wrapper returning a DelimitedReader."""
    return DelimitedReader(text, delimiter=delimiter, columns=columns, quoted=quoted)
