"""
Gzip-compressed JSON snapshot of the normalized record list.

Building the record list requires downloading and joining the GeoNames
dumps, so the result is cached on disk and reused on later starts. The file
carries a format name and version; anything that does not match is treated
as absent so the caller rebuilds it.
"""

import gzip
import json
import os
import tempfile
import zlib
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from GeoReverse.data.models import LocationRecord
from GeoReverse.exceptions import SnapshotError
from GeoReverse.utils.logging import get_logger

logger = get_logger(__name__)

SNAPSHOT_FORMAT = "georeverse-snapshot"
SNAPSHOT_VERSION = 1


def _default_file_mode() -> int:
    """Permissions a plain open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class SnapshotStore:
    """Load and save the record snapshot at ``path``."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"SnapshotStore({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.is_file()

    def delete(self) -> bool:
        """Remove the snapshot file. Returns True if a file was removed."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.info(f"Deleted snapshot {self.path}")
        return True

    def load(self) -> Optional[List[LocationRecord]]:
        """
        Read the snapshot.

        Returns:
            The stored records, or None if the file is absent, corrupt or was
            written by an incompatible version
        """
        if not self.path.is_file():
            logger.info(f"No snapshot at {self.path}")
            return None

        try:
            with gzip.open(self.path, 'rt', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, EOFError, zlib.error, UnicodeDecodeError, ValueError) as e:
            logger.warning(f"Snapshot {self.path} is unreadable, ignoring it: {e}")
            return None

        if not isinstance(document, dict) or document.get("format") != SNAPSHOT_FORMAT:
            logger.warning(f"Snapshot {self.path} has an unknown format, ignoring it")
            return None

        version = document.get("version")
        if version != SNAPSHOT_VERSION:
            logger.warning(f"Snapshot {self.path} has version {version!r}, expected {SNAPSHOT_VERSION}; ignoring it")
            return None

        entries = document.get("records")
        if not isinstance(entries, list):
            logger.warning(f"Snapshot {self.path} has no record list, ignoring it")
            return None

        try:
            records = [LocationRecord.from_dict(entry) for entry in entries]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Snapshot {self.path} contains a malformed record, ignoring it: {e}")
            return None

        if document.get("count", len(records)) != len(records):
            logger.warning(f"Snapshot {self.path} is incomplete, ignoring it")
            return None

        logger.info(f"Loaded {len(records)} records from snapshot {self.path}")
        return records

    def save(self, records: List[LocationRecord]) -> None:
        """
        Write ``records`` to the snapshot, replacing any existing file atomically.

        Raises:
            SnapshotError: If the snapshot cannot be written
        """
        document = {
            "format": SNAPSHOT_FORMAT,
            "version": SNAPSHOT_VERSION,
            "created": datetime.now(timezone.utc).isoformat(),
            "count": len(records),
            "records": [record.to_snapshot_dict() for record in records],
        }

        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp",
                                            dir=str(self.path.parent))
            with os.fdopen(fd, 'wb') as raw:
                with gzip.GzipFile(fileobj=raw, mode='wb') as gz:
                    gz.write(json.dumps(document, ensure_ascii=False,
                                        separators=(',', ':')).encode('utf-8'))
                raw.flush()
                os.fsync(raw.fileno())
            os.chmod(tmp_path, _default_file_mode())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            logger.error(f"Failed to write snapshot {self.path}: {e}")
            raise SnapshotError(
                f"Failed to write snapshot {self.path}: {e}",
                context={"path": str(self.path)},
                cause=e
            )
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.info(f"Saved {len(records)} records to snapshot {self.path}")
