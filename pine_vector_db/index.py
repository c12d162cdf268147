"""ClusterIndex — persisted id → cluster directory mapping.

One file per id under ``<root>/index``; its content is the UTF-8 text of
the owning cluster directory path.  Nothing is cached: every call reads or
writes the entry file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from .errors import IOFailure, PathConversionFailure, TextEncodingFailure
from .types import validate_id

logger = logging.getLogger(__name__)


class ClusterIndex:
    """Map ids to the cluster directory holding their current member copy.

    Parameters
    ----------
    directory : the index area, normally ``<root>/index``.  It must
                already exist; ``PineDB`` creates it.
    """

    def __init__(self, directory: Union[str, os.PathLike]) -> None:
        self.directory = Path(directory)

    def _entry(self, record_id: str) -> Path:
        return self.directory / validate_id(record_id)

    def get(self, record_id: str) -> Optional[Path]:
        """Return the cluster location for ``record_id``, or None if unknown."""
        entry = self._entry(record_id)
        if not entry.exists():
            return None
        try:
            raw = entry.read_bytes()
        except OSError as exc:
            raise IOFailure(f"cannot read index entry {entry}: {exc}") from exc
        try:
            return Path(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise TextEncodingFailure(
                f"index entry {entry} is not valid UTF-8"
            ) from exc

    def set(self, record_id: str, location: Union[str, os.PathLike]) -> None:
        """Point ``record_id`` at ``location``, overwriting any prior entry."""
        entry = self._entry(record_id)
        try:
            text = os.fsdecode(location).encode("utf-8")
        except (TypeError, UnicodeEncodeError) as exc:
            raise PathConversionFailure(
                f"cluster location for {record_id!r} cannot be stored as text"
            ) from exc
        try:
            with open(entry, "wb") as fh:
                fh.write(text)
        except OSError as exc:
            raise IOFailure(f"cannot write index entry {entry}: {exc}") from exc
        logger.debug("index %s -> %s", record_id, location)

    def remove(self, record_id: str) -> None:
        """Delete the entry for ``record_id``; no-op if absent."""
        entry = self._entry(record_id)
        if not entry.exists():
            return
        try:
            entry.unlink()
        except OSError as exc:
            raise IOFailure(f"cannot remove index entry {entry}: {exc}") from exc

    def contains(self, record_id: str) -> bool:
        return self._entry(record_id).exists()

    def ids(self) -> List[str]:
        """All ids that currently have an entry, sorted."""
        try:
            return sorted(p.name for p in self.directory.iterdir() if p.is_file())
        except OSError as exc:
            raise IOFailure(f"cannot list index {self.directory}: {exc}") from exc
