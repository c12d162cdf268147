"""ClusterStore and the representative-routing policy for pine-vector-db.

find_cluster   — first cluster whose representative beats the threshold
create_cluster — next ordinal directory + permanent representative
write_member / read_member / remove_member / count_members — member files

A cluster's representative is the first record ever routed into it and
is never updated, so routing depends on insertion order.  Deleting the
last member leaves the directory and representative in place.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .codec import decode, encode
from .errors import IOFailure
from .similarity import cosine_similarity
from .types import REPRESENTATIVE_NAME, VectorRecord, validate_id

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def _read_record(path: Path) -> VectorRecord:
    try:
        with open(path, "rb") as fh:
            payload = fh.read()
    except OSError as exc:
        raise IOFailure(f"cannot read {path}: {exc}") from exc
    return decode(payload)


def _write_bytes(path: Path, payload: bytes) -> None:
    try:
        with open(path, "wb") as fh:
            fh.write(payload)
    except OSError as exc:
        raise IOFailure(f"cannot write {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# ClusterStore
# ---------------------------------------------------------------------------


class ClusterStore:
    """Set of cluster directories under ``<root>/vectors``.

    Parameters
    ----------
    directory        : the vectors area; must already exist.
    chunk_similarity : cosine threshold; a record joins a cluster only
                       when its similarity to the representative is
                       strictly greater than this value.
    """

    def __init__(
        self,
        directory: Union[str, os.PathLike],
        chunk_similarity: float,
    ) -> None:
        self.directory = Path(directory)
        self.chunk_similarity = float(chunk_similarity)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def _iter_clusters(self) -> Iterator[Path]:
        """Cluster directories in filesystem listing order."""
        try:
            entries = list(self.directory.iterdir())
        except OSError as exc:
            raise IOFailure(f"cannot list {self.directory}: {exc}") from exc
        for path in entries:
            if path.is_dir():
                yield path

    def clusters(self) -> List[Path]:
        """All cluster directories, sorted by name."""
        return sorted(self._iter_clusters())

    def read_representative(self, location: Path) -> VectorRecord:
        return _read_record(Path(location) / REPRESENTATIVE_NAME)

    def member_ids(self, location: Path) -> List[str]:
        """Ids with a member file in ``location``, sorted."""
        try:
            return sorted(
                p.name
                for p in Path(location).iterdir()
                if p.is_file() and p.name != REPRESENTATIVE_NAME
            )
        except OSError as exc:
            raise IOFailure(f"cannot list {location}: {exc}") from exc

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def find_cluster(self, record: VectorRecord) -> Optional[Path]:
        """Return the first cluster whose representative exceeds the threshold.

        Only each cluster's single representative is compared, never its
        members; directories without a representative are skipped.
        """
        for path in self._iter_clusters():
            rep_path = path / REPRESENTATIVE_NAME
            if not rep_path.exists():
                continue
            representative = _read_record(rep_path)
            score = cosine_similarity(record, representative)
            if score > self.chunk_similarity:
                logger.debug(
                    "routing %s to %s (similarity %.6f > %.6f)",
                    record.id, path.name, score, self.chunk_similarity,
                )
                return path
        return None

    def create_cluster(
        self,
        record: VectorRecord,
        payload: Optional[bytes] = None,
    ) -> Path:
        """Create the next ordinal cluster with ``record`` as representative.

        ``payload`` may carry ``encode(record)`` when the caller already
        has it.
        """
        ordinal = sum(1 for _ in self._iter_clusters())
        path = self.directory / f"{ordinal:03d}"
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailure(f"cannot create cluster {path}: {exc}") from exc
        _write_bytes(path / REPRESENTATIVE_NAME, payload if payload is not None else encode(record))
        logger.info("created cluster %s for %s", path.name, record.id)
        return path

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def write_member(
        self,
        location: Path,
        record: VectorRecord,
        payload: Optional[bytes] = None,
    ) -> None:
        """Write ``record`` into ``location``, replacing any prior copy."""
        data = payload if payload is not None else encode(record)
        _write_bytes(Path(location) / record.id, data)

    def read_member(self, location: Path, record_id: str) -> VectorRecord:
        return _read_record(Path(location) / validate_id(record_id))

    def remove_member(self, location: Path, record_id: str) -> None:
        """Delete the member file for ``record_id``; no-op if absent."""
        path = Path(location) / validate_id(record_id)
        if not path.exists():
            return
        try:
            path.unlink()
        except OSError as exc:
            raise IOFailure(f"cannot remove {path}: {exc}") from exc

    def count_members(self) -> int:
        """Total member files across all clusters, representatives excluded."""
        return sum(len(self.member_ids(path)) for path in self._iter_clusters())
