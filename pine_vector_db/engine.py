"""PineDB — embeddable on-disk clustered vector store.

On-disk layout
--------------
::

    <root>/vectors/<ordinal:03d>/metadata   representative record
    <root>/vectors/<ordinal:03d>/<id>       member record
    <root>/index/<id>                       UTF-8 path of the owning cluster

Public API
----------
PineDB
    .save()              — route, write member, update index
    .load()              — resolve via index, read member
    .delete()            — remove member + index entry
    .exists()            — index lookup
    .size()              — member count across clusters
    .locate()            — index-resolved cluster directory
    .ids()               — all indexed ids
    .distance()          — Euclidean distance
    .cosine_similarity() — cosine similarity (0.0 for zero vectors)
    .stats()             — live statistics dict

The store is single-writer and keeps no in-memory state besides its
paths and threshold; every call re-reads the filesystem.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .clustering import ClusterStore
from .codec import encode
from .config import PineSettings
from .errors import IOFailure
from .index import ClusterIndex
from .similarity import VectorLike
from .similarity import cosine_similarity as _cosine
from .similarity import euclidean_distance
from .types import VectorRecord

logger = logging.getLogger(__name__)

VECTORS_DIR = "vectors"
INDEX_DIR = "index"


class PineDB:
    """Clustered vector store rooted at ``root``.

    Parameters
    ----------
    root             : store directory; ``vectors/`` and ``index/`` are
                       created beneath it if missing.
    chunk_similarity : cosine threshold for joining an existing cluster
                       (strictly greater than).  Not bounds-checked.
    """

    VERSION: str = "0.1.0"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def __init__(
        self,
        root: Union[str, os.PathLike],
        chunk_similarity: float = 0.9,
    ) -> None:
        self.root = Path(root)
        self.chunk_similarity = float(chunk_similarity)
        for name in (VECTORS_DIR, INDEX_DIR):
            path = self.root / name
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise IOFailure(f"cannot create {path}: {exc}") from exc

        self.store = ClusterStore(self.root / VECTORS_DIR, self.chunk_similarity)
        self.index = ClusterIndex(self.root / INDEX_DIR)
        logger.info("PineDB v%s root=%s chunk_similarity=%s",
                    self.VERSION, self.root, self.chunk_similarity)

    @classmethod
    def from_settings(cls, settings: Optional[PineSettings] = None) -> "PineDB":
        """Build a store from ``settings`` or, if omitted, the environment."""
        settings = settings or PineSettings.from_env()
        return cls(settings.root, settings.chunk_similarity)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def save(self, record: VectorRecord) -> None:
        """Store ``record``, replacing any earlier copy with the same id.

        Steps, in order, with no rollback between them:

        1. resolve a cluster: the first whose representative is similar
           enough, else a new cluster with ``record`` as representative;
        2. remove the previous member file and index entry for this id;
        3. write the member file into the resolved cluster;
        4. point the index entry at the resolved cluster.

        A failure after step 1 can leave a fresh empty cluster; after
        step 3 an orphaned member file without an index entry.
        """
        payload = encode(record)

        location = self.store.find_cluster(record)
        if location is None:
            location = self.store.create_cluster(record, payload)

        self.delete(record.id)
        self.store.write_member(location, record, payload)
        self.index.set(record.id, location)
        logger.debug("saved %s in %s", record.id, location.name)

    def load(self, record_id: str) -> Optional[VectorRecord]:
        """Return the stored record, or None if the id is unknown."""
        location = self.index.get(record_id)
        if location is None:
            return None
        return self.store.read_member(location, record_id)

    def delete(self, record_id: str) -> None:
        """Remove the member file and index entry; no-op for unknown ids.

        The cluster directory and its representative are kept even when
        this was the last member.
        """
        location = self.index.get(record_id)
        if location is None:
            return
        self.store.remove_member(location, record_id)
        self.index.remove(record_id)
        logger.debug("deleted %s from %s", record_id, location.name)

    def exists(self, record_id: str) -> bool:
        return self.index.contains(record_id)

    def size(self) -> int:
        """Number of stored records (representatives excluded)."""
        return self.store.count_members()

    def locate(self, record_id: str) -> Optional[Path]:
        """Cluster directory currently holding ``record_id``."""
        return self.index.get(record_id)

    def ids(self) -> List[str]:
        return self.index.ids()

    # ------------------------------------------------------------------
    # Numerics
    # ------------------------------------------------------------------

    def distance(self, a: VectorLike, b: VectorLike) -> float:
        """Euclidean distance between two vectors."""
        return euclidean_distance(a, b)

    def cosine_similarity(self, a: VectorLike, b: VectorLike) -> float:
        """Cosine similarity; 0.0 if either vector has zero norm."""
        return _cosine(a, b)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def stats(self) -> Dict[str, Any]:
        """Return live statistics read from disk."""
        return {
            "version": self.VERSION,
            "root": str(self.root),
            "chunk_similarity": self.chunk_similarity,
            "cluster_count": len(self.store.clusters()),
            "record_count": self.size(),
        }

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, record_id: str) -> bool:
        return self.exists(record_id)

    def __repr__(self) -> str:
        return (
            f"PineDB(v{self.VERSION} root={str(self.root)!r} "
            f"chunk_similarity={self.chunk_similarity})"
        )
