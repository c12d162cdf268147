"""Core record type for pine-vector-db.

VectorRecord — caller-identified float32 feature vector; the unit that is
               saved, routed into a cluster, loaded and deleted.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple

import numpy as np

#: File name reserved for a cluster's representative vector.
REPRESENTATIVE_NAME = "metadata"


def validate_id(record_id: str) -> str:
    """Check that ``record_id`` can be used as a single file name."""
    if not isinstance(record_id, str):
        raise ValueError(f"id must be a string, got {type(record_id).__name__}")
    if not record_id:
        raise ValueError("id must not be empty")
    if record_id in (".", "..", REPRESENTATIVE_NAME):
        raise ValueError(f"id {record_id!r} is reserved")
    if "/" in record_id or "\\" in record_id or "\x00" in record_id:
        raise ValueError(f"id {record_id!r} must not contain path separators")
    return record_id


# ---------------------------------------------------------------------------
# VectorRecord
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VectorRecord:
    """One stored vector.

    Schema
    ------
    id   : caller-assigned string, unique across the store; used verbatim
           as the member and index file name.
    data : ordered float32 values, held as a tuple of Python floats that
           are exactly representable in float32.

    Equality is structural over ``(id, data)``.  Dimensionality is not
    checked; distance and similarity between records of different length
    are undefined.
    """

    id: str
    data: Tuple[float, ...]

    def __post_init__(self) -> None:
        validate_id(self.id)
        arr = np.asarray(self.data, dtype=np.float32).reshape(-1)
        object.__setattr__(self, "data", tuple(float(x) for x in arr))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def size(self) -> int:
        return len(self.data)

    @property
    def np_data(self) -> np.ndarray:
        """Return data as a numpy float32 array."""
        return np.array(self.data, dtype=np.float32)

    def fingerprint(self) -> str:
        """Blake2b-256 hash of the raw float32 bytes."""
        raw = self.np_data.astype("<f4").tobytes()
        return hashlib.blake2b(raw, digest_size=32).hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "data": list(self.data)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VectorRecord":
        return cls(id=data["id"], data=data["data"])

    @classmethod
    def new(cls, id: str, data: Iterable[float]) -> "VectorRecord":
        """Factory accepting any iterable of numbers."""
        return cls(id=id, data=tuple(data))
