"""Environment-driven settings for pine-vector-db.

PINE_ROOT              — store root directory (default ``./pine_data``)
PINE_CHUNK_SIMILARITY  — cosine routing threshold (default ``0.9``)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_ROOT = "./pine_data"
DEFAULT_CHUNK_SIMILARITY = 0.9


@dataclass(frozen=True)
class PineSettings:
    root: str = DEFAULT_ROOT
    chunk_similarity: float = DEFAULT_CHUNK_SIMILARITY

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PineSettings":
        """Read settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        raw = env.get("PINE_CHUNK_SIMILARITY", str(DEFAULT_CHUNK_SIMILARITY))
        try:
            threshold = float(raw)
        except ValueError:
            raise ValueError(
                f"PINE_CHUNK_SIMILARITY must be a number, got {raw!r}"
            ) from None
        return cls(
            root=env.get("PINE_ROOT", DEFAULT_ROOT),
            chunk_similarity=threshold,
        )
