"""pine-vector-db — embeddable on-disk clustered vector store.

Vectors are routed into directory clusters by cosine similarity against
each cluster's fixed representative, and retrieved by id through a
per-id index.

Public API::

    from pine_vector_db import PineDB, VectorRecord
"""

import logging

from .clustering import ClusterStore
from .codec import decode, encode
from .config import PineSettings
from .engine import PineDB
from .errors import (
    EncodingFailure,
    ErrorKind,
    IOFailure,
    PathConversionFailure,
    PineError,
    TextEncodingFailure,
)
from .index import ClusterIndex
from .similarity import cosine_similarity, euclidean_distance
from .types import VectorRecord

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "PineDB",
    "PineSettings",
    "VectorRecord",
    "ClusterIndex",
    "ClusterStore",
    "encode",
    "decode",
    "cosine_similarity",
    "euclidean_distance",
    "PineError",
    "ErrorKind",
    "IOFailure",
    "EncodingFailure",
    "TextEncodingFailure",
    "PathConversionFailure",
]
