"""Reconciliation core: normalization, field resolution, indexing, matching."""

from .engine import ReconciliationEngine
from .fields import normalize_key, resolve_field, resolve_full_name
from .index import SourceIndex, build_index
from .normalize import normalize
from .similarity import token_set_similarity

__all__ = [
    "ReconciliationEngine",
    "SourceIndex",
    "build_index",
    "normalize",
    "normalize_key",
    "resolve_field",
    "resolve_full_name",
    "token_set_similarity",
]
