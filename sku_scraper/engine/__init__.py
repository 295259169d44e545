"""Engine components: fetch → extract → reconcile."""

from .extractor import Extractor
from .fetcher import FetchResponse, Fetcher
from .reconcile import ApplyResult, MergeResult, ReconciliationEngine, RowChange, merge

__all__ = [
    "ApplyResult",
    "Extractor",
    "FetchResponse",
    "Fetcher",
    "MergeResult",
    "ReconciliationEngine",
    "RowChange",
    "merge",
]
