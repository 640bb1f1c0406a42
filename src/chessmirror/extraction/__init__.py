"""Producer side: turn a rendered page into a stream of changed snapshots."""

from chessmirror.extraction.change_filter import ChangeFilter, FilterState
from chessmirror.extraction.extractor import SnapshotExtractor
from chessmirror.extraction.orientation import resolve_orientation
from chessmirror.extraction.records import ExtractionRecord

__all__ = [
    "ChangeFilter",
    "ExtractionRecord",
    "FilterState",
    "SnapshotExtractor",
    "resolve_orientation",
]
