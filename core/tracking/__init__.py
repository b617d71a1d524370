# core/tracking/__init__.py
"""
Completeness tracking core.

This package defines:
- Field instrumentation (which declared fields were ever written)
- Completeness reports derived from that state on every query
- An enforcement decorator for mapping functions ("every field set on return")
"""

from core.tracking.enforce import checked_call, enforce_all_props_set
from core.tracking.errors import IncompleteObjectError, TrackingError, UntrackedReturnWarning
from core.tracking.instrument import (
    Tracked,
    completeness_of,
    declared_fields,
    track_props,
    track_props_with_accessors,
    tracked_fields,
)
from core.tracking.report import CompletenessReport, build_report

__all__ = [
    "CompletenessReport",
    "IncompleteObjectError",
    "Tracked",
    "TrackingError",
    "UntrackedReturnWarning",
    "build_report",
    "checked_call",
    "completeness_of",
    "declared_fields",
    "enforce_all_props_set",
    "track_props",
    "track_props_with_accessors",
    "tracked_fields",
]
