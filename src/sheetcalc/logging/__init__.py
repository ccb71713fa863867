"""Structured event logging for sheetcalc.

Provides an event schema, a filesystem NDJSON sink, and safe emit helpers
that never raise uncaught exceptions.
"""

from sheetcalc.logging.events import (
    EventLevel,
    EventType,
    SheetcalcEvent,
    clear_sink,
    emit,
    emit_error,
    emit_info,
    emit_warning,
    get_sink,
    set_project_dir,
)
from sheetcalc.logging.sink import EventSink

__all__ = [
    "EventLevel",
    "EventSink",
    "EventType",
    "SheetcalcEvent",
    "clear_sink",
    "emit",
    "emit_error",
    "emit_info",
    "emit_warning",
    "get_sink",
    "set_project_dir",
]
