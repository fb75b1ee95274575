"""Output schemas and path helpers."""

from maze_chase.io.paths import (
    logs_dir,
    resolve_within_base,
    session_summary_json_path,
    session_summary_path,
    trace_log_path,
)
from maze_chase.io.schemas import SESSION_SUMMARY_SCHEMA, TRACE_SCHEMA, TRACE_SCHEMA_VERSION

__all__ = [
    "SESSION_SUMMARY_SCHEMA",
    "TRACE_SCHEMA",
    "TRACE_SCHEMA_VERSION",
    "logs_dir",
    "resolve_within_base",
    "session_summary_json_path",
    "session_summary_path",
    "trace_log_path",
]
