"""Parquet schema definitions for headless run artifacts.

Both Arrow schemas written by the headless engine live here so that the
engine, the CLI and any downstream analysis read the same column contracts.
"""

from __future__ import annotations

import pyarrow as pa

TRACE_SCHEMA_VERSION = 1

TRACE_SCHEMA = pa.schema(
    [
        ("session_id", pa.string()),
        ("time_ms", pa.float64()),
        ("level", pa.int64()),
        ("phase", pa.string()),
        ("player_x", pa.int64()),
        ("player_y", pa.int64()),
        ("score", pa.int64()),
        ("lives", pa.int64()),
        ("bones_left", pa.int64()),
        ("n_pursuers", pa.int64()),
        ("frozen", pa.bool_()),
    ]
)

SESSION_SUMMARY_SCHEMA = pa.schema(
    [
        ("session_id", pa.string()),
        ("seed", pa.int64()),
        ("outcome", pa.string()),
        ("level_reached", pa.int64()),
        ("score", pa.int64()),
        ("lives", pa.int64()),
        ("elapsed_ms", pa.float64()),
        ("specials_collected", pa.int64()),
    ]
)
