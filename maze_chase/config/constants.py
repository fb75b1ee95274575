"""Centralized game constants.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

MAZE_WIDTH = 21
"""Default maze width in cells (must be odd)."""

MAZE_HEIGHT = 17
"""Default maze height in cells (must be odd)."""

MIN_MAZE_DIMENSION = 5
"""Smallest odd dimension the carving algorithm accepts."""

MAZE_START = (1, 1)
"""Cell the carving walk starts from; also the player spawn cell."""

EXTRA_PASSAGES = 30
"""Random wall cells tried for opening after the perfect maze is carved."""

MAX_LEVEL = 3
"""Final level; clearing its bones spawns the objective item."""

STARTING_LIVES = 3
"""Lives at the start of every session."""

BONE_DENSITY = 0.4
"""Probability that an eligible open cell receives a bone at level start."""

SAFE_ZONE_WIDTH = 5
"""Safe zone (couch) width in cells."""

SAFE_ZONE_HEIGHT = 3
"""Safe zone (couch) height in cells."""

FRAME_MS = 16
"""Render/update frame period driving the player motion check."""

PLAYER_TICK_MS = 80
"""Minimum interval between two player steps while a direction is held."""

PURSUER_BASE_PERIOD_MS = 450
"""Pursuer step period on level 1."""

PURSUER_SPEEDUP = 0.85
"""Per-level multiplier applied to the pursuer step period."""

PURSUER_BASE_COUNT = 2
"""Pursuers on level N = PURSUER_BASE_COUNT + N (capped by the start layout)."""

GREEDY_PROBABILITY = 0.4
"""Chance that a pursuer step moves toward the player instead of randomly."""

SPAWN_EXCLUSION_RADIUS = 5
"""Timed spawns must land strictly farther than this (Manhattan) from the player."""

SPECIAL_SPAWN_DELAY_MS = 10_000
"""Wait before a special item appears in an empty slot."""

SPECIAL_LIFESPAN_MS = 20_000
"""Uncollected special items disappear after this long."""

SPECIAL_MOVE_MS = 900
"""Special item random-walk period."""

OBJECTIVE_MOVE_MS = 630
"""Objective item random-walk period."""

FROZEN_MS = 3_000
"""Pursuer freeze window after a special item pickup."""

PURSUER_RESPAWN_MS = 4_000
"""Delay before a consumed pursuer comes back."""

BONE_POINTS = 10
SPECIAL_POINTS = 1_000
PURSUER_POINTS = 1_000
OBJECTIVE_POINTS = 500

SPAWN_CELEBRATION_MS = 1_500
"""Spawn animation trigger duration."""

SPECIAL_CELEBRATION_MS = 1_000
"""Fireworks duration after a special item pickup."""

PURSUER_CELEBRATION_MS = 800
"""Fireworks duration after consuming a frozen pursuer."""

TAP_MAX_MS = 150
"""Joystick presses shorter than this (and below TAP_MAX_DRAG_PX) are taps."""

TAP_MAX_DRAG_PX = 8
"""Joystick drags longer than this are holds regardless of duration."""

TAP_RELEASE_DELAY_MS = 50
"""Deferred release after a tap so exactly one step registers."""

JOYSTICK_DEAD_ZONE_PX = 12
"""Knob offsets inside this radius produce no direction."""

JOYSTICK_MAX_RADIUS_PX = 42
"""Knob offset clamp: (base 140 px - knob 56 px) / 2."""

FLUSH_THRESHOLD = 8_192
"""Flush trace rows to Parquet once this in-memory row count is reached."""
