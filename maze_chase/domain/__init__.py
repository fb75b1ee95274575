"""Domain layer: maze generation, grid model, entities, and movement rules."""

from maze_chase.domain.entities import (
    Facing,
    IdAllocator,
    ObjectiveItem,
    Player,
    Pursuer,
    SpecialItem,
)
from maze_chase.domain.grid import (
    NEIGHBOR_ORDER,
    Direction,
    GridModel,
    Position,
    SafeZone,
    carve_cells,
    carve_safe_zone,
    manhattan,
)
from maze_chase.domain.maze import (
    find_dead_ends,
    generate_maze,
    open_neighbor_count,
    remove_dead_ends,
    validate_dimensions,
)
from maze_chase.domain.motion import AgentMotionController
from maze_chase.domain.pursuit import PursuerAI, build_roster

__all__ = [
    "AgentMotionController",
    "Direction",
    "Facing",
    "GridModel",
    "IdAllocator",
    "NEIGHBOR_ORDER",
    "ObjectiveItem",
    "Player",
    "Position",
    "Pursuer",
    "PursuerAI",
    "SafeZone",
    "SpecialItem",
    "build_roster",
    "carve_cells",
    "carve_safe_zone",
    "find_dead_ends",
    "generate_maze",
    "manhattan",
    "open_neighbor_count",
    "remove_dead_ends",
    "validate_dimensions",
]
