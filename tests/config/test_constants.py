from maze_chase.config.constants import (
    BONE_DENSITY,
    FLUSH_THRESHOLD,
    FROZEN_MS,
    MAX_LEVEL,
    MAZE_HEIGHT,
    MAZE_START,
    MAZE_WIDTH,
    MIN_MAZE_DIMENSION,
    PLAYER_TICK_MS,
    PURSUER_BASE_COUNT,
    PURSUER_RESPAWN_MS,
    SAFE_ZONE_HEIGHT,
    SAFE_ZONE_WIDTH,
    SPECIAL_LIFESPAN_MS,
    SPECIAL_SPAWN_DELAY_MS,
    STARTING_LIVES,
)


def test_maze_dimensions_are_odd_and_large_enough() -> None:
    for value in (MAZE_WIDTH, MAZE_HEIGHT):
        assert isinstance(value, int)
        assert value >= MIN_MAZE_DIMENSION
        assert value % 2 == 1


def test_start_cell_is_interior_odd_cell() -> None:
    x, y = MAZE_START
    assert 0 < x < MAZE_WIDTH - 1 and 0 < y < MAZE_HEIGHT - 1
    assert x % 2 == 1 and y % 2 == 1


def test_safe_zone_fits_inside_corridor_ring() -> None:
    assert SAFE_ZONE_WIDTH <= MAZE_WIDTH - 4
    assert SAFE_ZONE_HEIGHT <= MAZE_HEIGHT - 4


def test_session_counts_are_positive() -> None:
    assert MAX_LEVEL >= 1
    assert STARTING_LIVES >= 1
    assert PURSUER_BASE_COUNT + MAX_LEVEL <= 5


def test_bone_density_is_probability() -> None:
    assert 0.0 < BONE_DENSITY <= 1.0


def test_timer_ordering() -> None:
    assert PLAYER_TICK_MS > 0
    assert SPECIAL_SPAWN_DELAY_MS < SPECIAL_LIFESPAN_MS
    assert FROZEN_MS < PURSUER_RESPAWN_MS


def test_flush_threshold_positive() -> None:
    assert isinstance(FLUSH_THRESHOLD, int) and FLUSH_THRESHOLD > 0
