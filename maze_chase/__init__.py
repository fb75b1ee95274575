"""Grid maze chase game: procedural mazes, timed pursuers, and a headless runner."""
