"""Maze text loader.

Format: one grid row per non-empty line, spaces ignored.

    0  path            1  wall
    2  alternating     3  dynamic wall
    S  path + start    E  path + goal

Short rows are padded with walls up to the longest row.
"""

from pathlib import Path
from typing import Iterable, List, TYPE_CHECKING

import numpy as np

from .model.grid import (CellKind, DynamicWallTimer, MazeLayout,
                         MazeLoadError, grid_from_rows)

if TYPE_CHECKING:
    from .config import DynamicWallSpec, MazeConfig

_DIGITS = {str(kind.value): kind for kind in CellKind}


def _split_lines(text: str) -> List[str]:
    lines = []
    for line in text.replace('\r', '').split('\n'):
        line = line.replace(' ', '').replace('\t', '')
        if line:
            lines.append(line)
    return lines


def parse_maze_text(text: str, dynamic_wall_turns: int = 3,
                    overrides: Iterable["DynamicWallSpec"] = ()) -> MazeLayout:
    """Parse maze text into a layout with one timer per dynamic wall."""
    lines = _split_lines(text)
    if not lines:
        raise MazeLoadError("Maze file is empty")

    width = max(len(line) for line in lines)
    rows: List[List[int]] = []
    start = None
    goal = None

    for r, line in enumerate(lines):
        row = []
        for c, ch in enumerate(line):
            if ch in _DIGITS:
                row.append(_DIGITS[ch].value)
            elif ch == 'S':
                row.append(CellKind.PATH.value)
                start = (r, c)
            elif ch == 'E':
                row.append(CellKind.PATH.value)
                goal = (r, c)
            else:
                raise MazeLoadError(
                    f"Unknown maze character {ch!r} at line {r + 1}, "
                    f"column {c + 1}")
        # Pad short rows with walls
        row.extend([CellKind.WALL.value] * (width - len(row)))
        rows.append(row)

    grid = grid_from_rows(rows)
    timers = _build_timers(grid, dynamic_wall_turns, overrides)

    return MazeLayout(
        grid=grid,
        start=start if start is not None else (0, 0),
        goal=goal,
        dynamic_walls=timers,
        default_wall_turns=dynamic_wall_turns,
    )


def _build_timers(grid: np.ndarray, default_turns: int,
                  overrides: Iterable["DynamicWallSpec"]) -> List[DynamicWallTimer]:
    """One timer per dynamic wall cell, with per-cell countdown overrides."""
    if default_turns < 0:
        raise MazeLoadError("Dynamic wall countdown must be >= 0")

    timers = {
        (int(r), int(c)): DynamicWallTimer(int(r), int(c), default_turns)
        for r, c in np.argwhere(grid == CellKind.DYNAMIC_WALL)
    }
    for spec in overrides:
        timer = timers.get((spec.row, spec.col))
        if timer is None:
            raise MazeLoadError(f"Dynamic wall override at ({spec.row}, "
                                f"{spec.col}) does not name a dynamic wall")
        timer.turns_remaining = spec.turns
    return list(timers.values())


def load_maze_file(path: Path, dynamic_wall_turns: int = 3,
                   overrides: Iterable["DynamicWallSpec"] = ()) -> MazeLayout:
    """Read and parse a maze file."""
    text = Path(path).read_text(encoding='utf-8')
    return parse_maze_text(text, dynamic_wall_turns, overrides)


def layout_from_config(maze_config: "MazeConfig") -> MazeLayout:
    """Build a layout from the maze section of a game config."""
    if maze_config.layout is not None:
        layout = parse_maze_text('\n'.join(maze_config.layout),
                                 maze_config.dynamic_wall_turns,
                                 maze_config.dynamic_walls)
    elif maze_config.file is not None:
        layout = load_maze_file(maze_config.file,
                                maze_config.dynamic_wall_turns,
                                maze_config.dynamic_walls)
    else:
        raise MazeLoadError("No maze file or layout configured")

    if maze_config.start is not None:
        layout.start = maze_config.start
    if maze_config.goal is not None:
        layout.goal = maze_config.goal
    return layout

