"""Maze grid management for the escape-the-grid game."""

import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class MazeLoadError(ValueError):
    """Raised when a layout cannot be turned into a playable maze."""


class OutOfBoundsError(IndexError):
    """Raised when a cell query falls outside the grid."""


class CellKind(IntEnum):
    """Cell kinds. Values match the digits of the maze text format."""
    PATH = 0
    WALL = 1
    ALTERNATING_WALL = 2
    DYNAMIC_WALL = 3


def alternating_wall_open_at(turn: int) -> bool:
    """Alternating walls may only be entered on even turns."""
    return turn % 2 == 0


def _kind_open(kind: CellKind, turn_at_entry: int,
               countdown: Optional[int]) -> bool:
    """Shared walkability rule for live and snapshot queries."""
    if kind == CellKind.PATH:
        return True
    if kind == CellKind.WALL:
        return False
    if kind == CellKind.ALTERNATING_WALL:
        return alternating_wall_open_at(turn_at_entry)
    if countdown is None:
        return False
    return countdown <= 0


@dataclass
class DynamicWallTimer:
    """Countdown attached to a cell that starts out as a dynamic wall."""
    row: int
    col: int
    turns_remaining: int

    @property
    def position(self) -> Position:
        return (self.row, self.col)


@dataclass
class MazeLayout:
    """
    Static description of a maze as produced by a loader.

    `dynamic_walls` of None means "one timer per dynamic wall cell, each
    starting at `default_wall_turns`". `goal` of None means the bottom-right
    cell.
    """
    grid: np.ndarray
    start: Position = (0, 0)
    goal: Optional[Position] = None
    dynamic_walls: Optional[List[DynamicWallTimer]] = None
    default_wall_turns: int = 3

    @property
    def rows(self) -> int:
        return int(self.grid.shape[0])

    @property
    def cols(self) -> int:
        return int(self.grid.shape[1])

    def resolved_goal(self) -> Position:
        if self.goal is not None:
            return self.goal
        return (self.rows - 1, self.cols - 1)


def _as_grid_array(grid) -> np.ndarray:
    """Validate a grid and return it as an int8 array of cell kinds."""
    if isinstance(grid, np.ndarray):
        array = grid
    else:
        rows = [list(row) for row in grid]
        if not rows or not rows[0]:
            raise MazeLoadError("Maze grid is empty")
        width = len(rows[0])
        for index, row in enumerate(rows):
            if len(row) != width:
                raise MazeLoadError(
                    f"Maze grid is not rectangular: row {index} has "
                    f"{len(row)} cells, expected {width}")
        array = np.array([[int(cell) for cell in row] for row in rows])

    if array.ndim != 2 or array.size == 0:
        raise MazeLoadError(f"Maze grid must be a non-empty 2-D array, "
                            f"got shape {array.shape}")

    valid = np.isin(array, [kind.value for kind in CellKind])
    if not valid.all():
        bad_row, bad_col = (int(v) for v in np.argwhere(~valid)[0])
        raise MazeLoadError(
            f"Unknown cell kind {array[bad_row, bad_col]!r} "
            f"at ({bad_row}, {bad_col})")
    return array.astype(np.int8, copy=True)


@dataclass(frozen=True)
class MazeSnapshot:
    """
    Frozen copy of the maze taken at a given turn.

    `timers` maps each dynamic wall to its countdown at snapshot time. Queries
    project that countdown forward by the number of steps a path has taken,
    so a search over a snapshot never depends on the live timers.

    A wall with countdown v is entered during move k (1-based, counted from
    the snapshot turn) before that move's decay is applied, so its projected
    countdown at entry is v - (k - 1).
    """
    grid: np.ndarray
    timers: Mapping[Position, int]
    turn: int
    has_alternating_walls: bool = field(default=False)

    @property
    def rows(self) -> int:
        return int(self.grid.shape[0])

    @property
    def cols(self) -> int:
        return int(self.grid.shape[1])

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def countdown_at(self, row: int, col: int,
                     arrival_turn: int) -> Optional[int]:
        """Projected countdown of a dynamic wall when entered at `arrival_turn`."""
        remaining = self.timers.get((row, col))
        if remaining is None:
            return None
        steps = arrival_turn - self.turn
        return remaining - max(steps - 1, 0)

    def is_open_at(self, row: int, col: int, arrival_turn: int) -> bool:
        """Check whether a cell can be occupied at an absolute turn."""
        if not self.in_bounds(row, col):
            return False
        kind = CellKind(int(self.grid[row, col]))
        countdown = None
        if kind == CellKind.DYNAMIC_WALL:
            countdown = self.countdown_at(row, col, arrival_turn)
        return _kind_open(kind, arrival_turn, countdown)

    def opening_horizon(self) -> int:
        """Number of steps after which every dynamic wall in the snapshot is open."""
        return max(self.timers.values(), default=0) + 1


class MazeModel:
    """
    Owns the grid of cell kinds and the dynamic wall timers.

    Coordinate convention: (row, col), 0-indexed, row-major.
    Only `advance_turn` mutates state; everything else is a query.
    """

    def __init__(self, grid,
                 timers: Optional[Iterable[DynamicWallTimer]] = None,
                 default_wall_turns: int = 3):
        self.cells = _as_grid_array(grid)
        self.rows, self.cols = (int(n) for n in self.cells.shape)
        self._last_turn = 0

        if default_wall_turns < 0:
            raise MazeLoadError("Dynamic wall countdown must be >= 0")

        self._timers: Dict[Position, DynamicWallTimer] = {}
        if timers is None:
            for row, col in np.argwhere(self.cells == CellKind.DYNAMIC_WALL):
                self._timers[(int(row), int(col))] = DynamicWallTimer(
                    int(row), int(col), default_wall_turns)
        else:
            for timer in timers:
                self._add_timer(replace(timer))

        # Walls configured to open immediately are plain path from the start
        for timer in self._timers.values():
            if timer.turns_remaining == 0:
                self.cells[timer.row, timer.col] = CellKind.PATH

    def _add_timer(self, timer: DynamicWallTimer) -> None:
        if not self.in_bounds(timer.row, timer.col):
            raise MazeLoadError(f"Dynamic wall timer at {timer.position} "
                                f"is outside the grid")
        if self.cells[timer.row, timer.col] != CellKind.DYNAMIC_WALL:
            raise MazeLoadError(f"Dynamic wall timer at {timer.position} "
                                f"does not sit on a dynamic wall cell")
        if timer.turns_remaining < 0:
            raise MazeLoadError(f"Dynamic wall timer at {timer.position} "
                                f"has a negative countdown")
        if timer.position in self._timers:
            raise MazeLoadError(f"Duplicate dynamic wall timer at "
                                f"{timer.position}")
        self._timers[timer.position] = timer

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def timers(self) -> List[DynamicWallTimer]:
        """Copies of the timers, in construction order."""
        return [replace(t) for t in self._timers.values()]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell_kind(self, row: int, col: int) -> CellKind:
        if not self.in_bounds(row, col):
            raise OutOfBoundsError(
                f"Cell ({row}, {col}) is outside the {self.rows}x{self.cols} grid")
        return CellKind(int(self.cells[row, col]))

    def turns_remaining(self, row: int, col: int) -> Optional[int]:
        """Remaining countdown for a dynamic wall, None if there is no timer."""
        timer = self._timers.get((row, col))
        return None if timer is None else timer.turns_remaining

    def is_walkable(self, row: int, col: int, turn_at_entry: int,
                    blocked_positions: Iterable[Position] = ()) -> bool:
        """Check whether a cell can be entered at `turn_at_entry`."""
        if not self.in_bounds(row, col):
            return False
        if (row, col) in set(blocked_positions):
            return False

        kind = CellKind(int(self.cells[row, col]))
        countdown = None
        if kind == CellKind.DYNAMIC_WALL:
            countdown = self.turns_remaining(row, col)
            if countdown is None:
                logger.warning("Dynamic wall at (%d, %d) has no timer; "
                               "treating it as blocked", row, col)
        return _kind_open(kind, turn_at_entry, countdown)

    def advance_turn(self, new_turn: int) -> List[Position]:
        """
        Decay every armed dynamic wall timer by one turn.

        Walls whose countdown reaches zero become permanent path cells.
        Calling again with a turn that was already processed does nothing.
        Returns the positions opened by this call.
        """
        if new_turn <= self._last_turn:
            logger.debug("Turn %d already processed, skipping wall decay",
                         new_turn)
            return []
        self._last_turn = new_turn

        opened: List[Position] = []
        for timer in self._timers.values():
            if timer.turns_remaining <= 0:
                continue
            timer.turns_remaining -= 1
            if timer.turns_remaining == 0:
                self.cells[timer.row, timer.col] = CellKind.PATH
                opened.append(timer.position)
                logger.debug("Dynamic wall at %s opened on turn %d",
                             timer.position, new_turn)
        return opened

    def snapshot(self, turn: int) -> MazeSnapshot:
        """Return a frozen copy of the grid and timers for searching."""
        grid = self.cells.copy()
        grid.setflags(write=False)
        timers = MappingProxyType({
            pos: t.turns_remaining for pos, t in self._timers.items()
            if grid[pos] == CellKind.DYNAMIC_WALL
        })
        return MazeSnapshot(
            grid=grid,
            timers=timers,
            turn=turn,
            has_alternating_walls=bool(
                (grid == CellKind.ALTERNATING_WALL).any()),
        )

    def first_cell_of(self, kind: CellKind) -> Optional[Position]:
        """First cell of a kind in row-major order, or None."""
        matches = np.argwhere(self.cells == kind)
        if len(matches) == 0:
            return None
        row, col = matches[0]
        return (int(row), int(col))


def layout_timers(layout: MazeLayout) -> Optional[List[DynamicWallTimer]]:
    """Fresh copies of a layout's timers, suitable for a new MazeModel."""
    if layout.dynamic_walls is None:
        return None
    return [replace(t) for t in layout.dynamic_walls]


def grid_from_rows(rows: Sequence[Sequence[int]]) -> np.ndarray:
    """Build a validated grid array from nested sequences of cell kinds."""
    return _as_grid_array(rows)
