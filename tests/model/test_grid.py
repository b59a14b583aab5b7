"""Tests for escape_grid.model.grid module."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from escape_grid.model.grid import (
    CellKind,
    DynamicWallTimer,
    MazeLoadError,
    MazeModel,
    OutOfBoundsError,
    alternating_wall_open_at,
)


class TestConstruction:
    def test_empty_grid_rejected(self) -> None:
        with pytest.raises(MazeLoadError):
            MazeModel([])

    def test_empty_row_rejected(self) -> None:
        with pytest.raises(MazeLoadError):
            MazeModel([[]])

    def test_ragged_grid_rejected(self) -> None:
        with pytest.raises(MazeLoadError, match="not rectangular"):
            MazeModel([[0, 0], [0]])

    def test_unknown_cell_kind_rejected(self) -> None:
        with pytest.raises(MazeLoadError, match="Unknown cell kind"):
            MazeModel([[0, 7]])

    def test_accepts_numpy_array(self) -> None:
        maze = MazeModel(np.zeros((2, 3), dtype=int))
        assert maze.shape == (2, 3)

    def test_input_grid_is_copied(self) -> None:
        source = np.array([[0, 3]])
        maze = MazeModel(source, default_wall_turns=1)
        maze.advance_turn(1)
        assert source[0, 1] == CellKind.DYNAMIC_WALL

    def test_one_timer_per_dynamic_wall(self) -> None:
        maze = MazeModel([[3, 0], [0, 3]], default_wall_turns=4)
        timers = {t.position: t.turns_remaining for t in maze.timers}
        assert timers == {(0, 0): 4, (1, 1): 4}

    def test_explicit_timers(self) -> None:
        maze = MazeModel([[3, 3]], timers=[DynamicWallTimer(0, 0, 2),
                                            DynamicWallTimer(0, 1, 5)])
        assert maze.turns_remaining(0, 0) == 2
        assert maze.turns_remaining(0, 1) == 5

    def test_timer_on_plain_cell_rejected(self) -> None:
        with pytest.raises(MazeLoadError, match="does not sit"):
            MazeModel([[0, 3]], timers=[DynamicWallTimer(0, 0, 2)])

    def test_timer_outside_grid_rejected(self) -> None:
        with pytest.raises(MazeLoadError, match="outside"):
            MazeModel([[3]], timers=[DynamicWallTimer(4, 4, 2)])

    def test_negative_timer_rejected(self) -> None:
        with pytest.raises(MazeLoadError):
            MazeModel([[3]], timers=[DynamicWallTimer(0, 0, -1)])

    def test_duplicate_timer_rejected(self) -> None:
        with pytest.raises(MazeLoadError, match="Duplicate"):
            MazeModel([[3]], timers=[DynamicWallTimer(0, 0, 1),
                                     DynamicWallTimer(0, 0, 2)])

    def test_zero_countdown_opens_immediately(self) -> None:
        maze = MazeModel([[3]], default_wall_turns=0)
        assert maze.cell_kind(0, 0) == CellKind.PATH

    def test_timers_property_returns_copies(self) -> None:
        maze = MazeModel([[3]], default_wall_turns=2)
        maze.timers[0].turns_remaining = 0
        assert maze.turns_remaining(0, 0) == 2


class TestCellKind:
    def test_returns_kind(self) -> None:
        maze = MazeModel([[0, 1, 2, 3]])
        assert [maze.cell_kind(0, c) for c in range(4)] == [
            CellKind.PATH, CellKind.WALL,
            CellKind.ALTERNATING_WALL, CellKind.DYNAMIC_WALL,
        ]

    @pytest.mark.parametrize("row,col", [(-1, 0), (0, -1), (2, 0), (0, 3)])
    def test_out_of_bounds_raises(self, row: int, col: int) -> None:
        maze = MazeModel([[0, 0, 0], [0, 0, 0]])
        with pytest.raises(OutOfBoundsError):
            maze.cell_kind(row, col)

    def test_out_of_bounds_is_index_error(self) -> None:
        assert issubclass(OutOfBoundsError, IndexError)


class TestIsWalkable:
    def test_path_walkable_any_turn(self) -> None:
        maze = MazeModel([[0]])
        assert all(maze.is_walkable(0, 0, t) for t in range(5))

    def test_wall_never_walkable(self) -> None:
        maze = MazeModel([[1]])
        assert not any(maze.is_walkable(0, 0, t) for t in range(5))

    def test_out_of_bounds_not_walkable(self) -> None:
        maze = MazeModel([[0]])
        assert not maze.is_walkable(0, 1, 0)
        assert not maze.is_walkable(-1, 0, 0)

    def test_blocked_position_not_walkable(self) -> None:
        maze = MazeModel([[0, 0]])
        assert not maze.is_walkable(0, 1, 0, blocked_positions=[(0, 1)])
        assert maze.is_walkable(0, 0, 0, blocked_positions=[(0, 1)])

    def test_alternating_wall_open_on_even_turns(self) -> None:
        maze = MazeModel([[2]])
        assert maze.is_walkable(0, 0, 0)
        assert not maze.is_walkable(0, 0, 1)
        assert maze.is_walkable(0, 0, 2)
        assert not maze.is_walkable(0, 0, 3)

    def test_parity_rule(self) -> None:
        assert alternating_wall_open_at(4)
        assert not alternating_wall_open_at(7)

    def test_dynamic_wall_blocked_until_countdown_ends(self) -> None:
        maze = MazeModel([[3]], default_wall_turns=2)
        assert not maze.is_walkable(0, 0, 1)
        maze.advance_turn(1)
        assert not maze.is_walkable(0, 0, 2)
        maze.advance_turn(2)
        assert maze.is_walkable(0, 0, 3)

    def test_dynamic_wall_without_timer_is_blocked(self, caplog) -> None:
        maze = MazeModel([[0, 3]], timers=[])
        with caplog.at_level(logging.WARNING, logger="escape_grid.model.grid"):
            assert not maze.is_walkable(0, 1, 10)
        assert "has no timer" in caplog.text


class TestAdvanceTurn:
    def test_decrements_armed_timers(self) -> None:
        maze = MazeModel([[3, 3]], timers=[DynamicWallTimer(0, 0, 2),
                                            DynamicWallTimer(0, 1, 4)])
        maze.advance_turn(1)
        assert maze.turns_remaining(0, 0) == 1
        assert maze.turns_remaining(0, 1) == 3

    def test_wall_opens_permanently(self) -> None:
        # Dynamic wall with three turns at (1, 1)
        maze = MazeModel([[0, 0, 0], [0, 3, 0], [0, 0, 0]],
                         default_wall_turns=3)
        for turn in (1, 2):
            maze.advance_turn(turn)
            assert maze.cell_kind(1, 1) == CellKind.DYNAMIC_WALL
        assert maze.advance_turn(3) == [(1, 1)]
        assert maze.cell_kind(1, 1) == CellKind.PATH

        for turn in range(4, 20):
            assert maze.advance_turn(turn) == []
            assert maze.cell_kind(1, 1) == CellKind.PATH
            assert maze.turns_remaining(1, 1) == 0
            assert maze.is_walkable(1, 1, turn + 1)

    def test_same_turn_is_processed_once(self) -> None:
        maze = MazeModel([[3]], default_wall_turns=3)
        maze.advance_turn(1)
        maze.advance_turn(1)
        assert maze.turns_remaining(0, 0) == 2

    def test_countdowns_never_increase(self) -> None:
        maze = MazeModel([[3, 3, 3]], timers=[DynamicWallTimer(0, 0, 1),
                                               DynamicWallTimer(0, 1, 3),
                                               DynamicWallTimer(0, 2, 6)])
        previous = [t.turns_remaining for t in maze.timers]
        for turn in range(1, 10):
            maze.advance_turn(turn)
            current = [t.turns_remaining for t in maze.timers]
            assert all(c <= p for c, p in zip(current, previous))
            assert all(c >= 0 for c in current)
            previous = current


class TestSnapshot:
    def test_snapshot_is_frozen_copy(self) -> None:
        maze = MazeModel([[0, 3]], default_wall_turns=1)
        snapshot = maze.snapshot(0)
        maze.advance_turn(1)
        assert snapshot.grid[0, 1] == CellKind.DYNAMIC_WALL
        assert dict(snapshot.timers) == {(0, 1): 1}
        assert not snapshot.grid.flags.writeable

    def test_opened_walls_not_in_snapshot(self) -> None:
        maze = MazeModel([[3, 3]], timers=[DynamicWallTimer(0, 0, 1),
                                            DynamicWallTimer(0, 1, 3)])
        maze.advance_turn(1)
        assert dict(maze.snapshot(1).timers) == {(0, 1): 2}

    def test_projection_matches_live_decay(self) -> None:
        # Countdown 2: blocked for moves 1 and 2, open from move 3
        maze = MazeModel([[3]], default_wall_turns=2)
        snapshot = maze.snapshot(5)
        assert not snapshot.is_open_at(0, 0, 6)
        assert not snapshot.is_open_at(0, 0, 7)
        assert snapshot.is_open_at(0, 0, 8)

        for turn in (6, 7, 8):
            assert maze.is_walkable(0, 0, turn) == snapshot.is_open_at(0, 0, turn)
            maze.advance_turn(turn)

    def test_alternating_uses_absolute_turn(self) -> None:
        snapshot = MazeModel([[2]]).snapshot(3)
        assert snapshot.has_alternating_walls
        assert snapshot.is_open_at(0, 0, 4)
        assert not snapshot.is_open_at(0, 0, 5)

    def test_opening_horizon(self) -> None:
        maze = MazeModel([[3, 3]], timers=[DynamicWallTimer(0, 0, 2),
                                            DynamicWallTimer(0, 1, 5)])
        assert maze.snapshot(0).opening_horizon() == 6
        assert MazeModel([[0]]).snapshot(0).opening_horizon() == 1

    def test_first_cell_of(self) -> None:
        maze = MazeModel([[1, 1], [1, 0]])
        assert maze.first_cell_of(CellKind.PATH) == (1, 1)
        assert maze.first_cell_of(CellKind.DYNAMIC_WALL) is None
