"""Tests for escape_grid.maze_file module."""

from __future__ import annotations

from pathlib import Path

import pytest

from escape_grid.config import DynamicWallSpec, MazeConfig
from escape_grid.maze_file import layout_from_config, load_maze_file, parse_maze_text
from escape_grid.model.grid import CellKind, MazeLoadError

EXAMPLE_MAZE = Path(__file__).resolve().parents[1] / "mazes" / "example.txt"


class TestParseMazeText:
    def test_parses_digits_and_markers(self) -> None:
        layout = parse_maze_text("S 0 1\n2 3 E\n")
        assert layout.grid.tolist() == [[0, 0, 1], [2, 3, 0]]
        assert layout.start == (0, 0)
        assert layout.goal == (1, 2)
        assert [(t.position, t.turns_remaining) for t in layout.dynamic_walls] == [
            ((1, 1), 3)]

    def test_markers_may_appear_anywhere(self) -> None:
        layout = parse_maze_text("0E0\n0S0")
        assert layout.start == (1, 1)
        assert layout.goal == (0, 1)

    def test_missing_markers_use_defaults(self) -> None:
        layout = parse_maze_text("000\n000")
        assert layout.start == (0, 0)
        assert layout.goal is None
        assert layout.resolved_goal() == (1, 2)

    def test_short_rows_padded_with_walls(self) -> None:
        layout = parse_maze_text("0000\n0\n00")
        assert layout.grid.tolist() == [[0, 0, 0, 0], [0, 1, 1, 1], [0, 0, 1, 1]]

    def test_blank_lines_and_crlf_ignored(self) -> None:
        layout = parse_maze_text("\r\n0 0\r\n\r\n0 0\r\n")
        assert layout.grid.shape == (2, 2)

    @pytest.mark.parametrize("text", ["", "   \n\n  \t"])
    def test_empty_input_rejected(self, text: str) -> None:
        with pytest.raises(MazeLoadError, match="empty"):
            parse_maze_text(text)

    def test_unknown_character_rejected(self) -> None:
        with pytest.raises(MazeLoadError, match="line 2, column 3"):
            parse_maze_text("000\n00x")

    def test_default_wall_turns(self) -> None:
        layout = parse_maze_text("03\n30", dynamic_wall_turns=7)
        assert {t.turns_remaining for t in layout.dynamic_walls} == {7}
        assert layout.default_wall_turns == 7

    def test_negative_wall_turns_rejected(self) -> None:
        with pytest.raises(MazeLoadError):
            parse_maze_text("03", dynamic_wall_turns=-1)

    def test_per_cell_override(self) -> None:
        layout = parse_maze_text("033", overrides=[DynamicWallSpec(0, 2, 9)])
        timers = {t.position: t.turns_remaining for t in layout.dynamic_walls}
        assert timers == {(0, 1): 3, (0, 2): 9}

    def test_override_on_plain_cell_rejected(self) -> None:
        with pytest.raises(MazeLoadError, match="does not name a dynamic wall"):
            parse_maze_text("03", overrides=[DynamicWallSpec(0, 0, 2)])


class TestLoadMazeFile:
    def test_load_from_disk(self, tmp_path: Path) -> None:
        maze_path = tmp_path / "maze.txt"
        maze_path.write_text("S 2\n3 E\n")
        layout = load_maze_file(maze_path, dynamic_wall_turns=2)
        assert layout.grid.tolist() == [[0, 2], [3, 0]]
        assert layout.dynamic_walls[0].turns_remaining == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_maze_file(tmp_path / "nope.txt")

    def test_example_maze(self) -> None:
        layout = load_maze_file(EXAMPLE_MAZE)
        assert layout.grid.shape == (6, 8)
        assert layout.start == (0, 0)
        assert layout.goal == (5, 7)
        assert layout.grid[2, 3] == CellKind.DYNAMIC_WALL


class TestLayoutFromConfig:
    def test_inline_layout(self) -> None:
        layout = layout_from_config(MazeConfig(layout=["S00", "03E"],
                                               dynamic_wall_turns=4))
        assert layout.goal == (1, 2)
        assert layout.dynamic_walls[0].turns_remaining == 4

    def test_start_and_goal_overrides(self, tmp_path: Path) -> None:
        maze_path = tmp_path / "maze.txt"
        maze_path.write_text("S00\n00E\n")
        layout = layout_from_config(MazeConfig(file=maze_path, start=(1, 0),
                                               goal=(0, 2)))
        assert layout.start == (1, 0)
        assert layout.goal == (0, 2)

    def test_no_source(self) -> None:
        with pytest.raises(MazeLoadError):
            layout_from_config(MazeConfig())
