"""Tests for escape_grid.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from escape_grid.config import (ConfigError, DynamicWallSpec,
                                config_for_maze_file, load_config)
from escape_grid.model.engine import GameEngine

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "game.yaml"
    path.write_text(text)
    return path


class TestLoadConfig:
    def test_minimal_config_defaults(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, "maze:\n  file: maze.txt\n"))
        assert config.maze.file == tmp_path / "maze.txt"
        assert config.maze.dynamic_wall_turns == 3
        assert config.maze.dynamic_walls == []
        assert config.rules.clone_activation_turn == 6
        assert config.csv_enabled
        assert config.snapshot_enabled
        assert not config.gif_enabled

    def test_absolute_maze_path_kept(self, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere" / "maze.txt"
        config = load_config(_write(tmp_path, f"maze:\n  file: {target}\n"))
        assert config.maze.file == target

    def test_full_config(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, """
maze:
  layout:
    - "S 0 3"
    - "0 3 E"
  start: [1, 0]
  goal: [0, 1]
  dynamic_wall_turns: 2
  dynamic_walls:
    - {row: 0, col: 2, turns: 4}
rules:
  clone_activation_turn: 8
export:
  csv: false
  snapshot: false
  gif: true
"""))
        assert config.maze.layout == ["S 0 3", "0 3 E"]
        assert config.maze.start == (1, 0)
        assert config.maze.goal == (0, 1)
        assert config.maze.dynamic_wall_turns == 2
        assert config.maze.dynamic_walls == [DynamicWallSpec(0, 2, 4)]
        assert config.rules.clone_activation_turn == 8
        assert not config.csv_enabled
        assert not config.snapshot_enabled
        assert config.gif_enabled

        engine = GameEngine.from_config(config)
        assert engine.start == (1, 0)
        assert engine.maze.turns_remaining(0, 2) == 4
        assert engine.maze.turns_remaining(1, 1) == 2

    @pytest.mark.parametrize("text,match", [
        ("rules:\n  clone_activation_turn: 3\n", "maze"),
        ("maze:\n  dynamic_wall_turns: 3\n", "file"),
        ("maze:\n  layout: S0E\n", "list"),
        ("maze:\n  file: m.txt\n  start: [1]\n", "maze.start"),
        ("maze:\n  file: m.txt\n  dynamic_wall_turns: -2\n", "dynamic_wall_turns"),
        ("maze:\n  file: m.txt\n  dynamic_walls:\n    - {row: 1}\n", "dynamic wall"),
        ("maze:\n  file: m.txt\n  dynamic_walls:\n    - {row: 1, col: 1, turns: -1}\n",
         "turns"),
        ("maze:\n  file: m.txt\nrules:\n  clone_activation_turn: 0\n",
         "clone_activation_turn"),
    ])
    def test_invalid_configs(self, tmp_path: Path, text: str, match: str) -> None:
        with pytest.raises(ConfigError, match=match):
            load_config(_write(tmp_path, text))

    def test_empty_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path, ""))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_config_error_is_value_error(self) -> None:
        assert issubclass(ConfigError, ValueError)


class TestShippedConfig:
    def test_default_config_builds_a_game(self) -> None:
        config = load_config(DEFAULT_CONFIG)
        assert config.maze.file.resolve().name == "example.txt"
        assert config.maze.dynamic_walls == [DynamicWallSpec(4, 5, 5)]

        engine = GameEngine.from_config(config)
        assert engine.maze.shape == (6, 8)
        assert engine.maze.turns_remaining(4, 5) == 5
        assert engine.maze.turns_remaining(2, 3) == 3
        assert engine.clone_activation_turn == 6

    def test_bare_maze_file_defaults(self) -> None:
        config = config_for_maze_file(Path("mazes/example.txt"))
        assert config.maze.file == Path("mazes/example.txt")
        assert config.maze.dynamic_wall_turns == 3
        assert config.rules.clone_activation_turn == 6
