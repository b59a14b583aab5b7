"""Configuration dataclasses and YAML loader for the escape-the-grid game."""

from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Optional
from pathlib import Path
import yaml


class ConfigError(ValueError):
    """Raised when a configuration file is malformed."""


@dataclass
class DynamicWallSpec:
    row: int
    col: int
    turns: int


@dataclass
class MazeConfig:
    file: Optional[Path] = None
    layout: Optional[List[str]] = None  # inline rows, same format as the file
    start: Optional[Tuple[int, int]] = None  # overrides the S marker
    goal: Optional[Tuple[int, int]] = None   # overrides the E marker
    dynamic_wall_turns: int = 3
    dynamic_walls: List[DynamicWallSpec] = field(default_factory=list)


@dataclass
class RulesConfig:
    clone_activation_turn: int = 6


@dataclass
class GameConfig:
    maze: MazeConfig
    rules: RulesConfig = field(default_factory=RulesConfig)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def _parse_position(raw: Any, name: str) -> Optional[Tuple[int, int]]:
    """Parse a [row, col] pair."""
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ConfigError(f"{name} must be a [row, col] pair, got {raw!r}")
    return (int(raw[0]), int(raw[1]))


def _parse_dynamic_walls(walls_raw: List[Dict]) -> List[DynamicWallSpec]:
    """Parse per-cell dynamic wall countdowns from raw YAML data."""
    walls = []
    for w in walls_raw:
        try:
            spec = DynamicWallSpec(row=int(w['row']), col=int(w['col']),
                                   turns=int(w['turns']))
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid dynamic wall entry {w!r}") from exc
        if spec.turns < 0:
            raise ConfigError(f"Dynamic wall turns must be >= 0: {w!r}")
        walls.append(spec)
    return walls


def _parse_maze(maze_raw: Dict, base_dir: Path) -> MazeConfig:
    """Parse the maze section; relative file paths resolve against base_dir."""
    maze_file = maze_raw.get('file')
    layout = maze_raw.get('layout')
    if maze_file is None and layout is None:
        raise ConfigError("maze section needs either 'file' or 'layout'")
    if layout is not None and not isinstance(layout, list):
        raise ConfigError("maze.layout must be a list of row strings")

    path = None
    if maze_file is not None:
        path = Path(maze_file)
        if not path.is_absolute():
            path = base_dir / path

    turns = int(maze_raw.get('dynamic_wall_turns', 3))
    if turns < 0:
        raise ConfigError("maze.dynamic_wall_turns must be >= 0")

    return MazeConfig(
        file=path,
        layout=[str(row) for row in layout] if layout is not None else None,
        start=_parse_position(maze_raw.get('start'), 'maze.start'),
        goal=_parse_position(maze_raw.get('goal'), 'maze.goal'),
        dynamic_wall_turns=turns,
        dynamic_walls=_parse_dynamic_walls(maze_raw.get('dynamic_walls', []))
    )


def config_for_maze_file(maze_path: Path) -> GameConfig:
    """Default configuration around a bare maze file."""
    return GameConfig(maze=MazeConfig(file=Path(maze_path)))


def load_config(config_path: Path) -> GameConfig:
    """Load and validate YAML configuration file."""
    config_path = Path(config_path)
    with open(config_path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict) or 'maze' not in raw:
        raise ConfigError(f"{config_path} must define a 'maze' section")

    maze = _parse_maze(raw['maze'], config_path.parent)

    # Parse rules (optional)
    rules_raw = raw.get('rules') or {}
    rules = RulesConfig(
        clone_activation_turn=int(rules_raw.get('clone_activation_turn', 6))
    )
    if rules.clone_activation_turn < 1:
        raise ConfigError("rules.clone_activation_turn must be >= 1")

    # Parse export config (optional)
    export_raw = raw.get('export') or {}

    return GameConfig(
        maze=maze,
        rules=rules,
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False)
    )
