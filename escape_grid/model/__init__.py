"""Model package for the escape-the-grid game."""

from .grid import (CellKind, DynamicWallTimer, MazeLayout, MazeLoadError,
                   MazeModel, MazeSnapshot, OutOfBoundsError,
                   alternating_wall_open_at)
from .adjacency import Direction, NEIGHBOR_OFFSETS, parse_tokens
from .pathfinder import find_shortest_path
from .turn import TurnEngine
from .entity import Entity, MovementHistory, OFF_GRID, PursuerReplay
from .state import EntitySnapshot, GameSnapshot
from .engine import GameEngine, GameStatus, MoveResult

__all__ = [
    'CellKind',
    'DynamicWallTimer',
    'MazeLayout',
    'MazeLoadError',
    'MazeModel',
    'MazeSnapshot',
    'OutOfBoundsError',
    'alternating_wall_open_at',
    'Direction',
    'NEIGHBOR_OFFSETS',
    'parse_tokens',
    'find_shortest_path',
    'TurnEngine',
    'Entity',
    'MovementHistory',
    'OFF_GRID',
    'PursuerReplay',
    'EntitySnapshot',
    'GameSnapshot',
    'GameEngine',
    'GameStatus',
    'MoveResult',
]
