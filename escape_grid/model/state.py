"""State snapshot dataclasses for the escape-the-grid game."""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

Position = Tuple[int, int]


@dataclass(frozen=True)
class EntitySnapshot:
    """Immutable snapshot of an entity at a given turn."""
    row: int
    col: int
    active: bool

    @property
    def position(self) -> Position:
        return (self.row, self.col)


@dataclass
class GameSnapshot:
    """Complete read-only view of the game at a given turn, for renderers."""
    turn: int
    status: str  # "playing", "won", "lost"
    player: EntitySnapshot
    clone: EntitySnapshot
    goal: Position
    grid: np.ndarray                    # Copy of cell kinds
    dynamic_walls: Dict[Position, int]  # Remaining countdown per armed wall
    hint_path: List[Position] = field(default_factory=list)
    metrics: Dict[str, int] = field(default_factory=dict)

    CSV_FIELDS = ['turn', 'player_row', 'player_col',
                  'clone_row', 'clone_col', 'clone_active', 'status']

    def to_csv_row(self) -> Dict:
        """Convert to CSV-compatible format."""
        return {
            "turn": self.turn,
            "player_row": self.player.row,
            "player_col": self.player.col,
            "clone_row": self.clone.row,
            "clone_col": self.clone.col,
            "clone_active": int(self.clone.active),
            "status": self.status,
        }
