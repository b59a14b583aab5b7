"""Player and clone entities."""

from dataclasses import dataclass
from typing import Iterator, List, Sequence

from .grid import Position

# Clone position before it has been activated
OFF_GRID: Position = (-1, -1)


@dataclass
class Entity:
    """A piece on the board. Player and clone share this record."""
    position: Position
    active: bool = False

    @property
    def row(self) -> int:
        return self.position[0]

    @property
    def col(self) -> int:
        return self.position[1]


class MovementHistory:
    """
    Append-only record of committed positions.

    Index 0 is the position after the first move; the starting position is
    not part of the history.
    """

    def __init__(self) -> None:
        self._positions: List[Position] = []

    def append(self, position: Position) -> None:
        self._positions.append(position)

    def __len__(self) -> int:
        return len(self._positions)

    def __getitem__(self, index: int) -> Position:
        return self._positions[index]

    def __iter__(self) -> Iterator[Position]:
        return iter(self._positions)

    def as_list(self) -> List[Position]:
        return list(self._positions)


def commit_move(entity: Entity, history: MovementHistory,
                target: Position) -> None:
    """Move an entity directly and record the move."""
    entity.position = target
    history.append(target)


def replay_index(current_turn: int, activation_turn: int) -> int:
    return current_turn - activation_turn


class PursuerReplay:
    """
    The clone: replays the leader's history with a fixed lag.

    Once active, at turn t the clone stands on history[t - activation_turn].
    It is never pathed on its own and only ever occupies positions the
    leader has already visited.
    """

    def __init__(self, activation_turn: int = 6):
        if activation_turn < 1:
            raise ValueError("Clone activation turn must be >= 1")
        self.activation_turn = activation_turn
        self.entity = Entity(OFF_GRID, active=False)

    @property
    def active(self) -> bool:
        return self.entity.active

    @property
    def position(self) -> Position:
        return self.entity.position

    def should_activate(self, current_turn: int) -> bool:
        return not self.entity.active and current_turn >= self.activation_turn

    def activate(self) -> None:
        self.entity.active = True

    def update(self, leader_history: Sequence[Position],
               current_turn: int) -> None:
        """Move to the lagged history entry; keep position if it does not exist yet."""
        if not self.entity.active:
            return
        lag_index = replay_index(current_turn, self.activation_turn)
        if 0 <= lag_index < len(leader_history):
            self.entity.position = leader_history[lag_index]

    def blocked_positions(self) -> List[Position]:
        """Cells the leader may not step onto this turn."""
        return [self.entity.position] if self.entity.active else []
