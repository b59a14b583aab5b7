"""Summary report generation for the escape-the-grid game."""

from typing import List, Dict, Optional
from pathlib import Path

from ..model.grid import CellKind
from ..model.state import GameSnapshot

# Characters for the text board
CELL_CHARS = {
    CellKind.PATH: '.',
    CellKind.WALL: '#',
    CellKind.ALTERNATING_WALL: '~',
    CellKind.DYNAMIC_WALL: '+',
}


def render_board(state: GameSnapshot) -> str:
    """
    Plain-text board. Odd rows are indented by one character to show the
    stagger. P = player, C = clone, G = goal, * = hint path.
    """
    path_cells = set(state.hint_path)
    lines = []
    for r, row in enumerate(state.grid):
        chars = []
        for c, value in enumerate(row):
            pos = (r, c)
            if pos == state.player.position:
                chars.append('P')
            elif state.clone.active and pos == state.clone.position:
                chars.append('C')
            elif pos == state.goal:
                chars.append('G')
            elif pos in path_cells:
                chars.append('*')
            else:
                chars.append(CELL_CHARS[CellKind(int(value))])
        lines.append((' ' if r % 2 else '') + ' '.join(chars))
    return '\n'.join(lines)


class Reporter:
    """Collects per-turn metrics and formats the end-of-game report."""

    def __init__(self, source: str, clone_activation_turn: int):
        self.source = source
        self.clone_activation_turn = clone_activation_turn
        self.turn_metrics: List[Dict] = []
        self.clone_active_since: Optional[int] = None
        self.shortest_hint: Optional[int] = None

    def update(self, state: GameSnapshot) -> None:
        self.turn_metrics.append(dict(state.metrics, turn=state.turn))

        if state.clone.active and self.clone_active_since is None:
            self.clone_active_since = state.turn

        if state.hint_path:
            moves = len(state.hint_path) - 1
            if self.shortest_hint is None or moves < self.shortest_hint:
                self.shortest_hint = moves

    def generate_summary(self, final_state: GameSnapshot,
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        metrics = final_state.metrics
        outcome = {
            'won': 'ESCAPED',
            'lost': 'CAUGHT BY THE CLONE',
            'playing': 'IN PROGRESS',
        }.get(final_state.status, final_state.status.upper())

        clone_line = (f"turn {self.clone_active_since}"
                      if self.clone_active_since is not None
                      else f"not yet (activates on turn "
                           f"{self.clone_activation_turn})")
        hint_line = (f"{self.shortest_hint} moves"
                     if self.shortest_hint is not None else "(not requested)")

        lines = [
            "",
            "=" * 80,
            "                      ESCAPE THE GRID - GAME REPORT",
            "=" * 80,
            f"Maze: {self.source}",
            "",
            "GAME METRICS",
            "-" * 40,
            f"Outcome:               {outcome}",
            f"Turns Played:          {final_state.turn}",
            f"Moves Committed:       {metrics.get('moves_committed', 0)}",
            f"Moves Rejected:        {metrics.get('moves_rejected', 0)}",
            f"Dynamic Walls Opened:  {metrics.get('walls_opened', 0)}",
            f"Clone Active Since:    {clone_line}",
            f"Shortest Hint Seen:    {hint_line}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        outputs = [
            ("CSV Log:", csv_enabled, 'turn_log.csv'),
            ("Snapshot:", snapshot_enabled, 'final_state.png'),
            ("Animation:", gif_enabled, 'game.gif'),
        ]
        for label, enabled, filename in outputs:
            target = output_dir / filename if enabled else "(disabled)"
            lines.append(f"{label:<12}{target}")
        lines.append("=" * 80)
        return "\n".join(lines)
