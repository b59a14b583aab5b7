"""Visualization and export for the escape-the-grid game."""

from pathlib import Path
from typing import List, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import RegularPolygon
from PIL import Image

from ..model.grid import CellKind, alternating_wall_open_at
from ..model.state import GameSnapshot

# Vertical distance between row centres, in column widths
ROW_SPACING = 0.85


def cell_center(row: int, col: int) -> Tuple[float, float]:
    """Drawing centre of a cell; odd rows are shifted half a cell right."""
    return (col + 0.5 * (row % 2), row * ROW_SPACING)


class Visualizer:
    """
    Draws the pentagon board with matplotlib.

    Even rows are drawn as point-down pentagons, odd rows point-up, matching
    the five-neighbour adjacency. Frames kept by `buffer_frame` become the
    GIF written by `generate_gif`; `save_snapshot` writes a single PNG.
    """

    COLORS = {
        'path': '#ECF0F1',       # Light gray
        'wall': '#2C3E50',       # Dark blue-gray
        'alt_open': '#5DADE2',   # Light blue
        'alt_closed': '#F4D03F', # Yellow
        'dynamic': '#566573',    # Slate
        'goal': '#F39C12',       # Orange
        'player': '#27AE60',     # Green
        'clone': '#3455DB',      # Blue
        'hint': '#E74C3C',       # Red
    }

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self.frames: List[Image.Image] = []

    def _cell_color(self, kind: CellKind, next_turn: int) -> str:
        if kind == CellKind.WALL:
            return self.COLORS['wall']
        if kind == CellKind.ALTERNATING_WALL:
            if alternating_wall_open_at(next_turn):
                return self.COLORS['alt_open']
            return self.COLORS['alt_closed']
        if kind == CellKind.DYNAMIC_WALL:
            return self.COLORS['dynamic']
        return self.COLORS['path']

    def _figure_size(self) -> Tuple[float, float]:
        """Six inches tall, widened for boards with many columns."""
        aspect = (self.cols + 0.5) / max(1.0, self.rows * ROW_SPACING)
        return (max(6.0, 6.0 * aspect), 6.0)

    def _create_figure(self, state: GameSnapshot,
                       show_path: bool = True) -> plt.Figure:
        fig, ax = plt.subplots(figsize=self._figure_size())

        # Alternating walls are coloured by whether they can be entered next turn
        next_turn = state.turn + 1
        for r in range(self.rows):
            for c in range(self.cols):
                x, y = cell_center(r, c)
                kind = CellKind(int(state.grid[r, c]))
                ax.add_patch(RegularPolygon(
                    (x, y), numVertices=5, radius=0.55,
                    orientation=np.pi if r % 2 == 0 else 0.0,
                    facecolor=self._cell_color(kind, next_turn),
                    edgecolor='#BDC3C7', linewidth=0.5))
                remaining = state.dynamic_walls.get((r, c))
                if remaining:
                    ax.text(x, y, str(remaining), ha='center', va='center',
                            color='white', fontsize=8)

        # Draw goal
        gx, gy = cell_center(*state.goal)
        ax.plot(gx, gy, 's', color=self.COLORS['goal'], markersize=10,
                markeredgecolor='black', markeredgewidth=0.5)

        # Hint path
        if show_path and state.hint_path:
            xs, ys = zip(*(cell_center(r, c) for r, c in state.hint_path))
            ax.plot(xs, ys, '-', color=self.COLORS['hint'], linewidth=2,
                    alpha=0.8)

        # Draw entities
        px, py = cell_center(*state.player.position)
        ax.plot(px, py, 'o', color=self.COLORS['player'], markersize=10,
                markeredgecolor='white', markeredgewidth=0.8)
        if state.clone.active:
            cx, cy = cell_center(*state.clone.position)
            ax.plot(cx, cy, 'X', color=self.COLORS['clone'], markersize=10,
                    markeredgecolor='white', markeredgewidth=0.8)

        ax.set_title(f'Turn {state.turn} | Status: {state.status} | '
                     f'Clone: {"active" if state.clone.active else "waiting"}')
        ax.set_xlim(-1, self.cols + 0.5)
        ax.set_ylim(self.rows * ROW_SPACING, -1)  # Row 0 at the top
        ax.set_aspect('equal')
        ax.axis('off')

        markers = [('o', 'Player', 'player'), ('X', 'Clone', 'clone'),
                   ('s', 'Goal', 'goal')]
        ax.legend(handles=[
            plt.Line2D([0], [0], marker=marker, color='w', label=label,
                       markerfacecolor=self.COLORS[key], markersize=8)
            for marker, label, key in markers
        ], loc='upper right', fontsize=8)

        fig.tight_layout()
        return fig

    def buffer_frame(self, state: GameSnapshot) -> None:
        """Render the state off-screen and keep it as a GIF frame."""
        fig = self._create_figure(state)
        fig.set_dpi(80)
        fig.canvas.draw()
        rgba = np.asarray(fig.canvas.buffer_rgba())
        self.frames.append(Image.fromarray(rgba).convert('RGB'))
        plt.close(fig)

    def save_snapshot(self, state: GameSnapshot, output_path: Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(state)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 4) -> None:
        """Write the buffered frames as a looping GIF. No frames, no file."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        first, *rest = self.frames
        first.save(output_path, format='GIF', save_all=True,
                   append_images=rest, duration=max(1, 1000 // fps), loop=0)

    def clear_frames(self) -> None:
        self.frames.clear()
