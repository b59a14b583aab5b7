"""I/O package for the escape-the-grid game."""

from .csv_writer import CSVWriter
from .visualizer import Visualizer
from .reporter import Reporter, render_board

__all__ = ['CSVWriter', 'Visualizer', 'Reporter', 'render_board']
