"""Console client: stdin lines in, rendered result snapshots out."""

from .app import build_parser, main, run, settings_from_args
from .presenter import ConsolePresenter, ResultDiff

__all__ = ["ConsolePresenter", "ResultDiff", "build_parser", "main", "run", "settings_from_args"]
