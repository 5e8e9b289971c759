"""
Console result presenter.

Receives PipelineState snapshots and renders them as text. The presenter
keeps its own copy of what is displayed and diffs each new snapshot against
it by Photo identity.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

from photo_search.domain.entities.photo import Photo, PipelineState


@dataclass(frozen=True, slots=True)
class ResultDiff:
    """Identity diff between two displayed result sets."""

    added: tuple[Photo, ...]
    removed: tuple[Photo, ...]
    kept: int

    @classmethod
    def between(cls, old: tuple[Photo, ...], new: tuple[Photo, ...]) -> ResultDiff:
        old_ids = {photo.id for photo in old}
        new_ids = {photo.id for photo in new}
        return cls(
            added=tuple(photo for photo in new if photo.id not in old_ids),
            removed=tuple(photo for photo in old if photo.id not in new_ids),
            kept=len(old_ids & new_ids),
        )


class ConsolePresenter:
    """Prints snapshots to a text stream."""

    def __init__(self, stream: TextIO | None = None, limit: int = 10) -> None:
        self._stream = stream or sys.stdout
        self.limit = limit
        self.displayed: tuple[Photo, ...] = ()
        self.renders = 0

    def render(self, state: PipelineState) -> None:
        self.renders += 1

        if state.last_error is not None:
            self._write(f"! search failed ({state.last_error.value}); showing previous results")
            return

        diff = ResultDiff.between(self.displayed, state.current_results)
        self.displayed = state.current_results

        if not state.current_results:
            self._write("(no results)" if state.query else "(cleared)")
            return

        self._write(
            f"{state.query!r}: {len(state.current_results)} photos "
            f"(+{len(diff.added)} -{len(diff.removed)})"
        )
        for photo in state.current_results[: self.limit]:
            self._write(f"  {photo.id:>10}  {photo.image_url}")
        hidden = len(state.current_results) - self.limit
        if hidden > 0:
            self._write(f"  ... {hidden} more")

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()
