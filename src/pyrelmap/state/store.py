"""Deterministic in-memory store for the committed resolution result.

This is the only component allowed to replace the result a UI renders.
Every run gets a :class:`RunToken`; starting a newer run or cancelling
invalidates older tokens, and results carrying a stale token are
discarded instead of committed.
"""

from __future__ import annotations

import dataclasses
import logging

from pyrelmap.exceptions import ResolutionCancelledError
from pyrelmap.models.resolution import ResolutionResult

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class RunToken:
    """Generation number of one resolution run."""

    generation: int
    store: ResolutionStore = dataclasses.field(repr=False, compare=False)

    @property
    def is_current(self) -> bool:
        return self.store.generation == self.generation

    def ensure_current(self) -> None:
        """Raise :class:`ResolutionCancelledError` once the run is superseded."""
        if not self.is_current:
            raise ResolutionCancelledError(
                f"run {self.generation} superseded by generation {self.store.generation}"
            )


class ResolutionStore:
    """Holds the committed result of the latest resolution run.

    Given the same sequence of ``begin``/``commit``/``cancel`` calls it
    produces the same committed state; no result from an older
    generation can ever overwrite a newer one.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._current: ResolutionResult | None = None
        self._last_error: Exception | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current(self) -> ResolutionResult | None:
        """Result of the most recent committed run, if any."""
        return self._current

    @property
    def last_error(self) -> Exception | None:
        """Fatal error of the most recent run, cleared by the next commit."""
        return self._last_error

    def begin(self) -> RunToken:
        """Start a new run, invalidating every earlier token."""
        self._generation += 1
        _logger.debug("Resolution run %d started", self._generation)
        return RunToken(generation=self._generation, store=self)

    def cancel(self) -> None:
        """Invalidate the in-flight run (if any) without starting a new one."""
        self._generation += 1
        _logger.debug("Resolution runs before generation %d cancelled", self._generation)

    def commit(self, token: RunToken, result: ResolutionResult) -> bool:
        """Commit *result* if *token* is still current.

        Returns ``True`` when the result became the committed state.
        """
        if not token.is_current:
            _logger.debug(
                "Discarding result of run %d (current generation %d)",
                token.generation,
                self._generation,
            )
            return False
        self._current = result
        self._last_error = None
        return True

    def fail(self, token: RunToken, error: Exception) -> bool:
        """Record a fatal run error; the UI falls back to the empty state."""
        if not token.is_current:
            return False
        self._current = None
        self._last_error = error
        return True
