"""Committed resolution state and run-token guarding."""

from pyrelmap.state.store import ResolutionStore, RunToken

__all__ = ["ResolutionStore", "RunToken"]
