from __future__ import annotations
"""
Construction options for Tessera actors.

Options are fixed for the lifetime of an actor. They describe how handler
responses become state, who observes handler failures, and where
diagnostics go.

This module defines:
- the options record
- the reducer used by the simplified "handler returns the new state" mode
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .typing import Logger


def identity_reducer(state: Any, response: Any) -> Any:
    """Reducer for simplified mode: the handler response is the new state."""
    return response


@dataclass(frozen=True, slots=True)
class ActorOptions:
    """
    Defines how an actor folds responses and reports what it does.

    Parameters
    ----------
    reducer:
        `reducer(state, response) -> new_state`. When None, handler responses
        are returned to the caller but the state is never updated.
    on_error:
        `on_error(error, message)`, called synchronously when the handler (or
        reducer) raises, before the error reaches the `send(...)` caller.
    debug:
        Log lifecycle events (sent, processed, state changed, subscribers,
        destroyed) at DEBUG level and handler failures at ERROR level.
    logger:
        Diagnostics sink. Defaults to the `tessera.actor` logger.
    """

    reducer: Optional[Callable[[Any, Any], Any]] = None
    on_error: Optional[Callable[[Exception, Any], None]] = None
    debug: bool = False
    logger: Optional[Logger] = None
