from __future__ import annotations
"""
Typed dispatch for Tessera actors.

The actor engine only knows a single `handler(state, message)`. When an
actor understands several kinds of messages, this module builds that handler
from a table of per-kind functions, each called as `fn(message, state)`.

Example
-------
counter = create_typed_state_actor(
    0,
    {
        "INC": lambda msg, state: state + 1,
        "DEC": lambda msg, state: state - 1,
        "ADD": lambda msg, state: state + msg["amount"],
    },
    kinds=("INC", "DEC", "ADD"),
)

await counter.send({"type": "ADD", "amount": 10})
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Optional

from .actor import Actor, create_actor, create_state_actor
from .exceptions import MissingHandlers, UnknownMessage
from .messages import DEFAULT_KEY, discriminator
from .typing import ErrorObserver, Handler, Handles, Logger, Reducer


def _kind_name(kind: Any) -> Any:
    if isinstance(kind, Enum):
        return kind.value
    return kind


def dispatch_by(
    handlers: Mapping[Any, Handles],
    *,
    key: str = DEFAULT_KEY,
    kinds: Optional[Iterable[Any]] = None,
) -> Handler:
    """
    Build a single engine handler from a per-kind table.

    Parameters
    ----------
    handlers:
        Maps each discriminator value to `fn(message, state)`. Keys may be
        strings or members of an Enum whose values are strings.
    key:
        Name of the discriminator field on messages.
    kinds:
        Every kind the actor must handle (e.g. an Enum class). If given, the
        table is checked up front.

    Raises
    ------
    MissingHandlers
        If `kinds` names a kind the table does not cover.
    """
    table = {_kind_name(kind): fn for kind, fn in handlers.items()}

    if kinds is not None:
        missing = [str(_kind_name(kind)) for kind in kinds if _kind_name(kind) not in table]
        if missing:
            raise MissingHandlers(missing)

    def handler(state: Any, message: Any) -> Any:
        kind = discriminator(message, key)
        fn = table.get(kind) if isinstance(kind, str) else None
        if fn is None:
            raise UnknownMessage(kind)
        return fn(message, state)

    return handler


def create_typed_state_actor(
    initial_state: Any,
    handlers: Mapping[Any, Handles],
    *,
    key: str = DEFAULT_KEY,
    kinds: Optional[Iterable[Any]] = None,
    on_error: Optional[ErrorObserver] = None,
    debug: bool = False,
    logger: Optional[Logger] = None,
) -> Actor:
    """Create a state actor where every per-kind handler returns the new state."""
    return create_state_actor(
        initial_state,
        dispatch_by(handlers, key=key, kinds=kinds),
        on_error=on_error,
        debug=debug,
        logger=logger,
    )


def create_typed_actor(
    initial_state: Any,
    handlers: Mapping[Any, Handles],
    *,
    reducer: Optional[Reducer] = None,
    key: str = DEFAULT_KEY,
    kinds: Optional[Iterable[Any]] = None,
    on_error: Optional[ErrorObserver] = None,
    debug: bool = False,
    logger: Optional[Logger] = None,
) -> Actor:
    """
    Create an actor whose per-kind handlers return a response.

    The response goes back to the `send(...)` caller; the optional reducer
    decides what of it becomes state.
    """
    return create_actor(
        initial_state,
        dispatch_by(handlers, key=key, kinds=kinds),
        reducer=reducer,
        on_error=on_error,
        debug=debug,
        logger=logger,
    )
