from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, TypeVar, Union, runtime_checkable

S = TypeVar("S")
M = TypeVar("M")
R = TypeVar("R")

StateT = TypeVar("StateT", contravariant=True)
MessageT = TypeVar("MessageT", contravariant=True)

Handler = Callable[[S, M], Union[R, Awaitable[R]]]
"""Computes a response from the current state and a message. May be async."""

Reducer = Callable[[S, R], S]
"""Folds a handler response into the next state."""

ErrorObserver = Callable[[Exception, M], None]
"""Called synchronously with `(error, message)` when a handler fails."""

Subscriber = Callable[[S], None]
ChangeSubscriber = Callable[[S, Union[S, None]], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class Logger(Protocol):
    """
    Diagnostics sink accepted by `Actor(logger=...)`.

    `logging.Logger` and `logging.LoggerAdapter` both satisfy it.
    """

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


@runtime_checkable
class Handles(Protocol[StateT, MessageT]):
    """
    Protocol for objects usable as a per-kind handler in a dispatch table.

    Usage
    -----
    def add(msg: AddMessage, state: int) -> int:
        return state + msg["amount"]
    """

    def __call__(self, msg: MessageT, state: StateT) -> Any: ...
