from __future__ import annotations


class TesseraError(Exception):
    """Base exception for all Tessera actor errors."""


class ActorDestroyed(TesseraError):
    """
    Raised when sending to an actor that has been destroyed.

    This happens if:
    - `send(...)` is called after `destroy()`,
    - the message was still waiting in the mailbox when `destroy()` ran.

    It is never retried by the actor.
    """

    def __init__(self, message: str = "Actor has been destroyed") -> None:
        super().__init__(message)


class UnknownMessage(TesseraError, LookupError):
    """
    Raised by a dispatching handler when no handler is registered for the
    message kind.

    Like any handler failure, it only fails the `send(...)` that carried the
    message.
    """

    def __init__(self, kind: object) -> None:
        super().__init__(f"No handler registered for message kind {kind!r}.")
        self.kind = kind


class MissingHandlers(TesseraError, ValueError):
    """
    Raised when building a dispatch table that does not cover every declared
    message kind.
    """

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing handlers for message kinds: {', '.join(missing)}.")
        self.missing = missing
