from __future__ import annotations
"""
Notification hub for Tessera.

A minimal publish/subscribe facility. The actor engine uses a single topic
to fan out state changes, but the hub itself is topic-keyed and knows
nothing about actors.

Delivery rules
--------------
- Callbacks run synchronously, in registration order.
- A failing callback never stops the fan-out and never escapes `publish`.
  Its exception is handed to the error sink instead.
- Every registration has its own token, so registering the same function
  twice yields two independent subscriptions.
- A callback removed during a publish is not called later in that publish.
  A callback added during a publish waits for the next one.
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger("tessera.hub")

Callback = Callable[..., Any]
ErrorSink = Callable[[Exception, str], None]


def log_subscriber_error(exc: Exception, topic: str) -> None:
    """Default error sink: log the failure with its traceback."""
    logger.error("Subscriber error on topic %r", topic, exc_info=exc)


class Hub:
    """
    Topic keyed callback registry with per-callback failure isolation.

    Parameters
    ----------
    on_error:
        Error sink called with `(exception, topic)` whenever a callback
        raises. Defaults to logging the exception on the `tessera.hub`
        logger.
    """

    def __init__(self, on_error: Optional[ErrorSink] = None) -> None:
        self._topics: dict[str, dict[int, Callback]] = {}
        self._next_token: int = 1
        self._on_error: ErrorSink = on_error or log_subscriber_error

    def subscribe(self, topic: str, fn: Callback) -> Callable[[], bool]:
        """
        Register `fn` for `topic`.

        Returns
        -------
        Callable[[], bool]
            A remover. It returns True the first time it actually removes the
            registration and False on every later call.
        """
        token = self._next_token
        self._next_token += 1
        self._topics.setdefault(topic, {})[token] = fn

        def unsubscribe() -> bool:
            return self._remove(topic, token)

        return unsubscribe

    def publish(self, topic: str, *args: Any) -> None:
        """Call every callback registered for `topic` with `*args`."""
        listeners = self._topics.get(topic)
        if not listeners:
            return

        for token in list(listeners):
            fn = listeners.get(token)
            if fn is None:
                continue
            self.deliver(topic, fn, *args)

    def deliver(self, topic: str, fn: Callback, *args: Any) -> None:
        """
        Call a single callback with failure isolation.

        Used by `publish` and by callers that need to emit to one
        subscriber only (e.g. the immediate emission on subscribe).
        """
        try:
            fn(*args)
        except Exception as exc:
            self._report(exc, topic)

    def unsubscribe_all(self) -> None:
        """Remove every registration on every topic."""
        for listeners in self._topics.values():
            listeners.clear()
        self._topics.clear()

    def subscriber_count(self, topic: str) -> int:
        return len(self._topics.get(topic, ()))

    def _remove(self, topic: str, token: int) -> bool:
        listeners = self._topics.get(topic)
        if listeners is None or token not in listeners:
            return False
        del listeners[token]
        if not listeners:
            self._topics.pop(topic, None)
        return True

    def _report(self, exc: Exception, topic: str) -> None:
        try:
            self._on_error(exc, topic)
        except Exception:
            logger.exception("Error in hub error sink")
