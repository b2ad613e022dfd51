from __future__ import annotations

"""
Actor engine for Tessera.

An actor owns a state value and processes messages strictly one at a time.
Handler responses are folded into new state by an optional reducer, and
subscribers are notified whenever the state is replaced by a different
object (or, for scalars, a different value).

Example
-------
counter = create_state_actor(0, lambda state, msg: state + msg["delta"])

counter.subscribe(print)                 # prints 0
await counter.send({"delta": 2})         # prints 2, returns 2
counter.get_state()                      # 2
counter.destroy()
"""

import inspect
import logging
from typing import Any, Callable, Generic, Optional

import anyio

from ._envelope import Envelope
from .exceptions import ActorDestroyed
from .hub import Hub
from .mailbox import Mailbox
from .options import ActorOptions, identity_reducer
from .typing import (
    ChangeSubscriber,
    ErrorObserver,
    Handler,
    Logger,
    M,
    R,
    Reducer,
    S,
    Subscriber,
    Unsubscribe,
)

STATE_TOPIC = "state"

_SCALARS = (type(None), bool, int, float, complex, str, bytes)

log = logging.getLogger("tessera.actor")


def is_same_state(previous: Any, current: Any) -> bool:
    """
    Shallow change detection.

    Two states are the same if they are the same object, or if they are
    scalars of the same type that compare equal.
    """
    if previous is current:
        return True
    return (
        type(previous) is type(current)
        and isinstance(current, _SCALARS)
        and previous == current
    )


def _current_only(fn: Subscriber) -> ChangeSubscriber:
    def deliver(current: Any, previous: Any) -> None:
        fn(current)

    return deliver


def _noop() -> None:
    return None


class Actor(Generic[S, M, R]):
    """
    A message-driven state container.

    Lifecycle
    ---------
    ACTIVE -> DESTROYED. While active the engine is either idle or running
    exactly one turn. A turn is: await the handler, apply the reducer,
    notify subscribers if the state changed, return the response.

    Ordering
    --------
    Messages are processed in the order their `send(...)` coroutines start
    running. A later message always waits behind an earlier one, however
    slow the earlier handler is.

    Notes
    -----
    A handler must not `await` a `send(...)` to its own actor: that message
    is queued behind the running turn and would never start. Schedule the
    follow-up in a task instead.
    """

    def __init__(
        self,
        initial_state: S,
        handler: Handler,
        options: Optional[ActorOptions] = None,
        *,
        reducer: Optional[Reducer] = None,
        on_error: Optional[ErrorObserver] = None,
        debug: bool = False,
        logger: Optional[Logger] = None,
    ) -> None:
        if options is None:
            options = ActorOptions(reducer=reducer, on_error=on_error, debug=debug, logger=logger)
        elif reducer is not None or on_error is not None or debug or logger is not None:
            raise TypeError("Pass either `options` or option keywords, not both.")

        self._state: S = initial_state
        self._handler = handler
        self._reducer: Optional[Reducer] = options.reducer
        self._on_error: Optional[ErrorObserver] = options.on_error
        self._debug = options.debug
        self._logger: Logger = options.logger or log

        self._mailbox = Mailbox()
        self._hub = Hub(on_error=self._on_subscriber_error)
        self._processing = False
        self._destroyed = False

    @property
    def state(self) -> S:
        return self._state

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def processing(self) -> bool:
        """True while a turn is in flight."""
        return self._processing

    @property
    def pending(self) -> int:
        """Number of messages waiting behind the current turn."""
        return len(self._mailbox)

    @property
    def subscriber_count(self) -> int:
        return self._hub.subscriber_count(STATE_TOPIC)

    def get_state(self) -> S:
        """
        Return the current state.

        Works before, during and after destruction. Never waits.
        """
        return self._state

    async def send(self, message: M) -> R:
        """
        Queue a message and wait for it to be processed.

        The message is enqueued before the coroutine first suspends, so the
        processing order is the order in which `send(...)` calls start.
        Once queued, the message cannot be retracted: cancelling the caller
        takes effect only after its turn has settled.

        Returns
        -------
        R
            The handler's response.

        Raises
        ------
        ActorDestroyed
            If the actor was destroyed before the message could be
            processed.
        Exception
            Whatever the handler (or reducer) raised for this message.
        """
        env = Envelope(message=message)
        try:
            self._mailbox.put(env)
        except ActorDestroyed:
            self._log("send() rejected, actor destroyed: %r", message)
            raise
        self._log("Message sent: %r", message)

        with anyio.CancelScope(shield=True):
            if not self._processing:
                self._processing = True
                self._mailbox.pop().release()

            if not env.ready:
                await env.wait_turn()
            if env.abandoned:
                raise ActorDestroyed()

            try:
                return await self._process(env)
            finally:
                self._advance()

    def subscribe(
        self,
        fn: Callable[..., Any],
        *,
        with_previous: bool = False,
    ) -> Unsubscribe:
        """
        Subscribe to state changes.

        `fn` is called immediately with the current state, then again every
        time the state changes. With `with_previous=True` it is called as
        `fn(current, previous)`, where `previous` is None for the immediate
        call.

        Exceptions raised by `fn` are logged and otherwise ignored.

        Returns
        -------
        Unsubscribe
            Removes exactly this subscription. Safe to call more than once,
            and after `destroy()`.
        """
        deliver = fn if with_previous else _current_only(fn)

        if self._destroyed:
            self._hub.deliver(STATE_TOPIC, deliver, self._state, None)
            return _noop

        remove = self._hub.subscribe(STATE_TOPIC, deliver)
        self._log("Subscriber added (%d total)", self.subscriber_count)
        self._hub.deliver(STATE_TOPIC, deliver, self._state, None)

        def unsubscribe() -> None:
            if remove():
                self._log("Subscriber removed (%d total)", self.subscriber_count)

        return unsubscribe

    def destroy(self) -> None:
        """
        Destroy the actor.

        - New `send(...)` calls raise ActorDestroyed.
        - Messages still waiting in the mailbox are dropped; their callers
          get ActorDestroyed.
        - A turn already in flight runs its handler to completion and its
          caller gets the response, but the state is no longer written.
        - Every subscription is removed.
        - The state stays readable.

        Calling it again is a no-op.
        """
        if self._destroyed:
            return
        self._destroyed = True

        discarded = self._mailbox.close()
        for env in discarded:
            env.abandon()

        self._hub.unsubscribe_all()
        self._log("Actor destroyed, %d pending message(s) discarded", len(discarded))

    async def _process(self, env: Envelope) -> R:
        message = env.message
        previous = self._state

        try:
            response = self._handler(previous, message)
            if inspect.isawaitable(response):
                response = await response

            state = previous
            if self._reducer is not None and not self._destroyed:
                state = self._reducer(previous, response)
        except Exception as exc:
            self._fail(exc, message)
            raise

        self._log("Message processed: %r", message)

        if not is_same_state(previous, state):
            self._state = state
            self._log("State changed: %r -> %r", previous, state)
            self._hub.publish(STATE_TOPIC, state, previous)

        return response

    def _advance(self) -> None:
        """Hand the turn to the oldest waiting envelope, or go idle."""
        nxt = None if self._destroyed else self._mailbox.pop()
        if nxt is None:
            self._processing = False
            return
        nxt.release()

    def _fail(self, exc: Exception, message: Any) -> None:
        if self._debug:
            self._emit("error", "Error processing message %r", message, exc_info=exc)

        if self._on_error is None:
            return
        try:
            self._on_error(exc, message)
        except Exception as hook_exc:
            self._emit("error", "Error in on_error hook", exc_info=hook_exc)

    def _on_subscriber_error(self, exc: Exception, topic: str) -> None:
        self._emit("error", "Subscriber error", exc_info=exc)

    def _log(self, msg: str, *args: Any) -> None:
        if self._debug:
            self._emit("debug", msg, *args)

    def _emit(self, level: str, msg: str, *args: Any, **kwargs: Any) -> None:
        """Write to the diagnostics sink. A failing sink never reaches the caller."""
        try:
            getattr(self._logger, level)(msg, *args, **kwargs)
        except Exception:
            log.warning("Diagnostics sink %r failed", self._logger, exc_info=True)

    async def __aenter__(self) -> "Actor[S, M, R]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.destroy()


def create_actor(
    initial_state: S,
    handler: Handler,
    *,
    reducer: Optional[Reducer] = None,
    on_error: Optional[ErrorObserver] = None,
    debug: bool = False,
    logger: Optional[Logger] = None,
) -> Actor:
    """
    Create an actor.

    Without a reducer the handler's response is returned to the caller but
    never stored as state.
    """
    options = ActorOptions(reducer=reducer, on_error=on_error, debug=debug, logger=logger)
    return Actor(initial_state, handler, options)


def create_state_actor(
    initial_state: S,
    handler: Handler,
    *,
    on_error: Optional[ErrorObserver] = None,
    debug: bool = False,
    logger: Optional[Logger] = None,
) -> Actor:
    """Create an actor whose handler returns the new state directly."""
    return create_actor(
        initial_state,
        handler,
        reducer=identity_reducer,
        on_error=on_error,
        debug=debug,
        logger=logger,
    )
