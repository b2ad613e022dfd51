from __future__ import annotations
"""
Mailbox primitive for Tessera actors.

A mailbox is a FIFO queue of envelopes that are waiting for their turn. The
actor engine takes entries off the front strictly one at a time; nothing
else inspects or reorders them.

Implementation notes
--------------------
We keep a plain `collections.deque` instead of an anyio memory stream
because:
- `put` must be synchronous so FIFO order equals the order in which
  `send(...)` coroutines start,
- `destroy()` is synchronous and must be able to discard every waiting
  entry at once.
"""

from collections import deque
from dataclasses import dataclass, field

from ._envelope import Envelope
from .exceptions import ActorDestroyed


@dataclass(slots=True)
class Mailbox:
    """
    An unbounded FIFO mailbox.

    Once closed, the mailbox refuses new entries forever.
    """

    _entries: deque[Envelope] = field(init=False, default_factory=deque)
    _closed: bool = field(init=False, default=False)

    def __len__(self) -> int:
        return len(self._entries)

    def put(self, env: Envelope) -> None:
        """
        Enqueue an envelope at the back.

        Raises
        ------
        ActorDestroyed
            If the mailbox is already closed.
        """
        if self._closed:
            raise ActorDestroyed()
        self._entries.append(env)

    def pop(self) -> Envelope | None:
        """Remove and return the oldest envelope, or None if empty."""
        if not self._entries:
            return None
        return self._entries.popleft()

    def close(self) -> list[Envelope]:
        """
        Close the mailbox and return every envelope that was still waiting,
        oldest first.
        """
        self._closed = True
        discarded = list(self._entries)
        self._entries.clear()
        return discarded
