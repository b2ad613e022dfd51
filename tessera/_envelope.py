from __future__ import annotations
"""
Internal mailbox entry type.

This is NOT part of the public API.

Every `send(...)` creates exactly one envelope. The envelope waits in the
mailbox until the turn before it has fully settled; the engine then hands the
turn over by setting `turn`. If the actor is destroyed while the envelope is
still waiting, it is marked `abandoned` and woken so the waiting caller can
fail with `ActorDestroyed` instead of hanging.
"""

from dataclasses import dataclass, field
from typing import Any

import anyio


@dataclass(slots=True, eq=False)
class Envelope:
    """
    Wraps a message waiting for its turn.

    Attributes
    ----------
    message:
        The user-provided message.
    turn:
        One-shot signal set when this envelope may start processing (or was
        abandoned).
    abandoned:
        True if the envelope was discarded by `destroy()` before its turn.
    """

    message: Any
    turn: anyio.Event = field(default_factory=anyio.Event)
    abandoned: bool = False

    @property
    def ready(self) -> bool:
        """True once the turn was handed over (or the envelope abandoned)."""
        return self.turn.is_set()

    def release(self) -> None:
        """Hand the turn to this envelope."""
        self.turn.set()

    def abandon(self) -> None:
        """Discard this envelope and wake its waiting caller."""
        self.abandoned = True
        self.turn.set()

    async def wait_turn(self) -> None:
        await self.turn.wait()
