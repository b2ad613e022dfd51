from __future__ import annotations
"""
Message helpers.

Messages are usually plain mappings carrying a string discriminator, e.g.
`{"type": "ADD", "payload": 5}`. This module provides:

- `define_message(...)`, a factory for literal message objects;
- `MessageFactory`, a validator for values that arrive from untyped sources
  (sockets, queues, JSON payloads) before they are sent to an actor.

Validation is deliberately shallow: a value is a message if its
discriminator is a non-empty string. Whether an actor knows that kind is the
dispatcher's concern.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional

DEFAULT_KEY = "type"


def discriminator(value: Any, key: str = DEFAULT_KEY) -> Any:
    """
    Read the discriminator from a mapping key or an attribute.

    Returns None when the value has neither.
    """
    if isinstance(value, Mapping):
        return value.get(key)
    return getattr(value, key, None)


def define_message(kind: str, *, key: str = DEFAULT_KEY) -> Callable[..., dict[str, Any]]:
    """
    Create a message factory for `kind`.

    Example
    -------
    increment = define_message("INCREMENT")
    add = define_message("ADD")

    increment()   # {"type": "INCREMENT"}
    add(5)        # {"type": "ADD", "payload": 5}
    """
    if not isinstance(kind, str) or not kind:
        raise ValueError("Message kind must be a non-empty string.")

    def create(payload: Any = None) -> dict[str, Any]:
        if payload is None:
            return {key: kind}
        return {key: kind, "payload": payload}

    create.__name__ = f"create_{kind.lower()}"
    return create


@dataclass(frozen=True, slots=True)
class MessageFactory:
    """
    Validates untyped values before they reach an actor.

    Parameters
    ----------
    key:
        Name of the discriminator field.
    """

    key: str = DEFAULT_KEY

    def is_valid(self, value: Any) -> bool:
        """True if `value` carries a non-empty string discriminator."""
        if value is None or isinstance(value, (str, bytes)):
            return False
        kind = discriminator(value, self.key)
        return isinstance(kind, str) and kind != ""

    def parse(self, value: Any) -> Optional[Any]:
        """Return `value` unchanged if it is a valid message, otherwise None."""
        return value if self.is_valid(value) else None

    def get_id(self, message: Any) -> str:
        """
        Return the discriminator of a message.

        Raises
        ------
        ValueError
            If `message` is not a valid message.
        """
        if not self.is_valid(message):
            raise ValueError(f"Not a message: missing {self.key!r} discriminator.")
        return discriminator(message, self.key)

    def is_kind(self, value: Any, kind: str) -> bool:
        return self.is_valid(value) and discriminator(value, self.key) == kind


def create_message_factory(key: str = DEFAULT_KEY) -> MessageFactory:
    return MessageFactory(key=key)
