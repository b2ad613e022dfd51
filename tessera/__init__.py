__version__ = "0.1.0"

from .actor import Actor, create_actor, create_state_actor, is_same_state
from .dispatch import create_typed_actor, create_typed_state_actor, dispatch_by
from .exceptions import ActorDestroyed, MissingHandlers, TesseraError, UnknownMessage
from .hub import Hub
from .messages import MessageFactory, create_message_factory, define_message
from .options import ActorOptions, identity_reducer

__all__ = [
    "Actor",
    "ActorOptions",
    "Hub",
    "MessageFactory",
    "TesseraError",
    "ActorDestroyed",
    "UnknownMessage",
    "MissingHandlers",
    "create_actor",
    "create_state_actor",
    "create_typed_actor",
    "create_typed_state_actor",
    "create_message_factory",
    "define_message",
    "dispatch_by",
    "identity_reducer",
    "is_same_state",
]
