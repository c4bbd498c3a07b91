"""Message bus between the sandboxed UI and the privileged host."""

from davbrowse.bus.events import Message, MessageName, Side
from davbrowse.bus.queue import MessageBus

__all__ = ["Message", "MessageBus", "MessageName", "Side"]
