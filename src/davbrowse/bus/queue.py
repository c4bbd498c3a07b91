# Message bus — two asyncio channels, one per side of the process boundary.
# Created: 2026-03-05

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from davbrowse.bus.events import Message, MessageName, Side

logger = logging.getLogger(__name__)

Handler = Callable[[Message], Awaitable[None]]


class MessageBus:
    """Fire-and-forget delivery between the UI and the host.

    ``post`` never blocks the sender. Each side has its own queue and
    dispatcher; every delivery runs as its own task, so a slow handler (a
    PROPFIND on the host) does not hold up later messages and replies may
    arrive out of order.
    """

    def __init__(self) -> None:
        self._queues: dict[Side, asyncio.Queue[Message]] = {side: asyncio.Queue() for side in Side}
        self._handlers: dict[MessageName, list[Handler]] = {}
        self._dispatchers: list[asyncio.Task] = []
        self._deliveries: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return bool(self._dispatchers)

    def on(self, name: MessageName | str, handler: Handler) -> None:
        """Register ``handler`` for messages called ``name``."""
        self._handlers.setdefault(MessageName(name), []).append(handler)

    def post(self, message: Message) -> None:
        """Queue a message for its destination side."""
        logger.debug("-> %s %s", message.destination.value, message.name.value)
        self._queues[message.destination].put_nowait(message)

    async def start(self) -> None:
        if self._dispatchers:
            return
        for side in Side:
            self._dispatchers.append(asyncio.create_task(self._dispatch_loop(side)))
        logger.debug("Message bus started")

    async def stop(self) -> None:
        for task in self._dispatchers:
            task.cancel()
        await asyncio.gather(*self._dispatchers, return_exceptions=True)
        self._dispatchers.clear()
        logger.debug("Message bus stopped")

    async def drain(self) -> None:
        """Wait until every queued message and every handler has finished."""
        if not self._dispatchers:
            raise RuntimeError("Message bus is not running")
        while True:
            for queue in self._queues.values():
                await queue.join()
            pending = [t for t in self._deliveries if not t.done()]
            if not pending and all(q.empty() for q in self._queues.values()):
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def _dispatch_loop(self, side: Side) -> None:
        queue = self._queues[side]
        while True:
            message = await queue.get()
            try:
                handlers = self._handlers.get(message.name, [])
                if not handlers:
                    logger.warning("No %s handler for %s", side.value, message.name.value)
                for handler in handlers:
                    task = asyncio.create_task(self._deliver(handler, message))
                    self._deliveries.add(task)
                    task.add_done_callback(self._deliveries.discard)
            finally:
                queue.task_done()

    @staticmethod
    async def _deliver(handler: Handler, message: Message) -> None:
        try:
            await handler(message)
        except Exception:
            logger.exception("Handler for %s failed", message.name.value)
