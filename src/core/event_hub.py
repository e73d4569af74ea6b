import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set

logger = logging.getLogger(__name__)

# Topics pushed to dashboard clients
SENSOR_UPDATE = "sensor-update"
ROOMS_UPDATE = "rooms-update"


class EventHub:
    """
    In-process publish/subscribe.

    Handlers are called as ``handler(topic, message)``. Coroutine handlers are
    scheduled as tasks on the hub's loop; plain handlers run inline. Delivery
    is at most once and nothing is buffered for late subscribers.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: Set[asyncio.Task] = set()

    def init(self, loop: asyncio.AbstractEventLoop):
        self._loop = loop

    def subscribe(self, topic: str, handler: Callable):
        if topic not in self._subscribers:
            self._subscribers[topic] = []
        if handler not in self._subscribers[topic]:
            self._subscribers[topic].append(handler)
        logger.debug(f"Subscribed to {topic}")

    def unsubscribe(self, topic: str, handler: Callable):
        if topic in self._subscribers:
            if handler in self._subscribers[topic]:
                self._subscribers[topic].remove(handler)
                logger.debug(f"Unsubscribed from {topic}")

    def send_all_on_topic(self, topic: str, message: Any):
        # Copy so handlers may unsubscribe while we iterate
        handlers = self._subscribers.get(topic, [])[:]
        for handler in handlers:
            try:
                if asyncio.iscoroutinefunction(handler):
                    loop = self._loop or self._running_loop()
                    if loop is None:
                        logger.warning(f"EventHub loop not initialized. Cannot dispatch async handler for {topic}")
                        continue
                    task = loop.create_task(self._run(handler, topic, message))
                    self._tasks.add(task)
                    task.add_done_callback(self._tasks.discard)
                else:
                    handler(topic, message)
            except Exception as e:
                logger.error(f"Error handling message on topic {topic}: {e}")

    @staticmethod
    def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    async def _run(self, handler: Callable, topic: str, message: Any):
        try:
            await handler(topic, message)
        except Exception as e:
            logger.error(f"Error handling message on topic {topic}: {e}")

    async def drain(self):
        """Wait until every scheduled async handler has finished."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
