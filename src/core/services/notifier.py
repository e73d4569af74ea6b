import asyncio
import logging
from typing import Optional, Set

import requests

from core.models.records import Notification

logger = logging.getLogger(__name__)

DEFAULT_NTFY_URL = "https://ntfy.sh/alert"


class PushNotifier:
    """
    Sends push notifications through an ntfy compatible endpoint.

    Delivery is best effort: ``send`` never raises and ``dispatch`` runs it
    on a worker thread. There is no retry.
    """

    def __init__(self, url: str = DEFAULT_NTFY_URL, enabled: bool = True, timeout: Optional[float] = None):
        self.url = url
        self.enabled = enabled
        self.timeout = timeout
        self._pending: Set[asyncio.Task] = set()

    def send(self, notification: Notification) -> bool:
        """Blocking POST of one notification. Returns True when it was accepted."""
        try:
            response = requests.post(
                self.url,
                data=notification.body.encode("utf-8"),
                headers={
                    "Title": notification.title,
                    "Priority": notification.priority,
                    "Tags": notification.tags,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to send push notification '{notification.title}': {e}")
            return False

        logger.info(f"Push notification sent: {notification.title}")
        return True

    def dispatch(self, notification: Notification) -> Optional[asyncio.Task]:
        """Schedule ``send`` on a worker thread and return immediately."""
        if not self.enabled:
            logger.debug(f"Notifications disabled, dropping '{notification.title}'")
            return None

        task = asyncio.get_running_loop().create_task(self._deliver(notification))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, notification: Notification) -> bool:
        try:
            return await asyncio.to_thread(self.send, notification)
        except Exception as e:
            logger.error(f"Unexpected error while delivering '{notification.title}': {e}")
            return False

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self):
        """Wait for every notification dispatched so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
