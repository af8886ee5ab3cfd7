import asyncio
import logging
from typing import Dict, Optional
from uuid import uuid4

import requests

from core.navigation import (
    NavigationChannel,
    NavigationEvent,
    NavigationKind,
    NavigationRequest,
)

logger = logging.getLogger(__name__)


class PageLoader:
    """
    Fetches a page in the background and reports progress only through its
    NavigationChannel, the way a browser view does.

    Every navigation ends with a finished or failed event, including one
    that is cancelled. A fetched body is held until ``page_content`` takes it.
    """

    def __init__(self, channel: NavigationChannel | None = None, timeout: int = 30):
        self.channel = channel or NavigationChannel()
        self.timeout = timeout
        self.pages: Dict[str, str] = {}
        self.tasks: Dict[str, asyncio.Task] = {}

    def load(self, url: str) -> NavigationRequest:
        request = NavigationRequest(id=uuid4().hex, url=url)

        self.channel.publish(NavigationEvent(request.id, NavigationKind.PENDING))

        task = asyncio.create_task(self._navigate(request))
        task.add_done_callback(lambda t: self._on_done(request, t))
        self.tasks[request.id] = task

        logger.info("Navigation %s started: %s", request.id, url)
        return request

    def page_content(self, request_id: str) -> Optional[str]:
        return self.pages.pop(request_id, None)

    def _fetch(self, url: str) -> str:
        response = requests.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.text

    async def _navigate(self, request: NavigationRequest) -> None:
        loop = asyncio.get_running_loop()

        try:
            body = await loop.run_in_executor(None, self._fetch, request.url)
        except Exception as e:
            logger.error("Navigation %s failed: %s", request.id, e)
            self.channel.publish(
                NavigationEvent(request.id, NavigationKind.FAILED, detail=str(e))
            )
            return

        self.pages[request.id] = body
        self.channel.publish(NavigationEvent(request.id, NavigationKind.FINISHED))

    def _on_done(self, request: NavigationRequest, task: asyncio.Task) -> None:
        self.tasks.pop(request.id, None)

        # also runs for tasks cancelled before they started
        if task.cancelled():
            logger.info("Navigation %s cancelled", request.id)
            self.channel.publish(
                NavigationEvent(request.id, NavigationKind.FAILED, detail="cancelled")
            )

    def cancel_all(self) -> None:
        for task in list(self.tasks.values()):
            task.cancel()
