import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.01


class NavigationKind(str, Enum):
    PENDING = "pending"
    FINISHED = "finished"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not NavigationKind.PENDING


@dataclass(frozen=True)
class NavigationRequest:
    id: str
    url: str


@dataclass(frozen=True)
class NavigationEvent:
    id: str
    kind: NavigationKind
    detail: Optional[str] = None


class NavigationChannel:
    """
    Single "current event" slot. The page loader overwrites it, the tracker
    reads it. Nobody is notified; intermediate events may be missed.
    """

    def __init__(self):
        self.current_event: Optional[NavigationEvent] = None

    def publish(self, event: NavigationEvent) -> None:
        self.current_event = event


class NavigationCompletionTracker:
    """
    Turns the fire-and-forget navigation slot into an awaitable result.

    There is no built-in deadline: if no finished/failed event for the id
    ever shows up, ``await_completion`` keeps polling unless the caller
    passes ``timeout`` or cancels the task.
    """

    def __init__(self, channel: NavigationChannel, poll_interval: float = POLL_INTERVAL):
        self.channel = channel
        self.poll_interval = poll_interval

    async def await_completion(self, request_id: str, timeout: float | None = None) -> bool:
        if timeout is None:
            return await self._poll(request_id)

        return await asyncio.wait_for(self._poll(request_id), timeout)

    async def _poll(self, request_id: str) -> bool:
        while True:
            await asyncio.sleep(self.poll_interval)

            event = self.channel.current_event

            # stale event from an earlier navigation on this channel
            if event is None or event.id != request_id:
                continue

            if event.kind == NavigationKind.FINISHED:
                logger.info("Navigation %s finished", request_id)
                return True

            if event.kind == NavigationKind.FAILED:
                logger.warning("Navigation %s failed: %s", request_id, event.detail)
                return False
