import asyncio
import itertools
import logging
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from repodiagram.models import JobMessage

logger = logging.getLogger(__name__)


class QueuedJob(BaseModel):
    """A received message plus the delivery id used to acknowledge it."""

    model_config = ConfigDict(frozen=True)

    delivery_id: int
    message: JobMessage


class JobQueue(Protocol):
    async def send(self, message: JobMessage) -> None: ...

    async def receive_batch(self, max_messages: int, timeout: float) -> list[QueuedJob]: ...

    async def ack(self, job: QueuedJob) -> None: ...


class InMemoryJobQueue:
    """asyncio-backed queue.

    ``receive_batch`` waits up to ``timeout`` seconds for the first message and
    then drains whatever is already queued, up to ``max_messages``. Received
    jobs stay in-flight until acknowledged.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[JobMessage] = asyncio.Queue()
        self._in_flight: dict[int, JobMessage] = {}
        self._ids = itertools.count(1)

    async def send(self, message: JobMessage) -> None:
        await self._queue.put(message)
        logger.debug("Queued diagram job for %s/%s", message.owner, message.repo)

    async def receive_batch(self, max_messages: int, timeout: float) -> list[QueuedJob]:
        try:
            first = await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return []

        messages = [first]
        while len(messages) < max_messages:
            try:
                messages.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                break

        batch = []
        for message in messages:
            job = QueuedJob(delivery_id=next(self._ids), message=message)
            self._in_flight[job.delivery_id] = message
            batch.append(job)
        return batch

    async def ack(self, job: QueuedJob) -> None:
        self._in_flight.pop(job.delivery_id, None)

    def qsize(self) -> int:
        return self._queue.qsize()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)
