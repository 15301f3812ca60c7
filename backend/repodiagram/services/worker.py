import asyncio
import logging
import time
from typing import Literal

from pydantic import BaseModel

from repodiagram.agent.llm_client import CompletionService
from repodiagram.agent.orchestrator import run_diagram_pipeline
from repodiagram.agent.repo_data import RepoDataSource
from repodiagram.core.config import settings
from repodiagram.models import DiagramRecord, JobMessage, get_datetime_utc
from repodiagram.services.cache import CacheStore, Clock
from repodiagram.services.queue import JobQueue, QueuedJob

logger = logging.getLogger(__name__)


class JobOutcome(BaseModel):
    cache_key: str | None
    status: Literal["complete", "error", "skipped"]
    error: str | None = None


def _error_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class JobWorker:
    """
    Drains the job queue and persists one terminal record per message.

    Messages in a batch run concurrently and fail independently: an error in
    one job is recorded on that job's own cache key and never stops the rest
    of the batch.
    """

    def __init__(
        self,
        cache: CacheStore,
        queue: JobQueue,
        *,
        source: RepoDataSource,
        llm: CompletionService | None = None,
        complete_ttl_seconds: int | None = None,
        error_ttl_seconds: int | None = None,
        batch_size: int | None = None,
        poll_seconds: float | None = None,
        purge_interval_seconds: float | None = None,
        clock: Clock = get_datetime_utc,
    ):
        self.cache = cache
        self.queue = queue
        self.source = source
        self.llm = llm
        self.complete_ttl_seconds = complete_ttl_seconds or settings.COMPLETE_TTL_SECONDS
        self.error_ttl_seconds = error_ttl_seconds or settings.ERROR_TTL_SECONDS
        self.batch_size = batch_size or settings.WORKER_BATCH_SIZE
        self.poll_seconds = poll_seconds or settings.WORKER_POLL_SECONDS
        self.purge_interval_seconds = purge_interval_seconds or settings.CACHE_PURGE_INTERVAL_SECONDS
        self._clock = clock

    async def _store_error_safely(self, cache_key: str, error: str) -> None:
        try:
            await self.cache.put(
                cache_key, DiagramRecord.failed(error, self._clock()), self.error_ttl_seconds
            )
        except Exception as exc:
            logger.warning("Failed to record error for %s: %s", cache_key, exc)

    async def process_message(self, message: JobMessage) -> JobOutcome:
        cache_key = message.cache_key
        if not cache_key:
            logger.debug("Skipping job for %s/%s without a cache key", message.owner, message.repo)
            return JobOutcome(cache_key=None, status="skipped")

        logger.info("Processing diagram for %s/%s", message.owner, message.repo)
        try:
            artifact = await run_diagram_pipeline(
                message.owner, message.repo, source=self.source, llm=self.llm
            )
            await self.cache.put(
                cache_key,
                DiagramRecord.complete(artifact.diagram, self._clock()),
                self.complete_ttl_seconds,
            )
        except Exception as exc:
            error = _error_message(exc)
            logger.error("Error processing diagram job %s: %s", cache_key, error)
            await self._store_error_safely(cache_key, error)
            return JobOutcome(cache_key=cache_key, status="error", error=error)

        logger.info("Completed diagram for %s/%s", message.owner, message.repo)
        return JobOutcome(cache_key=cache_key, status="complete")

    async def _process_job(self, job: QueuedJob) -> JobOutcome:
        outcome = await self.process_message(job.message)
        try:
            await self.queue.ack(job)
        except Exception as exc:
            logger.warning("Failed to acknowledge job %s: %s", job.delivery_id, exc)
        return outcome

    async def process_batch(self, jobs: list[QueuedJob]) -> list[JobOutcome]:
        return list(await asyncio.gather(*(self._process_job(job) for job in jobs)))

    async def run_once(self) -> list[JobOutcome]:
        jobs = await self.queue.receive_batch(self.batch_size, self.poll_seconds)
        if not jobs:
            return []
        logger.info("Received batch of %s diagram job(s)", len(jobs))
        return await self.process_batch(jobs)

    async def run_forever(self, stop_event: asyncio.Event) -> None:
        logger.info("Diagram worker started")
        last_purge = time.monotonic()
        while not stop_event.is_set():
            try:
                await self.run_once()
            except Exception:
                logger.exception("Diagram worker iteration failed")
                await asyncio.sleep(self.poll_seconds)
            if time.monotonic() - last_purge >= self.purge_interval_seconds:
                last_purge = time.monotonic()
                try:
                    await self.cache.purge_expired()
                except Exception as exc:
                    logger.warning("Cache purge failed: %s", exc)
        logger.info("Diagram worker stopped")
