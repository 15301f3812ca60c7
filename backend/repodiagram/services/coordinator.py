import logging
from typing import Literal

from pydantic import BaseModel

from repodiagram.core.config import settings
from repodiagram.errors import DiagramServiceError, InternalError, ValidationError
from repodiagram.models import DiagramRecord, JobMessage, build_cache_key, get_datetime_utc
from repodiagram.services.cache import CacheStore, Clock
from repodiagram.services.queue import JobQueue

logger = logging.getLogger(__name__)

INVALID_PATH_MESSAGE = "Invalid path. Use format: /owner/repo"
IN_PROGRESS_MESSAGE = "Diagram generation in progress"
STARTED_MESSAGE = "Diagram generation started"


class DiagramResponse(BaseModel):
    """What the coordinator decided for one request."""
    status: Literal["pending", "complete", "error"]
    cache_key: str
    record: DiagramRecord | None = None
    message: str | None = None
    admitted: bool = False


class JobCoordinator:
    """
    Serves cached diagrams or admits a new generation job.

    Stateless per request: the cache read and the pending write/enqueue are
    not atomic, so concurrent first requests for the same key may each
    admit a job. Every write is a full overwrite, so duplicates only cost
    a second pipeline run.
    """

    def __init__(
        self,
        cache: CacheStore,
        queue: JobQueue,
        *,
        pending_ttl_seconds: int | None = None,
        clock: Clock = get_datetime_utc,
    ):
        self.cache = cache
        self.queue = queue
        self.pending_ttl_seconds = (
            settings.PENDING_TTL_SECONDS if pending_ttl_seconds is None else pending_ttl_seconds
        )
        self._clock = clock

    async def handle(self, owner: str, repo: str) -> DiagramResponse:
        if not owner or not repo:
            raise ValidationError(INVALID_PATH_MESSAGE)

        cache_key = build_cache_key(owner, repo)
        try:
            return await self._handle(owner, repo, cache_key)
        except DiagramServiceError:
            raise
        except Exception as exc:
            logger.exception("Failed to handle diagram request for %s", cache_key)
            raise InternalError(str(exc) or exc.__class__.__name__) from exc

    async def _handle(self, owner: str, repo: str, cache_key: str) -> DiagramResponse:
        cached = await self.cache.get(cache_key)

        if cached is not None:
            if cached.status == "pending":
                return DiagramResponse(
                    status="pending", cache_key=cache_key, record=cached, message=IN_PROGRESS_MESSAGE
                )
            return DiagramResponse(status=cached.status, cache_key=cache_key, record=cached)

        record = DiagramRecord.pending(self._clock())
        await self.cache.put(cache_key, record, self.pending_ttl_seconds or None)
        await self.queue.send(JobMessage.for_repository(owner, repo))
        logger.info("Admitted diagram job for %s/%s", owner, repo)

        return DiagramResponse(
            status="pending",
            cache_key=cache_key,
            record=record,
            message=STARTED_MESSAGE,
            admitted=True,
        )
