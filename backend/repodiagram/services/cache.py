import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol

from sqlalchemy.engine import Engine
from sqlmodel import Session

from repodiagram.crud import delete_expired_cache_entries, get_cache_entry, put_cache_entry
from repodiagram.models import DiagramRecord, get_datetime_utc

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class CacheStore(Protocol):
    """Key-value store holding the authoritative DiagramRecord per cache key.

    Every ``put`` is a full overwrite. ``ttl_seconds`` of ``None`` (or 0) means
    the entry never expires.
    """

    async def get(self, key: str) -> DiagramRecord | None: ...

    async def put(self, key: str, record: DiagramRecord, ttl_seconds: int | None = None) -> None: ...

    async def purge_expired(self) -> int: ...


def _expiry(now: datetime, ttl_seconds: int | None) -> datetime | None:
    if not ttl_seconds:
        return None
    return now + timedelta(seconds=ttl_seconds)


class MemoryCacheStore:
    """Process-local store with an injectable clock, mostly for tests and single-process runs."""

    def __init__(self, clock: Clock = get_datetime_utc):
        self._clock = clock
        self._entries: dict[str, tuple[str, datetime | None]] = {}

    async def get(self, key: str) -> DiagramRecord | None:
        await asyncio.sleep(0)
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            self._entries.pop(key, None)
            return None
        return DiagramRecord.model_validate_json(value)

    async def put(self, key: str, record: DiagramRecord, ttl_seconds: int | None = None) -> None:
        await asyncio.sleep(0)
        self._entries[key] = (record.model_dump_json(), _expiry(self._clock(), ttl_seconds))

    async def purge_expired(self) -> int:
        now = self._clock()
        expired = [k for k, (_, exp) in self._entries.items() if exp is not None and exp <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)


class SQLCacheStore:
    """SQLModel-backed store; records are kept as JSON text in the ``cacheentry`` table."""

    def __init__(self, engine: Engine, clock: Clock = get_datetime_utc):
        self.engine = engine
        self._clock = clock

    def _get_sync(self, key: str) -> DiagramRecord | None:
        with Session(self.engine) as session:
            entry = get_cache_entry(session=session, key=key, now=self._clock())
            if entry is None:
                return None
            return DiagramRecord.model_validate_json(entry.value)

    def _put_sync(self, key: str, record: DiagramRecord, ttl_seconds: int | None) -> None:
        with Session(self.engine) as session:
            put_cache_entry(
                session=session,
                key=key,
                value=record.model_dump_json(),
                expires_at=_expiry(self._clock(), ttl_seconds),
            )

    def _purge_sync(self) -> int:
        with Session(self.engine) as session:
            return delete_expired_cache_entries(session=session, now=self._clock())

    async def get(self, key: str) -> DiagramRecord | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def put(self, key: str, record: DiagramRecord, ttl_seconds: int | None = None) -> None:
        await asyncio.to_thread(self._put_sync, key, record, ttl_seconds)

    async def purge_expired(self) -> int:
        purged = await asyncio.to_thread(self._purge_sync)
        if purged:
            logger.info("Purged %s expired diagram cache entries", purged)
        return purged
