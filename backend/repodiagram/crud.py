from datetime import datetime, timezone

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Session, col

from repodiagram.models import CacheEntry, get_datetime_utc


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back out.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(entry: CacheEntry, now: datetime) -> bool:
    return entry.expires_at is not None and _as_utc(entry.expires_at) <= now


def get_cache_entry(*, session: Session, key: str, now: datetime) -> CacheEntry | None:
    entry = session.get(CacheEntry, key)
    if entry is None:
        return None
    if is_expired(entry, now):
        # Conditional so a row rewritten by a concurrent put survives.
        session.exec(  # type: ignore
            delete(CacheEntry).where(
                col(CacheEntry.key) == key,
                col(CacheEntry.expires_at) <= now,
            )
        )
        session.commit()
        return None
    return entry


def _upsert_statement(dialect_name: str):
    if dialect_name == "sqlite":
        return sqlite_insert(CacheEntry)
    if dialect_name == "postgresql":
        return postgresql_insert(CacheEntry)
    return None


def put_cache_entry(
    *, session: Session, key: str, value: str, expires_at: datetime | None
) -> CacheEntry | None:
    """Insert or fully overwrite the row for ``key`` in a single statement."""
    updated_at = get_datetime_utc()
    insert_statement = _upsert_statement(session.get_bind().dialect.name)
    if insert_statement is None:
        db_entry = session.merge(
            CacheEntry(key=key, value=value, expires_at=expires_at, updated_at=updated_at)
        )
        session.commit()
        session.refresh(db_entry)
        return db_entry

    statement = insert_statement.values(
        key=key, value=value, expires_at=expires_at, updated_at=updated_at
    )
    statement = statement.on_conflict_do_update(
        index_elements=[CacheEntry.__table__.c.key],
        set_={
            "value": statement.excluded.value,
            "expires_at": statement.excluded.expires_at,
            "updated_at": statement.excluded.updated_at,
        },
    )
    session.exec(statement)  # type: ignore
    session.commit()
    return session.get(CacheEntry, key, populate_existing=True)


def delete_expired_cache_entries(*, session: Session, now: datetime) -> int:
    statement = delete(CacheEntry).where(
        col(CacheEntry.expires_at).is_not(None),
        col(CacheEntry.expires_at) <= now,
    )
    result = session.exec(statement)  # type: ignore
    session.commit()
    return result.rowcount
