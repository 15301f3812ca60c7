from datetime import datetime, timezone
from typing import Literal

from pydantic import model_validator
from sqlalchemy import DateTime, Text
from sqlmodel import Field, SQLModel

CACHE_KEY_PREFIX = "diagram"

DiagramStatus = Literal["pending", "complete", "error"]


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


def build_cache_key(owner: str, repo: str) -> str:
    return f"{CACHE_KEY_PREFIX}:{owner}:{repo}"


# Persisted lifecycle state for one diagram, stored as JSON text in the cache
class DiagramRecord(SQLModel):
    status: DiagramStatus
    diagram: str | None = None
    error: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None
    failed_at: datetime | None = None

    @model_validator(mode="after")
    def _payload_matches_status(self) -> "DiagramRecord":
        if self.diagram is not None and self.error is not None:
            raise ValueError("a diagram record cannot carry both a diagram and an error")
        if self.status == "complete" and self.diagram is None:
            raise ValueError("complete records require a diagram")
        if self.status == "error" and self.error is None:
            raise ValueError("error records require an error message")
        if self.status == "pending" and (self.diagram is not None or self.error is not None):
            raise ValueError("pending records carry no payload")
        return self

    @classmethod
    def pending(cls, now: datetime | None = None) -> "DiagramRecord":
        return cls(status="pending", created_at=now or get_datetime_utc())

    @classmethod
    def complete(cls, diagram: str, now: datetime | None = None) -> "DiagramRecord":
        return cls(status="complete", diagram=diagram, completed_at=now or get_datetime_utc())

    @classmethod
    def failed(cls, error: str, now: datetime | None = None) -> "DiagramRecord":
        return cls(status="error", error=error, failed_at=now or get_datetime_utc())


# Unit of work handed to the queue; the worker recomputes everything else
class JobMessage(SQLModel):
    owner: str
    repo: str
    cache_key: str | None = None

    @classmethod
    def for_repository(cls, owner: str, repo: str) -> "JobMessage":
        return cls(owner=owner, repo=repo, cache_key=build_cache_key(owner, repo))


# Database model backing the SQL cache store
class CacheEntry(SQLModel, table=True):
    key: str = Field(primary_key=True, max_length=512)
    value: str = Field(sa_type=Text)  # type: ignore
    expires_at: datetime | None = Field(
        default=None,
        index=True,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class PendingResponse(SQLModel):
    status: Literal["pending"] = "pending"
    message: str


class ErrorResponse(SQLModel):
    error: str
    message: str
