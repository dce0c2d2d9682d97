import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Optional

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from .models import ContentItem, Source


class PersistenceError(Exception):
    pass


def content_hash(source_id: int, title: Optional[str], published_at: Optional[datetime], text: str) -> str:
    """SHA-256 over source, title, publication instant and text length."""
    published = ""
    if published_at:
        published = (
            published_at.astimezone(dt_timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )
    payload = f"{source_id}|{title or ''}|{published}|{len(text or '')}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class IdentityKey:
    field: str  # "url" or "content_hash"
    value: str

    @classmethod
    def for_entry(cls, source_id: int, url: Optional[str], title: Optional[str],
                  published_at: Optional[datetime], text: str) -> "IdentityKey":
        url = (url or "").strip()
        if url:
            return cls("url", url)
        return cls("content_hash", content_hash(source_id, title, published_at, text))

    def lookup(self) -> dict:
        return {self.field: self.value}


def find_source_by_id(source_id: int) -> Optional[Source]:
    return Source.objects.filter(pk=source_id).first()


def list_active_sources(type: str = Source.Type.RSS) -> list[Source]:
    return list(
        Source.objects.filter(active=True, type=type, url__isnull=False)
        .exclude(url="")
        .order_by("id")
    )


def upsert_content_item(identity: IdentityKey, create_fields: dict, update_fields: dict):
    """
    Create the item for this identity, or refresh an existing one.

    The insert runs in a savepoint; a unique conflict means another run
    already stored the item, so only update_fields are written to it.
    Returns (item, created).
    """
    try:
        try:
            with transaction.atomic():
                item = ContentItem.objects.create(**identity.lookup(), **create_fields)
            return item, True
        except IntegrityError:
            logging.debug("Content item %s=%s exists, updating", identity.field, identity.value)

        updated = ContentItem.objects.filter(**identity.lookup()).update(
            **update_fields, updated_at=timezone.now()
        )
        if not updated:
            raise PersistenceError(f"Content item {identity.field}={identity.value} conflicts but was not found")
        return ContentItem.objects.get(**identity.lookup()), False
    except DatabaseError as e:
        raise PersistenceError(str(e)) from e


def find_content_item_by_id(content_item_id: int) -> Optional[ContentItem]:
    return ContentItem.objects.select_related("source").filter(pk=content_item_id).first()


def update_content_item(content_item_id: int, **fields) -> int:
    try:
        return ContentItem.objects.filter(pk=content_item_id).update(**fields, updated_at=timezone.now())
    except DatabaseError as e:
        raise PersistenceError(str(e)) from e
