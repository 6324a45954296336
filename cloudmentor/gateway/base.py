"""
DataGateway - uniform record access over named collections.

Every backend offers the same five calls:
- insert: write one row, return it with store-owned fields filled in
- select: equality filters + optional ordering, empty list when nothing matches
- select_one: exactly one row or NotFoundError
- update: apply changes to every matching row, return the written rows

Rows are plain dicts shaped like the entity schemas; ``Table`` wraps
a collection with its pydantic model.
"""

import re
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from cloudmentor.errors import NotFoundError, ValidationError


# Unique keys enforced by every backend, per collection.
DEFAULT_UNIQUE_KEYS: dict[str, list[tuple[str, ...]]] = {
    "users": [("email",)],
    "lessons": [("course_id", "order")],
    "user_progress": [("user_id", "course_id")],
    "gamification_stats": [("user_id",)],
}

_NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")


def validate_name(name: str) -> str:
    """Collection and field names are interpolated into queries; keep them plain."""
    if not isinstance(name, str) or not _NAME_PATTERN.match(name):
        raise ValidationError(f"Invalid collection or field name: {name!r}")
    return name


def new_record_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now().isoformat()


class DataGateway(ABC):
    """Abstract record store."""

    def __init__(self, unique_keys: Optional[dict[str, list[tuple[str, ...]]]] = None):
        self.unique_keys = DEFAULT_UNIQUE_KEYS if unique_keys is None else unique_keys

    @abstractmethod
    def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a row; raises ConflictError on duplicate keys."""

    @abstractmethod
    def select(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Rows matching all equality filters, optionally ordered."""

    @abstractmethod
    def update(
        self,
        collection: str,
        filters: dict[str, Any],
        changes: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Apply changes to matching rows; last write wins."""

    def select_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any]:
        """Exactly one matching row, else NotFoundError."""
        rows = self.select(collection, filters, limit=2)
        if len(rows) != 1:
            raise NotFoundError(
                f"Expected one row in {collection} for {filters}, found {len(rows) or 'none'}"
            )
        return rows[0]

    # -------------------------------------------------------------------------
    # Shared helpers for implementations
    # -------------------------------------------------------------------------

    @staticmethod
    def _prepare_insert(collection: str, record: dict[str, Any]) -> dict[str, Any]:
        validate_name(collection)
        if not isinstance(record, dict):
            raise ValidationError(f"Record for {collection} must be a mapping")
        for field in record:
            validate_name(field)
        row = dict(record)
        now = now_iso()
        if not row.get("id"):
            row["id"] = new_record_id()
        row.setdefault("created_at", now)
        row.setdefault("updated_at", now)
        return row

    @staticmethod
    def _prepare_changes(changes: dict[str, Any]) -> dict[str, Any]:
        if "id" in changes:
            raise ValidationError("Record id cannot be updated")
        for field in changes:
            validate_name(field)
        return {**changes, "updated_at": changes.get("updated_at") or now_iso()}
