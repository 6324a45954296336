"""
InMemoryGateway - dict-backed DataGateway for tests and demos.

Rows are deep-copied in and out so callers can never mutate stored state.
"""

import copy
import logging
from collections import defaultdict
from typing import Any, Optional

from cloudmentor.errors import ConflictError

from .base import DataGateway, validate_name


logger = logging.getLogger(__name__)


class InMemoryGateway(DataGateway):
    """Substitutable fake for a hosted relational store."""

    def __init__(self, unique_keys: Optional[dict[str, list[tuple[str, ...]]]] = None):
        super().__init__(unique_keys)
        self._collections: dict[str, list[dict[str, Any]]] = defaultdict(list)

    def _check_unique(
        self,
        collection: str,
        row: dict[str, Any],
        against: Optional[list[dict[str, Any]]] = None,
    ):
        rows = self._collections[collection] if against is None else against
        for existing in rows:
            if existing["id"] == row["id"]:
                continue
            for key in self.unique_keys.get(collection, []):
                if all(existing.get(f) == row.get(f) for f in key) and \
                        any(row.get(f) is not None for f in key):
                    raise ConflictError(
                        f"Duplicate {collection} row for {dict((f, row.get(f)) for f in key)}"
                    )

    def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        row = self._prepare_insert(collection, record)
        if any(r["id"] == row["id"] for r in self._collections[collection]):
            raise ConflictError(f"Duplicate id in {collection}: {row['id']}")
        self._check_unique(collection, row)
        self._collections[collection].append(copy.deepcopy(row))
        logger.debug(f"Inserted {collection}/{row['id']}")
        return copy.deepcopy(row)

    def _matching(self, collection: str, filters: Optional[dict[str, Any]]) -> list[dict[str, Any]]:
        validate_name(collection)
        filters = filters or {}
        for field in filters:
            validate_name(field)
        return [
            row for row in self._collections.get(collection, [])
            if all(row.get(f) == v for f, v in filters.items())
        ]

    def select(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        rows = self._matching(collection, filters)
        if order_by:
            validate_name(order_by)
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            present = sorted(present, key=lambda r: r[order_by], reverse=not ascending)
            # NULLs sort first ascending and last descending, like SQLite
            rows = missing + present if ascending else present + missing
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    def update(
        self,
        collection: str,
        filters: dict[str, Any],
        changes: dict[str, Any],
    ) -> list[dict[str, Any]]:
        changes = self._prepare_changes(changes)
        matching = self._matching(collection, filters)
        matched_ids = {row["id"] for row in matching}
        untouched = [r for r in self._collections[collection] if r["id"] not in matched_ids]

        # All rows are checked before any is written, so a conflict changes nothing
        candidates = []
        for row in matching:
            candidate = {**row, **copy.deepcopy(changes)}
            self._check_unique(collection, candidate, against=untouched + candidates)
            candidates.append(candidate)

        updated = []
        for row in matching:
            row.update(copy.deepcopy(changes))
            updated.append(copy.deepcopy(row))
        logger.debug(f"Updated {len(updated)} row(s) in {collection}")
        return updated

    def count(self, collection: str) -> int:
        """Number of rows in a collection (test helper)."""
        return len(self._collections.get(collection, []))
