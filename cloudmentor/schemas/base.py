"""
Base record schema shared by every stored entity.

Records are owned by the backing store: ``id`` and the timestamps are
assigned on insert, so they are optional on models built client-side.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class Record(BaseModel):
    # Stores may return extra columns (e.g. legacy fields); keep them out of the model.
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_row(self) -> dict:
        """Serialize for a gateway write, dropping unset store-owned fields."""
        row = self.model_dump(mode="json")
        for key in ("id", "created_at", "updated_at"):
            if row.get(key) is None:
                row.pop(key, None)
        return row
