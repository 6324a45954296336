"""Per-request session context (who is acting)."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SessionContext:
    """Authenticated user for the current page or request."""
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        if self.email:
            return self.email.split("@")[0]
        return "User"
