"""
Study group schemas for CloudMentor.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from .base import Record


DEFAULT_ROOM_TOPIC = "AWS Study Group"


class RoomMember(BaseModel):
    user_id: str
    joined_at: datetime


class CollaborationRoom(Record):
    title: str = Field(..., min_length=1)
    description: str = ""
    topic: str = DEFAULT_ROOM_TOPIC
    created_by: str
    max_participants: int = Field(default=10, ge=1)
    is_active: bool = True
    members: list[RoomMember] = []  # denormalized, appended by invites


class CollaborationSession(Record):
    """Membership row written when a user creates or joins a room."""
    room_id: str
    user_id: str
    is_active: bool = True
    joined_at: Optional[datetime] = None
