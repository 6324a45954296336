"""
CloudMentor Collaboration - Study group rooms.

This module provides:
- RoomManager: create rooms, list rooms and members, invite by email
- invite_link: shareable join URL
"""

from .rooms import (
    RoomManager,
    invite_link,
)

__all__ = [
    "RoomManager",
    "invite_link",
]
