"""
RoomManager - Study group rooms and their membership.

A room has two membership sources:
- collaboration_sessions rows (written when a user creates or joins)
- the room's denormalized ``members`` array (appended by invites)

There is no real-time sync; every view re-reads the store.
"""

import logging
from datetime import datetime
from typing import Optional

from cloudmentor.context import SessionContext
from cloudmentor.errors import CloudMentorError, NotFoundError, ValidationError
from cloudmentor.gateway import DataGateway, Tables
from cloudmentor.schemas import (
    DEFAULT_ROOM_TOPIC,
    CollaborationRoom,
    CollaborationSession,
    RoomMember,
)


logger = logging.getLogger(__name__)


def invite_link(base_url: str, room_id: str) -> str:
    """Shareable join link for a room."""
    return f"{base_url.rstrip('/')}/dashboard/collaboration/join/{room_id}"


class RoomManager:
    """Create, list and invite to study group rooms for the acting user."""

    def __init__(self, gateway: DataGateway, context: SessionContext):
        self.tables = Tables.from_gateway(gateway)
        self.context = context

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create_room(
        self,
        title: str,
        topic: str = DEFAULT_ROOM_TOPIC,
        description: str = "",
    ) -> CollaborationRoom:
        """
        Create a room and join the creator to it.

        The room insert and the membership insert are two separate writes.
        If the second fails the room stays behind without its creator as a
        session member; the error propagates and nothing is rolled back.

        Raises:
            ValidationError: blank title
            ConflictError: the store rejected either write
        """
        if not title or not title.strip():
            raise ValidationError("Please enter a study group name")

        room = self.tables.rooms.create(CollaborationRoom(
            title=title.strip(),
            topic=topic,
            description=description,
            created_by=self.context.user_id,
            is_active=True,
        ))

        try:
            self.tables.sessions.create(CollaborationSession(
                room_id=room.id,
                user_id=self.context.user_id,
                is_active=True,
                joined_at=datetime.now(),
            ))
        except CloudMentorError:
            logger.error(f"Room {room.id} created but creator {self.context.user_id} failed to join")
            raise

        logger.info(f"User {self.context.user_id} created room {room.id} ({room.title})")
        return room

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def get_room(self, room_id: str) -> CollaborationRoom:
        return self.tables.rooms.get(id=room_id)

    def list_rooms(self) -> list[CollaborationRoom]:
        """Rooms the user created or joined, each once, newest first."""
        created = self.tables.rooms.find(created_by=self.context.user_id)
        sessions = self.tables.sessions.find(user_id=self.context.user_id, is_active=True)

        joined = []
        for room_id in dict.fromkeys(s.room_id for s in sessions):
            room = self.tables.rooms.get_or_none(id=room_id)
            if room is not None:
                joined.append(room)

        unique = {room.id: room for room in created + joined}
        return sorted(
            unique.values(),
            key=lambda room: room.created_at or datetime.min,
            reverse=True,
        )

    def list_members(self, room_id: str) -> list[str]:
        """User ids of active session members, then invited members, each once."""
        room = self.get_room(room_id)
        sessions = self.tables.sessions.find(room_id=room_id, is_active=True, order_by="joined_at")
        member_ids = [s.user_id for s in sessions] + [m.user_id for m in room.members]
        return list(dict.fromkeys(member_ids))

    # -------------------------------------------------------------------------
    # Invitations
    # -------------------------------------------------------------------------

    def invite_by_email(self, room_id: str, email: str) -> Optional[CollaborationRoom]:
        """
        Add the user with this email to the room's members.

        Silently does nothing (returns None) for blank or unknown emails.
        A user who is already a member is not added twice.
        """
        if not email or not email.strip():
            return None
        try:
            invited = self.tables.users.get(email=email.strip())
        except NotFoundError:
            logger.info(f"Invite to room {room_id} skipped: no user for {email}")
            return None

        room = self.get_room(room_id)
        if invited.id in self.list_members(room_id):
            return room

        members = room.members + [RoomMember(user_id=invited.id, joined_at=datetime.now())]
        rows = self.tables.rooms.update({"members": members}, id=room_id)
        logger.info(f"Invited user {invited.id} to room {room_id}")
        return rows[0]
