"""
Error types shared across CloudMentor components.

Components raise these; the UI and HTTP boundaries catch them and turn
them into inline messages or status codes.
"""


class CloudMentorError(Exception):
    """Base class for all CloudMentor errors."""


class NotFoundError(CloudMentorError):
    """A single-row read matched zero or several rows."""


class ValidationError(CloudMentorError):
    """Required input was empty or a record failed validation."""


class ConflictError(CloudMentorError):
    """The backing store rejected a write (e.g. duplicate key)."""


class TransportError(CloudMentorError):
    """Network or stream failure talking to a remote service."""
