"""
CloudMentor Schemas - Pydantic models for the e-learning platform.

This module exports all schema classes for:
- Catalog: users, courses, lessons, assessments, quiz questions
- Progress: enrollment progress, assessment results, gamification
- Collaboration: study group rooms and memberships
- Chat: mentor conversation turns
"""

# Base record
from .base import Record

# Catalog schemas
from .catalog import (
    UserType,
    User,
    CourseLevel,
    Course,
    Lesson,
    Assessment,
    QuestionType,
    QuizQuestion,
    QuizOption,
    QuestionWithOptions,
)

# Progress schemas
from .progress import (
    DEFAULT_PASSING_SCORE,
    round_half_up,
    compute_percentage,
    UserProgress,
    AssessmentResult,
    GamificationStats,
    CourseProgressPoint,
    ProgressSummary,
    DashboardStats,
    AssessmentOverview,
)

# Collaboration schemas
from .collaboration import (
    DEFAULT_ROOM_TOPIC,
    RoomMember,
    CollaborationRoom,
    CollaborationSession,
)

# Chat schemas
from .chat import (
    ChatMessage,
    ChatRequest,
    TranscriptionResult,
)

__all__ = [
    'Record',
    # Catalog
    'UserType',
    'User',
    'CourseLevel',
    'Course',
    'Lesson',
    'Assessment',
    'QuestionType',
    'QuizQuestion',
    'QuizOption',
    'QuestionWithOptions',
    # Progress
    'DEFAULT_PASSING_SCORE',
    'round_half_up',
    'compute_percentage',
    'UserProgress',
    'AssessmentResult',
    'GamificationStats',
    'CourseProgressPoint',
    'ProgressSummary',
    'DashboardStats',
    'AssessmentOverview',
    # Collaboration
    'DEFAULT_ROOM_TOPIC',
    'RoomMember',
    'CollaborationRoom',
    'CollaborationSession',
    # Chat
    'ChatMessage',
    'ChatRequest',
    'TranscriptionResult',
]
