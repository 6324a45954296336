"""
Table - typed view of one gateway collection.

Binds a collection name to its pydantic entity model so components work
with explicit entity types instead of untyped dict rows.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

import pydantic
from pydantic_core import to_jsonable_python

from cloudmentor.errors import NotFoundError, ValidationError
from cloudmentor.schemas import (
    Record,
    User,
    Course,
    Lesson,
    Assessment,
    QuizQuestion,
    QuizOption,
    UserProgress,
    AssessmentResult,
    GamificationStats,
    CollaborationRoom,
    CollaborationSession,
)

from .base import DataGateway


T = TypeVar("T", bound=Record)


class Table(Generic[T]):
    """Typed access to a single collection."""

    def __init__(self, gateway: DataGateway, collection: str, model: type[T]):
        self.gateway = gateway
        self.collection = collection
        self.model = model

    def _to_model(self, row: dict[str, Any]) -> T:
        try:
            return self.model.model_validate(row)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Malformed {self.collection} row {row.get('id')}: {e}"
            ) from e

    def find(
        self,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
        **filters,
    ) -> list[T]:
        rows = self.gateway.select(
            self.collection,
            to_jsonable_python(filters),
            order_by=order_by,
            ascending=ascending,
            limit=limit,
        )
        return [self._to_model(row) for row in rows]

    def get(self, **filters) -> T:
        """Exactly one entity; NotFoundError otherwise."""
        return self._to_model(
            self.gateway.select_one(self.collection, to_jsonable_python(filters))
        )

    def get_or_none(self, **filters) -> Optional[T]:
        try:
            return self.get(**filters)
        except NotFoundError:
            return None

    def create(self, entity: T) -> T:
        return self._to_model(self.gateway.insert(self.collection, entity.to_row()))

    def update(self, changes: dict[str, Any], **filters) -> list[T]:
        rows = self.gateway.update(
            self.collection,
            to_jsonable_python(filters),
            to_jsonable_python(changes),
        )
        return [self._to_model(row) for row in rows]


@dataclass
class Tables:
    """All CloudMentor collections over one gateway."""
    users: Table[User]
    courses: Table[Course]
    lessons: Table[Lesson]
    assessments: Table[Assessment]
    questions: Table[QuizQuestion]
    options: Table[QuizOption]
    progress: Table[UserProgress]
    results: Table[AssessmentResult]
    gamification: Table[GamificationStats]
    rooms: Table[CollaborationRoom]
    sessions: Table[CollaborationSession]

    @classmethod
    def from_gateway(cls, gateway: DataGateway) -> "Tables":
        return cls(
            users=Table(gateway, "users", User),
            courses=Table(gateway, "courses", Course),
            lessons=Table(gateway, "lessons", Lesson),
            assessments=Table(gateway, "assessments", Assessment),
            questions=Table(gateway, "quiz_questions", QuizQuestion),
            options=Table(gateway, "quiz_options", QuizOption),
            progress=Table(gateway, "user_progress", UserProgress),
            results=Table(gateway, "assessment_results", AssessmentResult),
            gamification=Table(gateway, "gamification_stats", GamificationStats),
            rooms=Table(gateway, "collaboration_rooms", CollaborationRoom),
            sessions=Table(gateway, "collaboration_sessions", CollaborationSession),
        )
