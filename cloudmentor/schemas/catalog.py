"""
Course catalog schemas for CloudMentor.

Defines Pydantic models for seeded learning content:
- Users
- Courses and lessons
- Assessments, quiz questions and options
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional
from enum import Enum

from .base import Record


class UserType(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class User(Record):
    email: str
    full_name: str = ""
    user_type: UserType = UserType.STUDENT
    is_active: bool = True


class CourseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Course(Record):
    title: str = Field(..., min_length=1)
    description: str = ""
    level: CourseLevel
    category: str = ""
    instructor_id: Optional[str] = None
    total_lessons: int = Field(default=0, ge=0)
    estimated_duration_hours: float = Field(default=0, ge=0)
    is_published: bool = True


class Lesson(Record):
    course_id: str
    title: str
    content: str = ""
    order: int = Field(..., ge=0)  # unique within a course
    video_url: Optional[str] = None
    resources: list[str] = []
    estimated_duration: int = Field(default=0, ge=0)  # minutes


class Assessment(Record):
    course_id: str
    title: str
    description: str = ""
    passing_score: Optional[int] = Field(default=70, ge=0, le=100)
    time_limit_minutes: Optional[int] = None


# -----------------------------------------------------------------------------
# Quiz questions
# -----------------------------------------------------------------------------

class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    SHORT_ANSWER = "short_answer"
    CODE = "code"


class QuizQuestion(Record):
    assessment_id: str
    question_text: str
    question_type: QuestionType = QuestionType.MULTIPLE_CHOICE
    order: int = Field(..., ge=0)


class QuizOption(Record):
    question_id: str
    option_text: str
    is_correct: bool = False
    order: int = Field(..., ge=0)


class QuestionWithOptions(BaseModel):
    """A question joined with its ordered options, as rendered in an attempt."""
    question: QuizQuestion
    options: list[QuizOption] = []

    @model_validator(mode="after")
    def multiple_choice_has_answer(self):
        if self.question.question_type == QuestionType.MULTIPLE_CHOICE:
            if not any(o.is_correct for o in self.options):
                raise ValueError(
                    f"Multiple choice question {self.question.id} has no correct option"
                )
        return self

    @property
    def id(self) -> str:
        return self.question.id

    @property
    def is_auto_graded(self) -> bool:
        return self.question.question_type == QuestionType.MULTIPLE_CHOICE

    def find_option(self, option_id: str) -> Optional[QuizOption]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None
