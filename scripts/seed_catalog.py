#!/usr/bin/env python3
"""
seed_catalog.py - Load courses, lessons, assessments and users into the store.

Reads a YAML catalog (see data/catalog.yaml) and writes every record
through the gateway. Records that already exist are skipped, so the
script can be re-run safely.

Usage:
  python scripts/seed_catalog.py
  python scripts/seed_catalog.py --catalog data/catalog.yaml --db data/cloudmentor.db
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import yaml

from cloudmentor.config import DEFAULT_DB_PATH, LOG_FORMAT
from cloudmentor.errors import ConflictError
from cloudmentor.gateway import DataGateway, SQLiteGateway, Table, Tables
from cloudmentor.schemas import (
    Assessment,
    Course,
    GamificationStats,
    Lesson,
    QuizOption,
    QuizQuestion,
    User,
)

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
)
logger = logging.getLogger(__name__)

DEFAULT_CATALOG = PROJECT_ROOT / "data" / "catalog.yaml"


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------

def load_catalog(path: Path) -> dict:
    """Load the YAML catalog file."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def create_if_missing(table: Table, entity, stats: dict) -> bool:
    """Insert an entity; count it as skipped when it already exists."""
    try:
        table.create(entity)
        stats["created"] += 1
        return True
    except ConflictError:
        stats["skipped"] += 1
        return False


# -----------------------------------------------------------------------------
# Seeding
# -----------------------------------------------------------------------------

def seed_course(tables: Tables, course_data: dict, stats: dict):
    lessons = course_data.pop("lessons", [])
    assessments = course_data.pop("assessments", [])

    course = Course(total_lessons=len(lessons), **course_data)
    create_if_missing(tables.courses, course, stats)

    for lesson_data in lessons:
        create_if_missing(tables.lessons, Lesson(course_id=course.id, **lesson_data), stats)

    for assessment_data in map(dict, assessments):
        questions = assessment_data.pop("questions", [])
        assessment = Assessment(course_id=course.id, **assessment_data)
        if not create_if_missing(tables.assessments, assessment, stats):
            # Questions were seeded with the assessment; don't duplicate them
            continue

        for question_data in map(dict, questions):
            options = question_data.pop("options", [])
            question = tables.questions.create(
                QuizQuestion(assessment_id=assessment.id, **question_data)
            )
            stats["created"] += 1
            for option_data in options:
                tables.options.create(QuizOption(question_id=question.id, **option_data))
                stats["created"] += 1


def seed(gateway: DataGateway, catalog: dict) -> dict:
    """Write a parsed catalog through the gateway; returns created/skipped counts."""
    tables = Tables.from_gateway(gateway)
    stats = {"created": 0, "skipped": 0}

    for user_data in catalog.get("users", []):
        create_if_missing(tables.users, User(**user_data), stats)

    for stats_data in catalog.get("gamification", []):
        create_if_missing(tables.gamification, GamificationStats(**stats_data), stats)

    for course_data in catalog.get("courses", []):
        seed_course(tables, dict(course_data), stats)

    return stats


def main():
    parser = argparse.ArgumentParser(description="Seed the CloudMentor store from a YAML catalog")
    parser.add_argument("--catalog", type=Path, default=DEFAULT_CATALOG,
                        help="YAML catalog file")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH,
                        help="SQLite database path")
    args = parser.parse_args()

    if not args.catalog.exists():
        logger.error(f"Catalog not found: {args.catalog}")
        sys.exit(1)

    logger.info(f"Loading catalog from {args.catalog}")
    catalog = load_catalog(args.catalog)

    logger.info(f"Seeding {args.db}")
    stats = seed(SQLiteGateway(args.db), catalog)

    logger.info("\n" + "=" * 50)
    logger.info("SEEDING COMPLETE")
    logger.info("=" * 50)
    logger.info(f"Created: {stats['created']}")
    logger.info(f"Skipped (already present): {stats['skipped']}")


if __name__ == "__main__":
    main()
