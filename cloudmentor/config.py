"""
Runtime configuration for CloudMentor.

Values come from environment variables, optionally loaded from a .env
file at the project root.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_DB_PATH = PROJECT_ROOT / "data" / "cloudmentor.db"
DEFAULT_USER_ID = "demo-student"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class Settings(BaseModel):
    gemini_api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    db_path: Path = DEFAULT_DB_PATH
    user_id: str = DEFAULT_USER_ID
    log_level: str = "INFO"


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Build settings from the environment.

    Args:
        env_file: Optional .env file (default: PROJECT_ROOT/.env)

    Returns:
        Settings populated from environment variables, falling back to defaults
    """
    load_dotenv(env_file or PROJECT_ROOT / ".env")

    values = {
        "gemini_api_key": os.environ.get("GEMINI_API_KEY"),
        "model": os.environ.get("CLOUDMENTOR_MODEL"),
        "temperature": os.environ.get("CLOUDMENTOR_TEMPERATURE"),
        "db_path": os.environ.get("CLOUDMENTOR_DB_PATH"),
        "user_id": os.environ.get("CLOUDMENTOR_USER_ID"),
        "log_level": os.environ.get("CLOUDMENTOR_LOG_LEVEL"),
    }
    return Settings(**{k: v for k, v in values.items() if v is not None})


def setup_logging(level: str = "INFO"):
    """Configure root logging the same way for the app, API and scripts."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
