"""
Configuration for LearnQuest.

Settings come from defaults, overridden by LEARNQUEST_* environment
variables (a .env file in the working directory is loaded first).
"""

import os
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from dotenv import load_dotenv
from pydantic import BaseModel, Field


DEFAULT_STORAGE_DIR = Path.home() / ".learnquest"
DEFAULT_STORAGE_DB = DEFAULT_STORAGE_DIR / "storage.db"

# Bump STATE_VERSION when the snapshot shape changes, BUILD_ID on every
# course build. Saved progress from any other version or build is discarded.
STATE_VERSION = 3
BUILD_ID = "toc-progress-2025-10-01-03"
STORAGE_KEY = "quest_state_v1"
FRAME_DEPTH_LIMIT = 10
FRESH_FLAG = "fresh"


class Settings(BaseModel):
    state_version: int = STATE_VERSION
    build_id: str = BUILD_ID
    storage_key: str = STORAGE_KEY
    storage_path: Path = DEFAULT_STORAGE_DB
    frame_depth_limit: int = Field(default=FRAME_DEPTH_LIMIT, ge=0)
    fresh_flag: str = FRESH_FLAG
    manifest_path: Path = Path("data/course.yaml")


_ENV_FIELDS = {
    "LEARNQUEST_STATE_VERSION": "state_version",
    "LEARNQUEST_BUILD_ID": "build_id",
    "LEARNQUEST_STORAGE_KEY": "storage_key",
    "LEARNQUEST_STORAGE_PATH": "storage_path",
    "LEARNQUEST_FRAME_DEPTH_LIMIT": "frame_depth_limit",
    "LEARNQUEST_FRESH_FLAG": "fresh_flag",
    "LEARNQUEST_MANIFEST_PATH": "manifest_path",
}


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional .env file to load before reading the environment

    Returns:
        Validated Settings

    Raises:
        pydantic.ValidationError: If an override has the wrong type
    """
    load_dotenv(env_file)
    overrides = {
        field: os.environ[var]
        for var, field in _ENV_FIELDS.items()
        if os.environ.get(var)
    }
    return Settings(**overrides)


def is_fresh_start_requested(url: Optional[str], flag: str = FRESH_FLAG) -> bool:
    """
    Check a page URL for the "start over" query flag.

    The flag counts when present with or without a value (?fresh, ?fresh=1).
    """
    if not url:
        return False
    query = urlsplit(url).query
    return flag in parse_qs(query, keep_blank_values=True)
