"""
Configuration settings for TopicTracker.

Centralized configuration for storage, store behavior and logging.
"""

import os
from pathlib import Path


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("TOPICTRACKER_DATA_ROOT", str(PROJECT_ROOT / "data")))
OUTPUT_ROOT = Path(os.getenv("TOPICTRACKER_OUTPUT_ROOT", str(PROJECT_ROOT / "output")))

# Data files (one per collection, under DATA_ROOT)
LANGUAGES_FILENAME = "languages.json"
TOPICS_FILENAME = "topics.json"

# Store behavior
# Off by default: rename and topic update do not re-check title uniqueness
STRICT_RENAME = _env_flag("TOPICTRACKER_STRICT_RENAME")
STRICT_TOPIC_UPDATE = _env_flag("TOPICTRACKER_STRICT_TOPIC_UPDATE")

# Logging
LOG_LEVEL = os.getenv("TOPICTRACKER_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = os.getenv("TOPICTRACKER_LOG_FILE", "topictracker.log")
