import os
import logging
from typing import Optional

from pydantic import BaseModel, Field
from dotenv import load_dotenv

from deck_studio.constants import (
    AUTOSAVE_DELAY_MS,
    DEFAULT_STORAGE_QUOTA_BYTES,
    DEFAULT_OUTLINE_MODEL,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_ASPECT_RATIO,
    DEFAULT_IMAGE_SIZE,
    MONGODB_DATABASE,
    MONGODB_COLLECTION,
)

load_dotenv(override=True)


class Settings(BaseModel):
    """
    Runtime configuration read from the environment (and .env).

    Environment variables:
        GEMINI_API_KEY: Credential used when none is stored yet
        GEMINI_BASE_URL: Optional custom Gemini endpoint
        OUTLINE_MODEL / IMAGE_MODEL: Model ids
        IMAGE_ASPECT_RATIO / IMAGE_SIZE: Image job parameters
        STORAGE_BACKEND: 'memory', 'file' or 'mongodb'
        STORAGE_PATH: Directory for the file backend
        STORAGE_QUOTA_BYTES: Capacity of local backends
        MONGODB_URI / MONGODB_DATABASE / MONGODB_COLLECTION: MongoDB backend
        AUTOSAVE_DELAY_MS: Debounce window
        LOG_LEVEL: Logging level name
    """
    gemini_api_key: str = ""
    gemini_base_url: Optional[str] = None
    outline_model: str = DEFAULT_OUTLINE_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    image_aspect_ratio: str = DEFAULT_IMAGE_ASPECT_RATIO
    image_size: str = DEFAULT_IMAGE_SIZE

    storage_backend: str = Field(default="file", pattern="^(memory|file|mongodb)$")
    storage_path: str = ".deck_studio"
    storage_quota_bytes: int = Field(default=DEFAULT_STORAGE_QUOTA_BYTES, gt=0)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = MONGODB_DATABASE
    mongodb_collection: str = MONGODB_COLLECTION

    autosave_delay_ms: int = Field(default=AUTOSAVE_DELAY_MS, ge=0)
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Build Settings from the current environment."""
    env = {
        "gemini_api_key": os.getenv("GEMINI_API_KEY"),
        "gemini_base_url": os.getenv("GEMINI_BASE_URL"),
        "outline_model": os.getenv("OUTLINE_MODEL"),
        "image_model": os.getenv("IMAGE_MODEL"),
        "image_aspect_ratio": os.getenv("IMAGE_ASPECT_RATIO"),
        "image_size": os.getenv("IMAGE_SIZE"),
        "storage_backend": os.getenv("STORAGE_BACKEND"),
        "storage_path": os.getenv("STORAGE_PATH"),
        "storage_quota_bytes": os.getenv("STORAGE_QUOTA_BYTES"),
        "mongodb_uri": os.getenv("MONGODB_URI"),
        "mongodb_database": os.getenv("MONGODB_DATABASE"),
        "mongodb_collection": os.getenv("MONGODB_COLLECTION"),
        "autosave_delay_ms": os.getenv("AUTOSAVE_DELAY_MS"),
        "log_level": os.getenv("LOG_LEVEL"),
    }
    return Settings(**{key: value for key, value in env.items() if value})


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for scripts embedding Deck Studio."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
