"""Application settings and per-project configuration."""

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILES = ("cf.config.json", ".cfrc.json")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CLOUDSHIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_instances: int = 10
    instance_type: str = "basic"
    compatibility_flag: str = "nodejs_compat"
    default_port: int = 8080
    package_manager: str = "npm"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class ProjectConfig(BaseModel):
    """Per-project defaults read from cf.config.json or .cfrc.json."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type_id: str | None = Field(default=None, alias="type")
    name: str | None = None
    class_name: str | None = Field(default=None, alias="class")
    max_instances: int | None = Field(default=None, alias="maxInstances")
    migration_tag: str | None = Field(default=None, alias="migrationTag")


def load_project_config(cwd: Path) -> ProjectConfig:
    """Load the first project config file found in cwd.

    Unreadable or malformed files are skipped with a warning.
    """
    for filename in PROJECT_CONFIG_FILES:
        config_path = cwd / filename
        if not config_path.exists():
            continue
        try:
            return ProjectConfig.model_validate(json.loads(config_path.read_text()))
        except (ValidationError, OSError, ValueError) as e:
            logger.warning("Failed to load config from %s: %s", filename, e)

    return ProjectConfig()
