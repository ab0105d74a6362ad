"""Configuration management for canrbac.

Runtime settings come from the environment (``CANRBAC_*``) or a ``.env``
file. Role definitions themselves live in a YAML file whose path is always
passed explicitly.
"""

from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Role definitions
    roles_file: Optional[str] = None
    strict_roles: bool = False

    # Request classification
    api_version_pattern: str = r"v\d+"
    index_permission: str = "index"

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    file_logging: bool = False

    model_config = SettingsConfigDict(
        env_prefix="CANRBAC_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def ensure_mapping(document: Any) -> Dict[str, Any]:
    """Normalize a decoded YAML document to a mapping.

    An empty document becomes an empty mapping.

    Raises:
        TypeError: If the document root is not a mapping
    """
    if document is None:
        return {}

    if not isinstance(document, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(document).__name__}"
        )

    return document
