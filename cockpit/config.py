"""
Configuration management for the cockpit service.
"""
import importlib
from typing import Any, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class CockpitSettings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service configuration
    service_name: str = "ee-cockpit"
    host: str = "0.0.0.0"
    port: int = 8005
    debug: bool = False
    path_prefix: str = "/api/ee-cockpit"

    # Document store
    database_url: str = "sqlite:///./data/cockpit.db"
    database_echo: bool = False

    # Import path of the event engine, e.g. "myapp.engine:event_engine"
    event_engine: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="COCKPIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"  # Ignore extra environment variables
    )


def get_settings() -> CockpitSettings:
    """Get application settings instance."""
    return CockpitSettings()


def load_object(path: str) -> Any:
    """
    Import an object from a "package.module:attribute" path.

    Args:
        path: Import path, attribute may be dotted

    Returns:
        The referenced object
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Import path must have the form 'module:attribute', got '{path}'")

    obj = importlib.import_module(module_name)
    for name in attribute.split("."):
        try:
            obj = getattr(obj, name)
        except AttributeError:
            raise ValueError(f"Module '{module_name}' has no attribute '{attribute}'") from None
    return obj


def settings_summary(settings: CockpitSettings) -> str:
    """Human readable summary of the settings, without credentials."""
    database_url = make_url(settings.database_url).render_as_string(hide_password=True)
    return "\n".join([
        f"Host: {settings.host}:{settings.port}",
        f"Debug: {settings.debug}",
        f"Path prefix: {settings.path_prefix}",
        f"Document store: {database_url}",
        f"Event engine: {settings.event_engine or '<not configured>'}",
    ])
