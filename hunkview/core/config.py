"""
Configuration module implementing the Singleton pattern for application settings.

This module provides a centralized configuration management system using Pydantic Settings.
Settings are loaded from environment variables and/or .env files, with type validation.
The Settings class is implemented as a Singleton to ensure consistent configuration
across the application.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings using Pydantic BaseSettings.

    Configuration values can be overridden by environment variables or values
    in a .env file.

    Attributes:
        ENVIRONMENT: Environment configuration (development, staging, production)
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_DIR: Directory for the rotating log files
        GITHUB_TOKEN: Token used for GitHub REST calls
        GITHUB_API_BASE_URL: Base URL of the GitHub REST API
        GITHUB_WEBHOOK_SECRET: Shared secret for webhook signature validation
        CHAT_MODEL_NAME: Name of the chat model used to answer review comments
        LLM_BASE_URL: Base URL of the chat model server
        AI_COMMAND_PREFIX: Prefix a review comment must start with to trigger a reply
        ALLOWED_AUTHOR_ASSOCIATIONS: Author associations allowed to trigger a reply
        DIFF_TOTAL_WIDTH: Width of each column of the side-by-side diff
        DIFF_SHOW_LINE_NUMBERS: Whether the side-by-side diff shows line numbers
    """

    # Core application settings
    ENVIRONMENT: str = "development"  # Options: development, staging, production

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # GitHub
    GITHUB_TOKEN: str = ""
    GITHUB_API_BASE_URL: str = "https://api.github.com"
    GITHUB_WEBHOOK_SECRET: str = ""

    # LLM
    CHAT_MODEL_NAME: str = "qwen2.5-coder:7b"
    LLM_BASE_URL: str = "http://localhost:11434"

    # Reply behaviour
    AI_COMMAND_PREFIX: str = "!ai"
    ALLOWED_AUTHOR_ASSOCIATIONS: List[str] = ["collaborator", "member", "owner"]

    # Diff rendering
    DIFF_TOTAL_WIDTH: int = 80
    DIFF_SHOW_LINE_NUMBERS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Create and return a cached instance of the Settings class.

    Returns:
        Settings: The singleton instance of application settings
    """
    return Settings()
