"""Configuration module for the D-LAMA service.

This module provides centralized configuration management for the entire application,
including database connections, logging setup, error codes, and application settings.

Key Components:
- settings: Application configuration loaded from environment variables and TOML files
- Database: SQLAlchemy async engine and session management
- Logging: Loguru-based logging configuration with development/production modes
- Error handling: Centralized error codes and messages

The configuration supports multiple environments (development, testing, production)
and allows runtime configuration through environment variables while maintaining
sensible defaults from the app.toml configuration file.
"""

from dlama.config.config import settings
from dlama.config.db import engine, get_session
from dlama.config.errors import ErrorCode, ErrorNames
from dlama.config.logger import config_logger

__all__ = [
    "ErrorCode",
    "ErrorNames",
    "config_logger",
    "engine",
    "get_session",
    "settings",
]
