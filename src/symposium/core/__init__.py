"""
Core module - Configuration, database, security, email and utilities.
"""

from symposium.core.config import get_settings, settings
from symposium.core.context import AppContext, get_context
from symposium.core.errors import ServiceError
from symposium.core.roles import UserRole
from symposium.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Context
    "AppContext",
    "get_context",
    # Errors
    "ServiceError",
    # Roles
    "UserRole",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
