"""
Users module - Accounts, login and email verification.
"""

from symposium.modules.users.models import User
from symposium.modules.users.repository import UserRepository

__all__ = ["User", "UserRepository"]
