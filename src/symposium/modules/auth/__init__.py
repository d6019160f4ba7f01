"""Authentication module."""

from symposium.modules.auth.router import router

__all__ = ["router"]
