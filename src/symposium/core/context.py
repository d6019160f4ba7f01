"""
Application Context

Holds every long-lived collaborator the request handlers need. One context is
built during application startup and attached to `app.state.context`;
handlers receive it through the `get_context` dependency.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fastapi import Request
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from symposium.core.config import Settings
from symposium.core.events import EventDispatcher

if TYPE_CHECKING:
    from symposium.core.email import Mailer
    from symposium.core.storage import FileStorage


@dataclass
class AppContext:
    """Process-wide collaborators shared by all request handlers."""

    settings: Settings
    engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]
    mailer: "Mailer"
    storage: "FileStorage"
    redis: Redis | None = None
    events: EventDispatcher = field(default_factory=EventDispatcher)


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the application context."""
    return request.app.state.context

