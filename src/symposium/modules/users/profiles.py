"""
Role Profiles

Resolves the role-specific profile record (advisor, student or judge) that
shares an ID with a user account.
"""

from typing import assert_never

from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.roles import ProfileKind, profile_kind
from symposium.modules.advisors.models import Advisor
from symposium.modules.judges.models import Judge
from symposium.modules.students.models import Student
from symposium.modules.users.models import User

Profile = Advisor | Student | Judge


def profile_model(kind: ProfileKind) -> type[Profile]:
    match kind:
        case ProfileKind.ADVISOR:
            return Advisor
        case ProfileKind.STUDENT:
            return Student
        case ProfileKind.JUDGE:
            return Judge
        case _:
            assert_never(kind)


async def load_profile(db: AsyncSession, user: User) -> Profile | None:
    """Profile backing the user's role; None for admins or missing profiles."""
    kind = profile_kind(user.role)
    if kind is None:
        return None
    return await db.get(profile_model(kind), user.id)


def display_name(user: User, profile: Profile | None) -> str:
    if profile is not None and profile.full_name:
        return profile.full_name
    return user.email.split("@")[0]
