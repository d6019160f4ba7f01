"""
User Roles

The closed set of account roles and every role-dependent lookup. Each lookup
is an exhaustive match so adding a role forces every mapping to be updated.
"""

from enum import Enum
from typing import assert_never


class UserRole(str, Enum):
    """Account roles."""

    ADVISOR = "advisor"
    STUDENT = "student"
    JUDGE = "judge"
    DIRECTOR = "director"
    MANAGER = "manager"


class ProfileKind(str, Enum):
    """Role-specific profile records kept alongside the user account."""

    ADVISOR = "advisor"
    STUDENT = "student"
    JUDGE = "judge"


def dashboard_path(role: UserRole) -> str:
    """Front-end dashboard a user lands on after login."""
    match role:
        case UserRole.ADVISOR:
            return "/dashboard/sra"
        case UserRole.STUDENT:
            return "/dashboard/student"
        case UserRole.JUDGE:
            return "/dashboard/judge"
        case UserRole.DIRECTOR | UserRole.MANAGER:
            return "/dashboard/admin"
        case _:
            assert_never(role)


def profile_kind(role: UserRole) -> ProfileKind | None:
    """Profile record backing the role; admins have none."""
    match role:
        case UserRole.ADVISOR:
            return ProfileKind.ADVISOR
        case UserRole.STUDENT:
            return ProfileKind.STUDENT
        case UserRole.JUDGE:
            return ProfileKind.JUDGE
        case UserRole.DIRECTOR | UserRole.MANAGER:
            return None
        case _:
            assert_never(role)


def is_admin(role: UserRole) -> bool:
    match role:
        case UserRole.DIRECTOR | UserRole.MANAGER:
            return True
        case UserRole.ADVISOR | UserRole.STUDENT | UserRole.JUDGE:
            return False
        case _:
            assert_never(role)


ADMIN_ROLES = frozenset(role for role in UserRole if is_admin(role))
