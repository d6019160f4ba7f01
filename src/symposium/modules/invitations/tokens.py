"""
Invitation Tokens

Tokens have the form `{subject_id}_{purpose}_{epoch_millis}_{suffix}`.
The subject is the student (statement, photo release) or advisor
(chaperone) the invitation belongs to. A token is only accepted while it
equals the copy stored on the subject record, so issuing a new one
invalidates the previous link.
"""

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from uuid import UUID

from symposium.core.errors import ValidationFailedError

SEPARATOR = "_"
MIN_SEGMENTS = 3
SUFFIX_BYTES = 4  # hex encoded, never contains the separator


class TokenPurpose(str, Enum):
    CHAPERONE = "chaperone"
    PHOTO_RELEASE = "photorelease"
    TEAM_MEMBER = "teammember"
    TEACHER = "teacher"
    MENTOR = "mentor"
    PARENT = "parent"


STATEMENT_PURPOSES = frozenset({TokenPurpose.TEACHER, TokenPurpose.MENTOR, TokenPurpose.PARENT})
PHOTO_RELEASE_PURPOSES = frozenset({TokenPurpose.PHOTO_RELEASE, TokenPurpose.TEAM_MEMBER})


class InvalidTokenFormatError(ValidationFailedError):
    """Raised for tokens that cannot be parsed. Checked before any lookup."""

    def __init__(self, message: str = "Invalid token format"):
        super().__init__(message=message, error_code="INVALID_TOKEN_FORMAT")


@dataclass(frozen=True)
class InvitationToken:
    raw: str
    subject_id: UUID
    purpose: TokenPurpose
    issued_at: datetime | None

    def is_expired(self, max_age_hours: int, now: datetime | None = None) -> bool:
        """
        Whether the token is older than `max_age_hours`.

        A non-positive age disables expiry. Tokens without a readable
        timestamp count as expired once expiry is enabled.
        """
        if max_age_hours <= 0:
            return False
        if self.issued_at is None:
            return True
        now = now or datetime.now(UTC)
        return now - self.issued_at > timedelta(hours=max_age_hours)


def compose_token(subject_id: UUID, purpose: TokenPurpose, now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    millis = int(now.timestamp() * 1000)
    suffix = secrets.token_hex(SUFFIX_BYTES)
    return SEPARATOR.join([str(subject_id), purpose.value, str(millis), suffix])


def _parse_timestamp(segment: str) -> datetime | None:
    if not segment.isdigit():
        return None
    try:
        return datetime.fromtimestamp(int(segment) / 1000, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def parse_token(
    raw: str | None,
    allowed: frozenset[TokenPurpose] | None = None,
) -> InvitationToken:
    """
    Split a token into its parts.

    Raises:
        InvalidTokenFormatError: Too few segments, unknown or disallowed
            purpose, or a subject that is not a UUID
    """
    if not raw:
        raise InvalidTokenFormatError("Token is required")

    parts = raw.split(SEPARATOR)
    if len(parts) < MIN_SEGMENTS:
        raise InvalidTokenFormatError()

    try:
        purpose = TokenPurpose(parts[1])
    except ValueError as e:
        raise InvalidTokenFormatError("Invalid token") from e

    if allowed is not None and purpose not in allowed:
        raise InvalidTokenFormatError("Token does not belong to this form")

    try:
        subject_id = UUID(parts[0])
    except ValueError as e:
        raise InvalidTokenFormatError("Invalid token") from e

    return InvitationToken(
        raw=raw,
        subject_id=subject_id,
        purpose=purpose,
        issued_at=_parse_timestamp(parts[2]),
    )
