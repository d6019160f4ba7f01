"""
Notification Helpers

Recipient resolution and best-effort sends for notices that must not fail
the request that triggered them (registration and approval notices).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.roles import ADMIN_ROLES
from symposium.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


async def admin_recipients(db: AsyncSession, fallback: list[str]) -> list[str]:
    """
    Addresses of every director and manager account, plus configured extras.

    Order is preserved and duplicates (case-insensitive) are dropped.
    """
    admins = await UserRepository.list_by_roles(db, list(ADMIN_ROLES))
    recipients: list[str] = []
    seen: set[str] = set()
    for email in [a.email for a in admins] + fallback:
        key = email.strip().lower()
        if key and key not in seen:
            seen.add(key)
            recipients.append(email.strip())
    return recipients


async def notify_admins_of_registration(
    db: AsyncSession,
    mailer,
    fallback: list[str],
    *,
    kind: str,
    name: str,
    email: str,
    detail: str | None = None,
) -> int:
    """
    Tell every administrator about a registration awaiting review.

    Returns:
        Number of notices that were sent
    """
    recipients = await admin_recipients(db, fallback)
    if not recipients:
        logger.warning(f"No admin recipients configured for new {kind} notice")
        return 0

    sent = 0
    for recipient in recipients:
        if await mailer.send_new_registration_notice(
            recipient, kind=kind, name=name, email=email, detail=detail
        ):
            sent += 1
        else:
            logger.error(f"Failed to notify admin {recipient} of new {kind}")

    logger.info(f"Notified {sent}/{len(recipients)} admin(s) of new {kind}: {email}")
    return sent
