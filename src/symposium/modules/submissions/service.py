"""
Submission Service Layer

Validates and stores research artifacts and records their URLs on the
student.

Replacing a research plan that already has statement signatures requires an
explicit confirmation; the confirmed replacement publishes `PlanReplaced`,
whose handler clears those signatures.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from symposium.core.errors import ConflictError, ServiceError, ValidationFailedError
from symposium.core.events import EventDispatcher
from symposium.core.storage import FileStorage
from symposium.modules.invitations.forms import StatementForm
from symposium.modules.students import repository as student_repository
from symposium.modules.students.service import get_student
from symposium.modules.submissions.artifacts import (
    ARTIFACT_RULES,
    Artifact,
    file_extension,
    storage_name,
)
from symposium.modules.submissions.events import PlanReplaced
from symposium.modules.submissions.schemas import UploadResponse

logger = logging.getLogger(__name__)


class FileTooLargeError(ServiceError):
    def __init__(self, artifact: Artifact, max_mb: int):
        super().__init__(
            message=f"The {artifact.value.replace('_', ' ')} must be {max_mb}MB or smaller.",
            error_code="FILE_TOO_LARGE",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )


class ConfirmationRequiredError(ConflictError):
    def __init__(self):
        super().__init__(
            message=(
                "Replacing the research plan will clear all signatures on your Statement "
                "of Outside Assistance. Resubmit with confirm_replace=true to continue."
            ),
            error_code="CONFIRMATION_REQUIRED",
        )


def validate_upload(artifact: Artifact, filename: str | None, size: int) -> str:
    """
    Check the file against the artifact's rules.

    Returns:
        The normalized extension

    Raises:
        ValidationFailedError: Empty file or extension not accepted
        FileTooLargeError: Over the size ceiling
    """
    rule = ARTIFACT_RULES[artifact]
    extension = file_extension(filename)
    if extension not in rule.extensions:
        allowed = ", ".join(f".{ext}" for ext in sorted(rule.extensions))
        raise ValidationFailedError(
            f"Invalid file type for {artifact.value.replace('_', ' ')}. Allowed: {allowed}",
            "INVALID_FILE_TYPE",
        )
    if size <= 0:
        raise ValidationFailedError("The uploaded file is empty.", "EMPTY_FILE")
    if size > rule.max_bytes:
        raise FileTooLargeError(artifact, rule.max_mb)
    return extension


async def upload_artifact(
    db: AsyncSession,
    storage: FileStorage,
    events: EventDispatcher,
    student_id: UUID,
    artifact: Artifact,
    filename: str | None,
    content: bytes,
    *,
    confirm_replace: bool = False,
) -> UploadResponse:
    """
    Store an artifact and write its URL onto the student.

    Raises:
        ValidationFailedError / FileTooLargeError: File rejected
        ConfirmationRequiredError: Plan replacement would clear signatures
    """
    extension = validate_upload(artifact, filename, len(content))
    student = await get_student(db, student_id)
    rule = ARTIFACT_RULES[artifact]
    previous_url = getattr(student, rule.url_field)

    replaces_signed_plan = (
        artifact == Artifact.RESEARCH_PLAN
        and previous_url is not None
        and StatementForm.load(student.statement_of_outside_assistance).has_any_signature()
    )
    if replaces_signed_plan and not confirm_replace:
        raise ConfirmationRequiredError()

    url = await storage.save(str(student.id), storage_name(artifact, extension), content)
    # The new URL and the cleared signatures land in a single commit
    student = await student_repository.update(
        db, student, commit=False, **{rule.url_field: url}
    )

    if replaces_signed_plan:
        await events.publish(
            PlanReplaced(
                student_id=student.id,
                previous_url=previous_url,
                new_url=url,
                replaced_at=datetime.now(UTC),
            ),
            db,
        )

    await db.commit()
    await db.refresh(student)
    logger.info(f"Student {student.id} uploaded {artifact.value} ({len(content)} bytes)")

    return UploadResponse(
        student_id=student.id,
        artifact=artifact,
        url=url,
        size_bytes=len(content),
        signatures_cleared=replaces_signed_plan,
    )
