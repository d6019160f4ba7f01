"""
Submission Events

`PlanReplaced` is published when a student replaces a research plan that
already carries signatures. Its single handler invalidates every attestation
made about the old plan.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from symposium.modules.invitations.forms import StatementForm, clear_statement_signatures
from symposium.modules.students import repository as student_repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanReplaced:
    student_id: UUID
    previous_url: str | None
    new_url: str
    replaced_at: datetime


async def clear_statement_on_plan_replaced(event: PlanReplaced, db: AsyncSession) -> None:
    """
    Reset every signature and completion flag of the student's statement.

    Runs inside the publisher's transaction and only flushes.
    """
    student = await student_repository.get_by_id(db, event.student_id)
    if student is None:
        logger.warning(f"PlanReplaced for unknown student {event.student_id}")
        return

    form = clear_statement_signatures(StatementForm.load(student.statement_of_outside_assistance))
    await student_repository.update(
        db, student, commit=False, statement_of_outside_assistance=form.dump()
    )

    logger.info(f"Cleared statement signatures for student {event.student_id} after plan replacement")


def register_handlers(dispatcher) -> None:
    dispatcher.subscribe(PlanReplaced, clear_statement_on_plan_replaced)
