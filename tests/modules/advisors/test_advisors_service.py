"""
Unit tests for the advisor service layer.

These tests cover:
- Approving and rejecting the advisor's own students
- Notification side effects of approval
- Ownership and admin-approval guards
- Chaperone nomination
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from symposium.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from symposium.modules.advisors.schemas import ChaperoneUpdate
from symposium.modules.advisors.service import (
    AdvisorNotApprovedError,
    decide_student,
    list_students,
    update_chaperone,
)
from symposium.modules.approvals import ApprovalStatus
from symposium.modules.invitations.forms import ChaperoneRecord

ADVISORS = "symposium.modules.advisors.service.repository"
STUDENTS = "symposium.modules.advisors.service.student_repository"
STUDENT_LOOKUP = "symposium.modules.students.service.repository"


def _set_status(db, student, status):
    student.status = status
    return student


class TestDecideStudent:
    """Tests for decide_student."""

    @pytest.mark.asyncio
    async def test_approve_sends_one_email(
        self, mock_db, mock_mailer, sample_advisor, sample_student
    ):
        with (
            patch(ADVISORS) as advisor_repo,
            patch(STUDENTS) as student_repo,
            patch(STUDENT_LOOKUP) as lookup,
        ):
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            student_repo.set_status = AsyncMock(side_effect=_set_status)

            result = await decide_student(
                mock_db, mock_mailer, sample_advisor.id, sample_student.id, ApprovalStatus.APPROVED
            )

            student_repo.set_status.assert_called_once()

        assert result.status == ApprovalStatus.APPROVED
        assert result.notification_sent is True
        mock_mailer.send_student_approved.assert_awaited_once_with(
            sample_student.email, "Maya Chen", "Rosa Lopez"
        )

    @pytest.mark.asyncio
    async def test_each_approval_call_sends_its_own_email(
        self, mock_db, mock_mailer, sample_advisor, sample_student
    ):
        with (
            patch(ADVISORS) as advisor_repo,
            patch(STUDENTS) as student_repo,
            patch(STUDENT_LOOKUP) as lookup,
        ):
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            student_repo.set_status = AsyncMock(side_effect=_set_status)

            for _ in range(2):
                await decide_student(
                    mock_db,
                    mock_mailer,
                    sample_advisor.id,
                    sample_student.id,
                    ApprovalStatus.APPROVED,
                )

        assert mock_mailer.send_student_approved.await_count == 2

    @pytest.mark.asyncio
    async def test_failed_email_keeps_approval(
        self, mock_db, mock_mailer, sample_advisor, sample_student
    ):
        mock_mailer.send_student_approved = AsyncMock(return_value=False)
        with (
            patch(ADVISORS) as advisor_repo,
            patch(STUDENTS) as student_repo,
            patch(STUDENT_LOOKUP) as lookup,
        ):
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            student_repo.set_status = AsyncMock(side_effect=_set_status)

            result = await decide_student(
                mock_db, mock_mailer, sample_advisor.id, sample_student.id, ApprovalStatus.APPROVED
            )

        assert result.status == ApprovalStatus.APPROVED
        assert result.notification_sent is False
        assert sample_student.status == ApprovalStatus.APPROVED
        mock_mailer.send_student_approved.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reject_sends_no_email(
        self, mock_db, mock_mailer, sample_advisor, sample_student
    ):
        with (
            patch(ADVISORS) as advisor_repo,
            patch(STUDENTS) as student_repo,
            patch(STUDENT_LOOKUP) as lookup,
        ):
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            student_repo.set_status = AsyncMock(side_effect=_set_status)

            result = await decide_student(
                mock_db, mock_mailer, sample_advisor.id, sample_student.id, ApprovalStatus.REJECTED
            )

        assert result.status == ApprovalStatus.REJECTED
        assert result.notification_sent is False
        mock_mailer.send_student_approved.assert_not_called()

    @pytest.mark.asyncio
    async def test_pending_is_not_a_decision(
        self, mock_db, mock_mailer, sample_advisor, sample_student
    ):
        with (
            patch(ADVISORS) as advisor_repo,
            patch(STUDENTS) as student_repo,
            patch(STUDENT_LOOKUP) as lookup,
        ):
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            student_repo.set_status = AsyncMock()

            with pytest.raises(ValidationFailedError):
                await decide_student(
                    mock_db,
                    mock_mailer,
                    sample_advisor.id,
                    sample_student.id,
                    ApprovalStatus.PENDING,
                )

            student_repo.set_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_advisors_student_forbidden(
        self, mock_db, mock_mailer, sample_advisor, sample_student
    ):
        sample_student.advisor_id = uuid4()
        with (
            patch(ADVISORS) as advisor_repo,
            patch(STUDENTS) as student_repo,
            patch(STUDENT_LOOKUP) as lookup,
        ):
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            student_repo.set_status = AsyncMock()

            with pytest.raises(ForbiddenError) as exc_info:
                await decide_student(
                    mock_db,
                    mock_mailer,
                    sample_advisor.id,
                    sample_student.id,
                    ApprovalStatus.APPROVED,
                )

            student_repo.set_status.assert_not_called()
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_unapproved_advisor_cannot_decide(
        self, mock_db, mock_mailer, sample_advisor, sample_student
    ):
        sample_advisor.approval_status = ApprovalStatus.PENDING
        sample_advisor.admin_approved = False
        with patch(ADVISORS) as advisor_repo:
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)

            with pytest.raises(AdvisorNotApprovedError) as exc_info:
                await decide_student(
                    mock_db,
                    mock_mailer,
                    sample_advisor.id,
                    sample_student.id,
                    ApprovalStatus.APPROVED,
                )

        assert exc_info.value.error_code == "ADVISOR_NOT_APPROVED"

    @pytest.mark.asyncio
    async def test_unknown_student(self, mock_db, mock_mailer, sample_advisor):
        with (
            patch(ADVISORS) as advisor_repo,
            patch(STUDENT_LOOKUP) as lookup,
        ):
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            lookup.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError):
                await decide_student(
                    mock_db, mock_mailer, sample_advisor.id, uuid4(), ApprovalStatus.APPROVED
                )


class TestListStudents:
    @pytest.mark.asyncio
    async def test_lists_own_students(self, mock_db, sample_advisor, sample_student):
        with (
            patch(ADVISORS) as advisor_repo,
            patch(STUDENTS) as student_repo,
        ):
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            student_repo.list_by_advisor = AsyncMock(return_value=[sample_student])

            result = await list_students(mock_db, sample_advisor.id)

            student_repo.list_by_advisor.assert_awaited_once_with(mock_db, sample_advisor.id)
        assert [s.id for s in result] == [sample_student.id]


class TestUpdateChaperone:
    """Tests for update_chaperone."""

    @staticmethod
    def _save(db, advisor, record):
        advisor.chaperone = record
        return advisor

    @pytest.mark.asyncio
    async def test_new_email_resets_invitation(self, mock_db, sample_advisor):
        sample_advisor.chaperone = ChaperoneRecord(
            name="Pat Kim",
            email="pat@example.com",
            invite_token="tok",
            invite_sent=True,
            confirmed=True,
        ).dump()

        with patch(ADVISORS) as advisor_repo:
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            advisor_repo.save_chaperone = AsyncMock(side_effect=self._save)

            result = await update_chaperone(
                mock_db,
                sample_advisor.id,
                ChaperoneUpdate(name="Lee Ray", email="lee@example.com"),
            )

        assert result.chaperone.email == "lee@example.com"
        assert result.chaperone.confirmed is False
        assert result.chaperone.invite_sent is False

    @pytest.mark.asyncio
    async def test_same_email_keeps_confirmation(self, mock_db, sample_advisor):
        sample_advisor.chaperone = ChaperoneRecord(
            name="Pat Kim", email="pat@example.com", confirmed=True
        ).dump()

        with patch(ADVISORS) as advisor_repo:
            advisor_repo.get_by_id = AsyncMock(return_value=sample_advisor)
            advisor_repo.save_chaperone = AsyncMock(side_effect=self._save)

            result = await update_chaperone(
                mock_db,
                sample_advisor.id,
                ChaperoneUpdate(name="Pat Kim", email="PAT@example.com", phone="555-0101"),
            )

        assert result.chaperone.confirmed is True
        assert result.chaperone.phone == "555-0101"
        assert "invite_token" not in result.chaperone.model_dump()
