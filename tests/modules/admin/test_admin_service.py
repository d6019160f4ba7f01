"""
Unit tests for admin service operations.

These tests cover:
- Advisor and judge approval with their notification emails
- Payment tracking
- SRC decisions
- Dashboard counts
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from symposium.core.errors import NotFoundError, ValidationFailedError
from symposium.modules.admin.service import (
    decide_advisor,
    decide_judge,
    decide_src,
    get_dashboard_stats,
    set_payment_status,
)
from symposium.modules.approvals import ApprovalStatus, SRCDecision
from symposium.modules.students.models import PaymentStatus

ADVISORS = "symposium.modules.admin.service.advisor_repository"
JUDGES = "symposium.modules.admin.service.judge_repository"
STUDENTS = "symposium.modules.admin.service.student_repository"
STUDENT_LOOKUP = "symposium.modules.students.service.repository"


def _set_approval(db, record, status):
    record.approval_status = status
    return record


class TestDecideAdvisor:
    """Tests for decide_advisor."""

    @pytest.mark.asyncio
    async def test_approve_sends_exactly_one_email(self, mock_db, mock_mailer, sample_advisor):
        sample_advisor.approval_status = ApprovalStatus.PENDING
        with patch(ADVISORS) as repo:
            repo.get_by_id = AsyncMock(return_value=sample_advisor)
            repo.set_approval_status = AsyncMock(side_effect=_set_approval)

            result = await decide_advisor(
                mock_db, mock_mailer, sample_advisor.id, ApprovalStatus.APPROVED
            )

        assert result.id == sample_advisor.id
        assert result.status == ApprovalStatus.APPROVED
        assert result.notification_sent is True
        mock_mailer.send_advisor_approved.assert_awaited_once_with(
            sample_advisor.email, "Rosa Lopez", "Hightstown High School"
        )

    @pytest.mark.asyncio
    async def test_failed_email_leaves_advisor_approved(
        self, mock_db, mock_mailer, sample_advisor
    ):
        sample_advisor.approval_status = ApprovalStatus.PENDING
        mock_mailer.send_advisor_approved = AsyncMock(return_value=False)
        with patch(ADVISORS) as repo:
            repo.get_by_id = AsyncMock(return_value=sample_advisor)
            repo.set_approval_status = AsyncMock(side_effect=_set_approval)

            result = await decide_advisor(
                mock_db, mock_mailer, sample_advisor.id, ApprovalStatus.APPROVED
            )

            repo.set_approval_status.assert_awaited_once()

        assert result.status == ApprovalStatus.APPROVED
        assert result.notification_sent is False
        assert sample_advisor.approval_status == ApprovalStatus.APPROVED
        mock_mailer.send_advisor_approved.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reject_is_silent(self, mock_db, mock_mailer, sample_advisor):
        with patch(ADVISORS) as repo:
            repo.get_by_id = AsyncMock(return_value=sample_advisor)
            repo.set_approval_status = AsyncMock(side_effect=_set_approval)

            result = await decide_advisor(
                mock_db, mock_mailer, sample_advisor.id, ApprovalStatus.REJECTED
            )

        assert result.status == ApprovalStatus.REJECTED
        mock_mailer.send_advisor_approved.assert_not_called()

    @pytest.mark.asyncio
    async def test_cannot_reset_to_pending(self, mock_db, mock_mailer, sample_advisor):
        with patch(ADVISORS) as repo:
            repo.get_by_id = AsyncMock(return_value=sample_advisor)
            repo.set_approval_status = AsyncMock()

            with pytest.raises(ValidationFailedError):
                await decide_advisor(
                    mock_db, mock_mailer, sample_advisor.id, ApprovalStatus.PENDING
                )

            repo.set_approval_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_advisor(self, mock_db, mock_mailer):
        with patch(ADVISORS) as repo:
            repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await decide_advisor(mock_db, mock_mailer, uuid4(), ApprovalStatus.APPROVED)

        assert exc_info.value.status_code == 404


class TestDecideJudge:
    """Tests for decide_judge."""

    @pytest.mark.asyncio
    async def test_approve_sends_exactly_one_email(self, mock_db, mock_mailer, sample_judge):
        with patch(JUDGES) as repo:
            repo.get_by_id = AsyncMock(return_value=sample_judge)
            repo.set_approval_status = AsyncMock(side_effect=_set_approval)

            result = await decide_judge(
                mock_db, mock_mailer, sample_judge.id, ApprovalStatus.APPROVED
            )

        assert result.status == ApprovalStatus.APPROVED
        assert result.notification_sent is True
        mock_mailer.send_judge_approved.assert_awaited_once_with(sample_judge.email, "Alan Park")

    @pytest.mark.asyncio
    async def test_repeat_approval_sends_again(self, mock_db, mock_mailer, sample_judge):
        sample_judge.approval_status = ApprovalStatus.APPROVED
        with patch(JUDGES) as repo:
            repo.get_by_id = AsyncMock(return_value=sample_judge)
            repo.set_approval_status = AsyncMock(side_effect=_set_approval)

            await decide_judge(mock_db, mock_mailer, sample_judge.id, ApprovalStatus.APPROVED)

        mock_mailer.send_judge_approved.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_email_leaves_judge_approved(self, mock_db, mock_mailer, sample_judge):
        mock_mailer.send_judge_approved = AsyncMock(return_value=False)
        with patch(JUDGES) as repo:
            repo.get_by_id = AsyncMock(return_value=sample_judge)
            repo.set_approval_status = AsyncMock(side_effect=_set_approval)

            result = await decide_judge(
                mock_db, mock_mailer, sample_judge.id, ApprovalStatus.APPROVED
            )

        assert result.status == ApprovalStatus.APPROVED
        assert result.notification_sent is False


class TestStudentAdministration:
    """Tests for payment status and SRC decisions."""

    @pytest.mark.asyncio
    async def test_set_payment_status(self, mock_db, sample_student, apply_update):
        with (
            patch(STUDENT_LOOKUP) as lookup,
            patch(STUDENTS) as repo,
        ):
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock(side_effect=apply_update)

            result = await set_payment_status(mock_db, sample_student.id, PaymentStatus.RECEIVED)

        assert result.payment_status == PaymentStatus.RECEIVED

    @pytest.mark.asyncio
    async def test_src_approval_records_reviewer(self, mock_db, sample_student, apply_update):
        admin_id = uuid4()
        with (
            patch(STUDENT_LOOKUP) as lookup,
            patch(STUDENTS) as repo,
        ):
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock(side_effect=apply_update)

            result = await decide_src(
                mock_db, admin_id, sample_student.id, SRCDecision.APPROVED, "Meets protocol"
            )

        assert result.src_approved is True
        assert result.src_notes == "Meets protocol"
        assert sample_student.src_reviewed_by == admin_id
        assert sample_student.src_reviewed_at is not None

    @pytest.mark.asyncio
    async def test_src_undecided_clears_decision(self, mock_db, sample_student, apply_update):
        sample_student.src_approved = False
        sample_student.src_reviewed_by = uuid4()
        with (
            patch(STUDENT_LOOKUP) as lookup,
            patch(STUDENTS) as repo,
        ):
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock(side_effect=apply_update)

            result = await decide_src(mock_db, uuid4(), sample_student.id, SRCDecision.UNDECIDED)

        assert result.src_approved is None
        assert sample_student.src_reviewed_by is None
        assert sample_student.src_reviewed_at is None

    @pytest.mark.asyncio
    async def test_src_decision_leaves_main_status(self, mock_db, sample_student, apply_update):
        with (
            patch(STUDENT_LOOKUP) as lookup,
            patch(STUDENTS) as repo,
        ):
            lookup.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock(side_effect=apply_update)

            await decide_src(mock_db, uuid4(), sample_student.id, SRCDecision.REJECTED)

            assert "status" not in repo.update.call_args.kwargs
        assert sample_student.status == ApprovalStatus.PENDING


class TestDashboardStats:
    @pytest.mark.asyncio
    async def test_counts_are_grouped(self, mock_db):
        with (
            patch(ADVISORS) as advisors,
            patch(JUDGES) as judges,
            patch(STUDENTS) as students,
        ):
            advisors.count_by_status = AsyncMock(
                return_value={"total": 3, "pending": 1, "approved": 2, "rejected": 0}
            )
            judges.count_by_status = AsyncMock(return_value={"total": 0})
            students.count_by_status = AsyncMock(
                return_value={"total": 5, "approved": 4, "payment_received": 2, "src_pending": 1}
            )

            stats = await get_dashboard_stats(mock_db)

        assert stats.advisors.approved == 2
        assert stats.judges.total == 0
        assert stats.students.payment_received == 2
        assert stats.students.pending == 0
