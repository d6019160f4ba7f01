"""
Shared fixtures for service-layer tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from symposium.core.email import Mailer
from symposium.core.rate_limit import reset_memory_store
from symposium.modules.advisors.models import Advisor
from symposium.modules.approvals import ApprovalStatus
from symposium.modules.judges.models import Judge
from symposium.modules.students.models import PaymentStatus, Student


def _apply_update(db, record, *, commit=True, **fields):
    for key, value in fields.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def mock_mailer():
    """Create a mailer whose sends all succeed."""
    mailer = MagicMock(spec=Mailer)
    for name in (
        "send_email",
        "send_verification_code",
        "send_student_approved",
        "send_advisor_approved",
        "send_judge_approved",
        "send_new_student_notice",
        "send_new_registration_notice",
        "send_statement_invitation",
        "send_photo_release_invitation",
        "send_chaperone_invitation",
    ):
        setattr(mailer, name, AsyncMock(return_value=True))
    return mailer


@pytest.fixture
def apply_update():
    """Side effect for mocked repository `update` calls: write the fields onto the record."""
    return _apply_update


@pytest.fixture(autouse=True)
def clear_rate_limits():
    reset_memory_store()
    yield
    reset_memory_store()


@pytest.fixture
def sample_advisor():
    """Create an approved advisor."""
    advisor = MagicMock(spec=Advisor)
    advisor.id = uuid4()
    advisor.first_name = "Rosa"
    advisor.last_name = "Lopez"
    advisor.full_name = "Rosa Lopez"
    advisor.email = "rlopez@hightstown.example.org"
    advisor.phone = None
    advisor.title = "Science Research Coordinator"
    advisor.school_id = uuid4()
    advisor.school_name = "Hightstown High School"
    advisor.approval_status = ApprovalStatus.APPROVED
    advisor.admin_approved = True
    advisor.chaperone = None
    advisor.created_at = datetime.now(UTC)
    return advisor


@pytest.fixture
def sample_student(sample_advisor):
    """Create a pending student registered under `sample_advisor`."""
    student = MagicMock(spec=Student)
    student.id = uuid4()
    student.first_name = "Maya"
    student.last_name = "Chen"
    student.full_name = "Maya Chen"
    student.email = "maya.chen@example.com"
    student.grade = "11"
    student.school_id = sample_advisor.school_id
    student.school_name = sample_advisor.school_name
    student.advisor_id = sample_advisor.id
    student.project_title = "Microplastics in the Raritan River"
    student.project_description = None
    student.is_team_project = False
    student.team_member_name = None
    student.team_member_email = None
    student.status = ApprovalStatus.PENDING
    student.approved_at = None
    student.payment_status = PaymentStatus.NOT_RECEIVED
    student.research_plan_url = None
    student.abstract_url = None
    student.slideshow_url = None
    student.presentation_url = None
    student.research_report_url = None
    student.statement_of_outside_assistance = None
    student.photo_release = None
    student.ethics_questionnaire = None
    student.src_approval_requested = False
    student.src_approval_requested_at = None
    student.src_approved = None
    student.src_notes = None
    student.src_reviewed_by = None
    student.src_reviewed_at = None
    student.created_at = datetime.now(UTC)
    return student


@pytest.fixture
def sample_judge():
    judge = MagicMock(spec=Judge)
    judge.id = uuid4()
    judge.first_name = "Alan"
    judge.last_name = "Park"
    judge.full_name = "Alan Park"
    judge.email = "apark@university.example.edu"
    judge.approval_status = ApprovalStatus.PENDING
    return judge
