"""
Unit tests for advisor, student and judge registration.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from pydantic import ValidationError

from symposium.core.config import Settings
from symposium.core.errors import NotFoundError, ValidationFailedError
from symposium.core.roles import UserRole
from symposium.modules.registration.schemas import (
    AdvisorRegistration,
    JudgeRegistration,
    StudentRegistration,
)
from symposium.modules.registration.service import (
    register_advisor,
    register_judge,
    register_student,
)
from symposium.modules.schools.models import School
from symposium.modules.users.models import User

SERVICE = "symposium.modules.registration.service"


@pytest.fixture
def settings():
    return Settings(admin_notification_emails="director@njsrs.org")


@pytest.fixture
def sample_school(sample_advisor):
    school = MagicMock(spec=School)
    school.id = sample_advisor.school_id
    school.name = sample_advisor.school_name
    return school


def _user(role: UserRole, email: str):
    user = MagicMock(spec=User)
    user.id = uuid4()
    user.email = email
    user.role = role
    return user


class TestRegistrationSchemas:
    def test_advisor_needs_a_school(self):
        with pytest.raises(ValidationError):
            AdvisorRegistration(
                email="a@example.com", password="secret123", first_name="A", last_name="B"
            )

    def test_team_project_needs_partner_name(self):
        with pytest.raises(ValidationError):
            StudentRegistration(
                email="s@example.com",
                password="secret123",
                first_name="S",
                last_name="T",
                grade="11",
                school_id=uuid4(),
                advisor_id=uuid4(),
                is_team_project=True,
            )

    def test_password_minimum_length(self):
        with pytest.raises(ValidationError):
            JudgeRegistration(email="j@example.com", password="short", first_name="J", last_name="K")


class TestRegisterAdvisor:
    """Tests for register_advisor."""

    @pytest.mark.asyncio
    async def test_new_school_is_created(
        self, mock_db, mock_mailer, settings, sample_advisor, sample_school
    ):
        user = _user(UserRole.ADVISOR, sample_advisor.email)
        with (
            patch(f"{SERVICE}.user_service") as users,
            patch(f"{SERVICE}.SchoolRepository") as schools,
            patch(f"{SERVICE}.advisor_repository") as advisors,
            patch(
                f"{SERVICE}.notify_admins_of_registration", AsyncMock(return_value=1)
            ) as notify,
        ):
            users.create_account = AsyncMock(return_value=(user, "123456"))
            schools.get_by_name = AsyncMock(return_value=None)
            schools.create = AsyncMock(return_value=sample_school)
            advisors.create = AsyncMock(return_value=sample_advisor)

            result = await register_advisor(
                mock_db,
                mock_mailer,
                settings,
                AdvisorRegistration(
                    email=sample_advisor.email,
                    password="secret123",
                    first_name="Rosa",
                    last_name="Lopez",
                    school_name="Hightstown High School",
                ),
            )

            schools.create.assert_awaited_once()
            notify.assert_awaited_once()
            assert notify.call_args.kwargs["kind"] == "advisor"

        mock_db.commit.assert_awaited_once()
        mock_mailer.send_verification_code.assert_awaited_once_with(
            sample_advisor.email, "Rosa Lopez", "123456"
        )
        assert result.role == UserRole.ADVISOR
        assert result.verification_sent is True
        assert result.dashboard_path == "/dashboard/sra"

    @pytest.mark.asyncio
    async def test_unknown_school_id(self, mock_db, mock_mailer, settings, sample_advisor):
        with (
            patch(f"{SERVICE}.user_service") as users,
            patch(f"{SERVICE}.SchoolRepository") as schools,
        ):
            users.create_account = AsyncMock(
                return_value=(_user(UserRole.ADVISOR, sample_advisor.email), "123456")
            )
            schools.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError):
                await register_advisor(
                    mock_db,
                    mock_mailer,
                    settings,
                    AdvisorRegistration(
                        email=sample_advisor.email,
                        password="secret123",
                        first_name="Rosa",
                        last_name="Lopez",
                        school_id=uuid4(),
                    ),
                )

        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_verification_email_still_registers(
        self, mock_db, mock_mailer, settings, sample_advisor, sample_school
    ):
        mock_mailer.send_verification_code = AsyncMock(return_value=False)
        with (
            patch(f"{SERVICE}.user_service") as users,
            patch(f"{SERVICE}.SchoolRepository") as schools,
            patch(f"{SERVICE}.advisor_repository") as advisors,
            patch(f"{SERVICE}.notify_admins_of_registration", AsyncMock(return_value=0)),
        ):
            users.create_account = AsyncMock(
                return_value=(_user(UserRole.ADVISOR, sample_advisor.email), "123456")
            )
            schools.get_by_id = AsyncMock(return_value=sample_school)
            advisors.create = AsyncMock(return_value=sample_advisor)

            result = await register_advisor(
                mock_db,
                mock_mailer,
                settings,
                AdvisorRegistration(
                    email=sample_advisor.email,
                    password="secret123",
                    first_name="Rosa",
                    last_name="Lopez",
                    school_id=sample_school.id,
                ),
            )

        mock_db.commit.assert_awaited_once()
        assert result.verification_sent is False


class TestRegisterStudent:
    """Tests for register_student."""

    def _data(self, school_id, advisor_id):
        return StudentRegistration(
            email="maya.chen@example.com",
            password="secret123",
            first_name="Maya",
            last_name="Chen",
            grade="11",
            school_id=school_id,
            advisor_id=advisor_id,
            project_title="Microplastics in the Raritan River",
        )

    @pytest.mark.asyncio
    async def test_advisor_must_belong_to_school(
        self, mock_db, mock_mailer, settings, sample_advisor, sample_school
    ):
        sample_advisor.school_id = uuid4()
        with (
            patch(f"{SERVICE}.user_service") as users,
            patch(f"{SERVICE}.SchoolRepository") as schools,
            patch(f"{SERVICE}.advisor_repository") as advisors,
        ):
            users.create_account = AsyncMock()
            schools.get_by_id = AsyncMock(return_value=sample_school)
            advisors.get_by_id = AsyncMock(return_value=sample_advisor)

            with pytest.raises(ValidationFailedError) as exc_info:
                await register_student(
                    mock_db,
                    mock_mailer,
                    settings,
                    self._data(sample_school.id, sample_advisor.id),
                )

            users.create_account.assert_not_called()
        assert exc_info.value.error_code == "ADVISOR_SCHOOL_MISMATCH"

    @pytest.mark.asyncio
    async def test_unknown_advisor(self, mock_db, mock_mailer, settings, sample_school):
        with (
            patch(f"{SERVICE}.SchoolRepository") as schools,
            patch(f"{SERVICE}.advisor_repository") as advisors,
        ):
            schools.get_by_id = AsyncMock(return_value=sample_school)
            advisors.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError):
                await register_student(
                    mock_db, mock_mailer, settings, self._data(sample_school.id, uuid4())
                )

    @pytest.mark.asyncio
    async def test_advisor_is_told_about_new_student(
        self, mock_db, mock_mailer, settings, sample_advisor, sample_school, sample_student
    ):
        with (
            patch(f"{SERVICE}.user_service") as users,
            patch(f"{SERVICE}.SchoolRepository") as schools,
            patch(f"{SERVICE}.advisor_repository") as advisors,
            patch(f"{SERVICE}.student_repository") as students,
        ):
            users.create_account = AsyncMock(
                return_value=(_user(UserRole.STUDENT, sample_student.email), "654321")
            )
            schools.get_by_id = AsyncMock(return_value=sample_school)
            advisors.get_by_id = AsyncMock(return_value=sample_advisor)
            students.create = AsyncMock(return_value=sample_student)

            result = await register_student(
                mock_db,
                mock_mailer,
                settings,
                self._data(sample_school.id, sample_advisor.id),
            )

            assert students.create.call_args.kwargs["team_member_name"] is None

        assert result.role == UserRole.STUDENT
        mock_mailer.send_new_student_notice.assert_awaited_once()
        assert mock_mailer.send_new_student_notice.call_args.args[0] == sample_advisor.email


class TestRegisterJudge:
    @pytest.mark.asyncio
    async def test_judge_profile_fields_are_stored(
        self, mock_db, mock_mailer, settings, sample_judge
    ):
        sample_judge.institution = "Rutgers University"
        with (
            patch(f"{SERVICE}.user_service") as users,
            patch(f"{SERVICE}.judge_repository") as judges,
            patch(f"{SERVICE}.notify_admins_of_registration", AsyncMock(return_value=1)) as notify,
        ):
            users.create_account = AsyncMock(
                return_value=(_user(UserRole.JUDGE, sample_judge.email), "111111")
            )
            judges.create = AsyncMock(return_value=sample_judge)

            await register_judge(
                mock_db,
                mock_mailer,
                settings,
                JudgeRegistration(
                    email=sample_judge.email,
                    password="secret123",
                    first_name="Alan",
                    last_name="Park",
                    institution="Rutgers University",
                    expertise_areas=["chemistry"],
                    references=[{"name": "Dr. Gray"}],
                ),
            )

            fields = judges.create.call_args.kwargs
            assert fields["institution"] == "Rutgers University"
            assert fields["expertise_areas"] == ["chemistry"]
            assert fields["references"][0]["name"] == "Dr. Gray"
            assert "password" not in fields
            assert notify.call_args.kwargs["kind"] == "judge"
