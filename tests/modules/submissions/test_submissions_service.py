"""
Unit tests for artifact uploads and research plan replacement.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from symposium.core.errors import ValidationFailedError
from symposium.core.events import EventDispatcher
from symposium.core.storage import FileStorage
from symposium.modules.invitations.forms import (
    StatementForm,
    StatementSigner,
    sign_statement_as_party,
    sign_statement_as_student,
)
from symposium.modules.submissions.artifacts import MB, Artifact, file_extension
from symposium.modules.submissions.events import (
    PlanReplaced,
    clear_statement_on_plan_replaced,
    register_handlers,
)
from symposium.modules.submissions.service import (
    ConfirmationRequiredError,
    FileTooLargeError,
    upload_artifact,
    validate_upload,
)

STUDENTS = "symposium.modules.students.service.repository"
SUBMISSIONS = "symposium.modules.submissions.service.student_repository"
EVENTS = "symposium.modules.submissions.events.student_repository"


@pytest.fixture
def mock_storage():
    storage = MagicMock(spec=FileStorage)

    async def save(student_id, name, content):
        return f"http://localhost:8000/uploads/students/{student_id}/{name}"

    storage.save = AsyncMock(side_effect=save)
    return storage


@pytest.fixture
def signed_statement():
    now = datetime.now(UTC)
    form = StatementForm()
    form.teacher.email = "t@example.com"
    form.teacher.invite_token = "keep-me"
    form = sign_statement_as_student(form, "Maya Chen", now)
    form = sign_statement_as_party(form, StatementSigner.TEACHER, signature="T", now=now)
    return form.dump()


class TestValidateUpload:
    """Tests for validate_upload."""

    def test_accepts_allowed_extension(self):
        assert validate_upload(Artifact.RESEARCH_PLAN, "Plan.DOCX", 1024) == "docx"

    def test_rejects_wrong_extension(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate_upload(Artifact.RESEARCH_REPORT, "report.docx", 1024)
        assert exc_info.value.error_code == "INVALID_FILE_TYPE"

    def test_rejects_missing_extension(self):
        with pytest.raises(ValidationFailedError):
            validate_upload(Artifact.ABSTRACT, "abstract", 1024)

    def test_rejects_empty_file(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate_upload(Artifact.ABSTRACT, "abstract.pdf", 0)
        assert exc_info.value.error_code == "EMPTY_FILE"

    def test_size_ceiling(self):
        validate_upload(Artifact.ABSTRACT, "abstract.pdf", 5 * MB)
        with pytest.raises(FileTooLargeError) as exc_info:
            validate_upload(Artifact.ABSTRACT, "abstract.pdf", 5 * MB + 1)
        assert exc_info.value.status_code == 413

    def test_slideshow_only_pptx(self):
        assert validate_upload(Artifact.SLIDESHOW, "talk.pptx", 10) == "pptx"
        with pytest.raises(ValidationFailedError):
            validate_upload(Artifact.SLIDESHOW, "talk.ppt", 10)

    def test_file_extension_helper(self):
        assert file_extension(None) == ""
        assert file_extension("a.b.PDF") == "pdf"


class TestUploadArtifact:
    """Tests for upload_artifact."""

    @pytest.mark.asyncio
    async def test_first_upload_records_url(
        self, mock_db, mock_storage, sample_student, apply_update
    ):
        events = EventDispatcher()
        with (
            patch(STUDENTS) as students_repo,
            patch(SUBMISSIONS) as repo,
        ):
            students_repo.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock(side_effect=apply_update)

            result = await upload_artifact(
                mock_db,
                mock_storage,
                events,
                sample_student.id,
                Artifact.ABSTRACT,
                "abstract.pdf",
                b"%PDF-1.4",
            )

        assert result.url.endswith(f"students/{sample_student.id}/abstract.pdf")
        assert result.size_bytes == 8
        assert result.signatures_cleared is False
        assert sample_student.abstract_url == result.url
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_file_never_reaches_storage(self, mock_db, mock_storage):
        with pytest.raises(ValidationFailedError):
            await upload_artifact(
                mock_db,
                mock_storage,
                EventDispatcher(),
                None,
                Artifact.RESEARCH_PLAN,
                "plan.exe",
                b"data",
            )
        mock_storage.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_replacing_signed_plan_needs_confirmation(
        self, mock_db, mock_storage, sample_student, signed_statement
    ):
        sample_student.research_plan_url = "http://localhost:8000/uploads/old.pdf"
        sample_student.statement_of_outside_assistance = signed_statement

        with patch(STUDENTS) as students_repo:
            students_repo.get_by_id = AsyncMock(return_value=sample_student)

            with pytest.raises(ConfirmationRequiredError) as exc_info:
                await upload_artifact(
                    mock_db,
                    mock_storage,
                    EventDispatcher(),
                    sample_student.id,
                    Artifact.RESEARCH_PLAN,
                    "plan.pdf",
                    b"new plan",
                )

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == "CONFIRMATION_REQUIRED"
        mock_storage.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_confirmed_replacement_clears_signatures(
        self, mock_db, mock_storage, sample_student, signed_statement, apply_update
    ):
        sample_student.research_plan_url = "http://localhost:8000/uploads/old.pdf"
        sample_student.statement_of_outside_assistance = signed_statement
        events = EventDispatcher()
        register_handlers(events)

        with (
            patch(STUDENTS) as students_repo,
            patch(SUBMISSIONS) as repo,
            patch(EVENTS) as events_repo,
        ):
            students_repo.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock(side_effect=apply_update)
            events_repo.get_by_id = AsyncMock(return_value=sample_student)
            events_repo.update = AsyncMock(side_effect=apply_update)

            result = await upload_artifact(
                mock_db,
                mock_storage,
                events,
                sample_student.id,
                Artifact.RESEARCH_PLAN,
                "plan.pdf",
                b"new plan",
                confirm_replace=True,
            )

            events_repo.update.assert_called_once()
            assert repo.update.call_args.kwargs["commit"] is False
            assert events_repo.update.call_args.kwargs["commit"] is False

        mock_db.commit.assert_awaited_once()

        assert result.signatures_cleared is True
        form = StatementForm.load(sample_student.statement_of_outside_assistance)
        assert form.student_completed is False
        assert form.teacher.completed is False
        assert form.teacher.signature is None
        assert form.form_completed is False
        assert form.teacher.invite_token == "keep-me"

    @pytest.mark.asyncio
    async def test_failed_handler_commits_nothing(
        self, mock_db, mock_storage, sample_student, signed_statement, apply_update
    ):
        """A new plan is never committed alongside the old signatures."""
        sample_student.research_plan_url = "http://localhost:8000/uploads/old.pdf"
        sample_student.statement_of_outside_assistance = signed_statement
        events = EventDispatcher()

        async def failing_handler(event, db):
            raise RuntimeError("handler failed")

        events.subscribe(PlanReplaced, failing_handler)

        with (
            patch(STUDENTS) as students_repo,
            patch(SUBMISSIONS) as repo,
        ):
            students_repo.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock(side_effect=apply_update)

            with pytest.raises(RuntimeError):
                await upload_artifact(
                    mock_db,
                    mock_storage,
                    events,
                    sample_student.id,
                    Artifact.RESEARCH_PLAN,
                    "plan.pdf",
                    b"new plan",
                    confirm_replace=True,
                )

            assert repo.update.call_args.kwargs["commit"] is False

        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_replacing_unsigned_plan_publishes_nothing(
        self, mock_db, mock_storage, sample_student, apply_update
    ):
        sample_student.research_plan_url = "http://localhost:8000/uploads/old.pdf"
        events = MagicMock(spec=EventDispatcher)
        events.publish = AsyncMock()

        with (
            patch(STUDENTS) as students_repo,
            patch(SUBMISSIONS) as repo,
        ):
            students_repo.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock(side_effect=apply_update)

            result = await upload_artifact(
                mock_db,
                mock_storage,
                events,
                sample_student.id,
                Artifact.RESEARCH_PLAN,
                "plan.pdf",
                b"new plan",
            )

        assert result.signatures_cleared is False
        events.publish.assert_not_called()


class TestPlanReplacedHandler:
    @pytest.mark.asyncio
    async def test_unknown_student_is_ignored(self, mock_db):
        event = PlanReplaced(
            student_id=None, previous_url=None, new_url="u", replaced_at=datetime.now(UTC)
        )
        with patch(EVENTS) as repo:
            repo.get_by_id = AsyncMock(return_value=None)
            repo.update = AsyncMock()

            await clear_statement_on_plan_replaced(event, mock_db)

            repo.update.assert_not_called()

    def test_register_handlers(self):
        events = EventDispatcher()
        register_handlers(events)
        register_handlers(events)
        assert events.handlers_for(PlanReplaced) == [clear_statement_on_plan_replaced]
