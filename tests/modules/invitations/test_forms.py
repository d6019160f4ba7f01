"""
Unit tests for the embedded sign-off forms and their completion rules.
"""

from datetime import UTC, datetime

from symposium.modules.invitations.forms import (
    ChaperoneRecord,
    PhotoReleaseForm,
    PhotoReleaseSigner,
    StatementForm,
    StatementSigner,
    clear_statement_signatures,
    confirm_chaperone,
    photo_release_completed,
    sign_photo_release,
    sign_statement_as_party,
    sign_statement_as_student,
    statement_completed,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


class TestStatementForm:
    """Tests for the statement of outside assistance."""

    def test_load_none_gives_empty_form(self):
        form = StatementForm.load(None)
        assert form.form_completed is False
        assert form.teacher.completed is False
        assert form.has_any_signature() is False

    def test_load_ignores_unknown_keys(self):
        form = StatementForm.load({"school": "Hightstown", "legacy_field": 1})
        assert form.school == "Hightstown"

    def test_dump_is_json_safe(self):
        form = sign_statement_as_student(StatementForm(), "Maya Chen", NOW)
        data = form.dump()
        assert data["student_signature_date"] == NOW.isoformat().replace("+00:00", "Z")
        assert data["teacher"]["completed"] is False

    def test_student_alone_does_not_complete(self):
        form = sign_statement_as_student(StatementForm(), "Maya Chen", NOW)
        assert form.student_completed is True
        assert form.form_completed is False

    def test_party_alone_does_not_complete(self):
        form = sign_statement_as_party(
            StatementForm(), StatementSigner.PARENT, signature="Li Chen", now=NOW
        )
        assert form.parent.completed is True
        assert form.form_completed is False

    def test_student_and_one_party_completes(self):
        form = sign_statement_as_student(StatementForm(), "Maya Chen", NOW)
        form = sign_statement_as_party(
            form,
            StatementSigner.TEACHER,
            signature="Dr. Smith",
            now=NOW,
            first_name="Jane",
            last_name="Smith",
            institution="Hightstown High School",
        )
        assert form.form_completed is True
        assert statement_completed(form) is True
        assert form.teacher.signature == "Dr. Smith"
        assert form.teacher.signature_date == NOW
        assert form.teacher.institution == "Hightstown High School"

    def test_party_signature_is_trimmed(self):
        form = sign_statement_as_party(
            StatementForm(), StatementSigner.MENTOR, signature="  Dr. Ruiz  ", now=NOW
        )
        assert form.mentor.signature == "Dr. Ruiz"

    def test_clear_signatures_keeps_invitations(self):
        form = StatementForm()
        form.teacher.email = "teacher@example.com"
        form.teacher.invite_token = "tok"
        form.teacher.invite_sent = True
        form = sign_statement_as_student(form, "Maya Chen", NOW)
        form = sign_statement_as_party(form, StatementSigner.TEACHER, signature="T", now=NOW)
        assert form.form_completed is True

        form = clear_statement_signatures(form)

        assert form.student_completed is False
        assert form.student_signature is None
        assert form.teacher.completed is False
        assert form.teacher.signature is None
        assert form.form_completed is False
        assert form.has_any_signature() is False
        assert form.teacher.invite_token == "tok"
        assert form.teacher.email == "teacher@example.com"
        assert form.teacher.invite_sent is True


class TestPhotoReleaseForm:
    """Tests for the photo release."""

    def test_parent_signature_completes_solo_release(self):
        form = sign_photo_release(
            PhotoReleaseForm(), PhotoReleaseSigner.PARENT, signature="Li Chen", now=NOW
        )
        assert form.completed is True

    def test_invited_team_member_parent_must_sign(self):
        form = PhotoReleaseForm()
        form.team_member_parent.email = "partner.parent@example.com"
        form = sign_photo_release(form, PhotoReleaseSigner.PARENT, signature="Li Chen", now=NOW)
        assert form.completed is False

        form = sign_photo_release(
            form, PhotoReleaseSigner.TEAM_MEMBER_PARENT, signature="Sam Ortiz", now=NOW
        )
        assert form.completed is True
        assert photo_release_completed(form) is True

    def test_team_member_parent_alone_does_not_complete(self):
        form = sign_photo_release(
            PhotoReleaseForm(), PhotoReleaseSigner.TEAM_MEMBER_PARENT, signature="S", now=NOW
        )
        assert form.completed is False


class TestChaperoneRecord:
    def test_confirm(self):
        record = confirm_chaperone(ChaperoneRecord(name="Pat Kim"), " Pat Kim ", NOW)
        assert record.confirmed is True
        assert record.signature == "Pat Kim"
        assert record.confirmation_date == NOW
