"""
Student Schemas

Pydantic schemas for the student dashboard, the advisor's and admin's student
lists, and student-side form edits.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from symposium.modules.approvals import ApprovalStatus
from symposium.modules.invitations.forms import (
    PhotoReleaseForm,
    PhotoReleaseParty,
    StatementForm,
    StatementParty,
)
from symposium.modules.students.models import PaymentStatus, Student


class MaterialsView(BaseModel):
    research_plan_url: str | None = None
    abstract_url: str | None = None
    slideshow_url: str | None = None
    presentation_url: str | None = None
    research_report_url: str | None = None


class PartyStatus(BaseModel):
    """Invitation state of one signer, without the token."""

    email: str | None = None
    invite_sent: bool = False
    invite_sent_at: datetime | None = None
    signature: str | None = None
    signature_date: datetime | None = None
    completed: bool = False

    @classmethod
    def from_party(cls, party: StatementParty | PhotoReleaseParty) -> "PartyStatus":
        return cls(
            email=party.email,
            invite_sent=party.invite_sent,
            invite_sent_at=party.invite_sent_at,
            signature=party.signature,
            signature_date=party.signature_date,
            completed=getattr(party, "completed", bool(party.signature)),
        )


class StatementView(BaseModel):
    student_first_name: str | None = None
    student_last_name: str | None = None
    school: str | None = None
    research_report_title: str | None = None
    partner_first_name: str | None = None
    partner_last_name: str | None = None
    research_location: str | None = None
    assistance_description: str | None = None
    student_signature: str | None = None
    student_signature_date: datetime | None = None
    student_completed: bool = False
    teacher: PartyStatus
    mentor: PartyStatus
    parent: PartyStatus
    teacher_comments: str | None = None
    mentor_comments: str | None = None
    form_completed: bool = False

    @classmethod
    def from_form(cls, form: StatementForm) -> "StatementView":
        return cls(
            **form.model_dump(
                include={
                    "student_first_name",
                    "student_last_name",
                    "school",
                    "research_report_title",
                    "partner_first_name",
                    "partner_last_name",
                    "research_location",
                    "assistance_description",
                    "student_signature",
                    "student_signature_date",
                    "student_completed",
                    "form_completed",
                }
            ),
            teacher=PartyStatus.from_party(form.teacher),
            mentor=PartyStatus.from_party(form.mentor),
            parent=PartyStatus.from_party(form.parent),
            teacher_comments=form.teacher.comments,
            mentor_comments=form.mentor.comments,
        )


class PhotoReleaseView(BaseModel):
    parent: PartyStatus
    team_member_parent: PartyStatus
    completed: bool = False

    @classmethod
    def from_form(cls, form: PhotoReleaseForm) -> "PhotoReleaseView":
        return cls(
            parent=PartyStatus.from_party(form.parent),
            team_member_parent=PartyStatus.from_party(form.team_member_parent),
            completed=form.completed,
        )


class StudentSummary(BaseModel):
    """Row in the advisor and admin student lists."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    grade: str
    school_id: UUID
    school_name: str
    advisor_id: UUID
    project_title: str | None = None
    status: ApprovalStatus
    approved_at: datetime | None = None
    payment_status: PaymentStatus
    src_approval_requested: bool = False
    src_approved: bool | None = None
    statement_completed: bool = False
    photo_release_completed: bool = False
    created_at: datetime

    @classmethod
    def from_student(cls, student: Student) -> "StudentSummary":
        summary = cls.model_validate(student)
        summary.statement_completed = StatementForm.load(
            student.statement_of_outside_assistance
        ).form_completed
        summary.photo_release_completed = PhotoReleaseForm.load(student.photo_release).completed
        return summary


class StudentDetail(StudentSummary):
    """The student's own dashboard view."""

    project_description: str | None = None
    is_team_project: bool = False
    team_member_name: str | None = None
    team_member_email: str | None = None
    materials: MaterialsView
    statement_of_outside_assistance: StatementView
    photo_release: PhotoReleaseView
    ethics_questionnaire: dict | None = None
    src_approval_requested_at: datetime | None = None

    @classmethod
    def from_student(cls, student: Student) -> "StudentDetail":
        statement = StatementForm.load(student.statement_of_outside_assistance)
        photo_release = PhotoReleaseForm.load(student.photo_release)
        base = StudentSummary.model_validate(student).model_dump(
            exclude={"statement_completed", "photo_release_completed"}
        )
        return cls(
            **base,
            statement_completed=statement.form_completed,
            photo_release_completed=photo_release.completed,
            project_description=student.project_description,
            is_team_project=student.is_team_project,
            team_member_name=student.team_member_name,
            team_member_email=student.team_member_email,
            materials=MaterialsView(
                research_plan_url=student.research_plan_url,
                abstract_url=student.abstract_url,
                slideshow_url=student.slideshow_url,
                presentation_url=student.presentation_url,
                research_report_url=student.research_report_url,
            ),
            statement_of_outside_assistance=StatementView.from_form(statement),
            photo_release=PhotoReleaseView.from_form(photo_release),
            ethics_questionnaire=student.ethics_questionnaire,
            src_approval_requested_at=student.src_approval_requested_at,
        )


class ProjectUpdate(BaseModel):
    """PATCH /students/me/project. Only provided fields change."""

    project_title: str | None = Field(None, max_length=300)
    project_description: str | None = Field(None, max_length=5000)
    is_team_project: bool | None = None
    team_member_name: str | None = Field(None, max_length=200)
    team_member_email: str | None = Field(None, max_length=255)


class StatementStudentSections(BaseModel):
    """PUT /students/me/statement. The student-owned parts of the statement."""

    student_first_name: str | None = Field(None, max_length=100)
    student_last_name: str | None = Field(None, max_length=100)
    school: str | None = Field(None, max_length=200)
    research_report_title: str | None = Field(None, max_length=300)
    partner_first_name: str | None = Field(None, max_length=100)
    partner_last_name: str | None = Field(None, max_length=100)
    research_location: str | None = Field(None, max_length=500)
    assistance_description: str | None = Field(None, max_length=10000)


class SignatureRequest(BaseModel):
    signature: str = Field(..., min_length=1, max_length=200)


class EthicsQuestionnaire(BaseModel):
    """Special review committee screening questions."""

    involves_human_participants: bool = False
    human_participants_details: str | None = Field(None, max_length=5000)
    irb_approval_obtained: bool = False
    irb_approval_details: str | None = Field(None, max_length=5000)
    informed_consent_obtained: bool = False

    involves_vertebrate_animals: bool = False
    vertebrate_animals_details: str | None = Field(None, max_length=5000)
    animal_care_protocol: str | None = Field(None, max_length=5000)
    veterinary_oversight: bool = False

    involves_phba: bool = False
    phba_details: str | None = Field(None, max_length=5000)
    biosafety_level: str | None = Field(None, max_length=20)
    phba_location: str | None = Field(None, max_length=500)

    involves_hazardous_materials: bool = False
    hazardous_materials_details: str | None = Field(None, max_length=5000)
    safety_protocols: str | None = Field(None, max_length=5000)

    is_continuation_project: bool = False
    continuation_project_details: str | None = Field(None, max_length=5000)

    def requires_src_review(self) -> bool:
        return (
            self.involves_human_participants
            or self.involves_vertebrate_animals
            or self.involves_phba
            or self.involves_hazardous_materials
            or self.is_continuation_project
        )


class SRCRequestResponse(BaseModel):
    student_id: UUID
    src_approval_requested: bool
    src_approval_requested_at: datetime | None = None
