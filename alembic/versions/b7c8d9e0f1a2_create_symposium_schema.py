"""create symposium schema

Revision ID: b7c8d9e0f1a2
Revises:
Create Date: 2026-10-19 12:00:00.000000

This migration:
1. Creates the user_role, approval_status and payment_status enum types
2. Creates users and schools
3. Creates the advisor, judge and student profile tables, keyed by user ID

Embedded forms (chaperone, statement of outside assistance, photo release,
ethics questionnaire) are JSON columns.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "b7c8d9e0f1a2"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all symposium tables."""
    bind = op.get_bind()

    user_role = postgresql.ENUM(
        "advisor", "student", "judge", "director", "manager", name="user_role", create_type=False
    )
    approval_status = postgresql.ENUM(
        "pending", "approved", "rejected", name="approval_status", create_type=False
    )
    payment_status = postgresql.ENUM(
        "not_received", "received", name="payment_status", create_type=False
    )
    user_role.create(bind, checkfirst=True)
    approval_status.create(bind, checkfirst=True)
    payment_status.create(bind, checkfirst=True)

    # Users
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_code", sa.String(length=6), nullable=True),
        sa.Column("verification_code_expiry", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Schools
    op.create_table(
        "schools",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_schools_name", "schools", ["name"])

    # Advisors
    op.create_table(
        "advisors",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("title", sa.String(length=100), nullable=True),
        sa.Column("school_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("school_name", sa.String(length=200), nullable=False),
        sa.Column("approval_status", approval_status, nullable=False),
        sa.Column("chaperone", sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_advisors_school_id", "advisors", ["school_id"])

    # Judges
    op.create_table(
        "judges",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("institution", sa.String(length=200), nullable=True),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("position", sa.String(length=200), nullable=True),
        sa.Column("employment_status", sa.String(length=50), nullable=True),
        sa.Column("highest_degree", sa.String(length=100), nullable=True),
        sa.Column("expertise_areas", sa.JSON(), nullable=True),
        sa.Column("publications", sa.Text(), nullable=True),
        sa.Column("patents", sa.Text(), nullable=True),
        sa.Column("previous_judging", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("judging_experience", sa.Text(), nullable=True),
        sa.Column("conflicts_of_interest", sa.Text(), nullable=True),
        sa.Column("references", sa.JSON(), nullable=True),
        sa.Column("availability", sa.Text(), nullable=True),
        sa.Column("approval_status", approval_status, nullable=False),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Students
    op.create_table(
        "students",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("grade", sa.String(length=10), nullable=False),
        sa.Column("school_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("school_name", sa.String(length=200), nullable=False),
        sa.Column("advisor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_title", sa.String(length=300), nullable=True),
        sa.Column("project_description", sa.Text(), nullable=True),
        sa.Column("is_team_project", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("team_member_name", sa.String(length=200), nullable=True),
        sa.Column("team_member_email", sa.String(length=255), nullable=True),
        sa.Column("status", approval_status, nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("payment_status", payment_status, nullable=False),
        sa.Column("research_plan_url", sa.Text(), nullable=True),
        sa.Column("abstract_url", sa.Text(), nullable=True),
        sa.Column("slideshow_url", sa.Text(), nullable=True),
        sa.Column("presentation_url", sa.Text(), nullable=True),
        sa.Column("research_report_url", sa.Text(), nullable=True),
        sa.Column("statement_of_outside_assistance", sa.JSON(), nullable=True),
        sa.Column("photo_release", sa.JSON(), nullable=True),
        sa.Column("ethics_questionnaire", sa.JSON(), nullable=True),
        sa.Column(
            "src_approval_requested", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("src_approval_requested_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("src_approved", sa.Boolean(), nullable=True),
        sa.Column("src_notes", sa.Text(), nullable=True),
        sa.Column("src_reviewed_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("src_reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["advisor_id"], ["advisors.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_students_school_id", "students", ["school_id"])
    op.create_index("ix_students_advisor_id", "students", ["advisor_id"])
    op.create_index("ix_students_status", "students", ["status"])


def downgrade() -> None:
    """Drop all symposium tables and enum types."""
    op.drop_index("ix_students_status", table_name="students")
    op.drop_index("ix_students_advisor_id", table_name="students")
    op.drop_index("ix_students_school_id", table_name="students")
    op.drop_table("students")
    op.drop_table("judges")
    op.drop_index("ix_advisors_school_id", table_name="advisors")
    op.drop_table("advisors")
    op.drop_index("ix_schools_name", table_name="schools")
    op.drop_table("schools")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    postgresql.ENUM(name="payment_status").drop(bind, checkfirst=True)
    postgresql.ENUM(name="approval_status").drop(bind, checkfirst=True)
    postgresql.ENUM(name="user_role").drop(bind, checkfirst=True)
