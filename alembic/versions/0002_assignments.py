"""assignments and the session link to them

Revision ID: 0002_assignments
Revises: 0001_practice_core
Create Date: 2026-10-19 15:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0002_assignments"
down_revision: str | None = "0001_practice_core"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


assignment_status_enum = postgresql.ENUM(
    "draft",
    "published",
    "archived",
    name="assignment_status",
    create_type=False,
)


def upgrade() -> None:
    bind = op.get_bind()
    assignment_status_enum.create(bind, checkfirst=True)

    op.create_table(
        "assignments",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", assignment_status_enum, nullable=False),
        sa.Column("section_slug", sa.String(length=120), nullable=True),
        sa.Column("topics", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("difficulty", sa.String(length=16), nullable=False, server_default="all"),
        sa.Column("question_count", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("available_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("time_limit_sec", sa.Integer(), nullable=True),
        sa.Column("max_attempts", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["section_slug"], ["practice_sections.slug"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_assignments_status_due", "assignments", ["status", "due_at"])

    op.add_column("practice_sessions", sa.Column("assignment_id", sa.String(length=36), nullable=True))
    op.create_foreign_key(
        "fk_practice_sessions_assignment_id",
        "practice_sessions",
        "assignments",
        ["assignment_id"],
        ["id"],
    )
    op.create_index("ix_practice_sessions_assignment_id", "practice_sessions", ["assignment_id"])


def downgrade() -> None:
    op.drop_index("ix_practice_sessions_assignment_id", table_name="practice_sessions")
    op.drop_constraint("fk_practice_sessions_assignment_id", "practice_sessions", type_="foreignkey")
    op.drop_column("practice_sessions", "assignment_id")
    op.drop_index("ix_assignments_status_due", table_name="assignments")
    op.drop_table("assignments")

    bind = op.get_bind()
    assignment_status_enum.drop(bind, checkfirst=True)
