"""practice sections, sessions, question instances and attempts

Revision ID: 0001_practice_core
Revises:
Create Date: 2026-10-19 09:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_practice_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


session_status_enum = postgresql.ENUM(
    "active",
    "completed",
    name="practice_session_status",
    create_type=False,
)
kind_enum = postgresql.ENUM(
    "numeric",
    "single_choice",
    "multi_choice",
    "vector_drag_target",
    "vector_drag_dot",
    "matrix_input",
    name="practice_kind",
    create_type=False,
)
difficulty_enum = postgresql.ENUM(
    "easy",
    "medium",
    "hard",
    name="practice_difficulty",
    create_type=False,
)


def upgrade() -> None:
    bind = op.get_bind()
    session_status_enum.create(bind, checkfirst=True)
    kind_enum.create(bind, checkfirst=True)
    difficulty_enum.create(bind, checkfirst=True)

    op.create_table(
        "practice_sections",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("topics", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "practice_sessions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("section_slug", sa.String(length=120), nullable=True),
        sa.Column("difficulty", sa.String(length=16), nullable=False),
        sa.Column("target_count", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("total", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("correct", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", session_status_enum, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=True),
        sa.Column("guest_id", sa.String(length=64), nullable=True),
        sa.Column("last_instance_id", sa.String(length=36), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["section_slug"], ["practice_sections.slug"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_practice_sessions_user_started", "practice_sessions", ["user_id", "started_at"])
    op.create_index("ix_practice_sessions_guest_started", "practice_sessions", ["guest_id", "started_at"])

    op.create_table(
        "practice_question_instances",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("session_id", sa.String(length=36), nullable=True),
        sa.Column("exercise_id", sa.String(length=80), nullable=False),
        sa.Column("gen_key", sa.String(length=40), nullable=False),
        sa.Column("topic", sa.String(length=120), nullable=False),
        sa.Column("kind", kind_enum, nullable=False),
        sa.Column("difficulty", difficulty_enum, nullable=False),
        sa.Column("archetype", sa.String(length=64), nullable=False),
        sa.Column("seed", sa.String(length=128), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("public_payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("secret_payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("answered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["session_id"], ["practice_sessions.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_practice_question_instances_session_id",
        "practice_question_instances",
        ["session_id"],
    )

    op.create_table(
        "practice_attempts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("session_id", sa.String(length=36), nullable=True),
        sa.Column("instance_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=True),
        sa.Column("guest_id", sa.String(length=64), nullable=True),
        sa.Column("answer_payload", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("ok", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("reveal_used", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["session_id"], ["practice_sessions.id"]),
        sa.ForeignKeyConstraint(["instance_id"], ["practice_question_instances.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_practice_attempts_instance_id", "practice_attempts", ["instance_id"])
    op.create_index("ix_practice_attempts_session_created", "practice_attempts", ["session_id", "created_at"])
    op.create_index("ix_practice_attempts_user_created", "practice_attempts", ["user_id", "created_at"])
    op.create_index("ix_practice_attempts_guest_created", "practice_attempts", ["guest_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_practice_attempts_guest_created", table_name="practice_attempts")
    op.drop_index("ix_practice_attempts_user_created", table_name="practice_attempts")
    op.drop_index("ix_practice_attempts_session_created", table_name="practice_attempts")
    op.drop_index("ix_practice_attempts_instance_id", table_name="practice_attempts")
    op.drop_table("practice_attempts")
    op.drop_index("ix_practice_question_instances_session_id", table_name="practice_question_instances")
    op.drop_table("practice_question_instances")
    op.drop_index("ix_practice_sessions_guest_started", table_name="practice_sessions")
    op.drop_index("ix_practice_sessions_user_started", table_name="practice_sessions")
    op.drop_table("practice_sessions")
    op.drop_table("practice_sections")

    bind = op.get_bind()
    difficulty_enum.drop(bind, checkfirst=True)
    kind_enum.drop(bind, checkfirst=True)
    session_status_enum.drop(bind, checkfirst=True)
