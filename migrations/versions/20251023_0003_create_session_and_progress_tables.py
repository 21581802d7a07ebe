"""Create study session and daily progress tables."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20251023_0003"
down_revision: Union[str, None] = "20251021_0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "study_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("material_id", sa.Integer(), nullable=True),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("topic", sa.String(length=255), nullable=False),
        sa.Column("session_type", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=32), server_default=sa.text("'scheduled'"), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("scheduled_minutes", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actual_minutes", sa.Integer(), nullable=True),
        sa.Column("productivity", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("repetitions", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("interval_days", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column("ease_factor", sa.Float(), server_default=sa.text("2.5"), nullable=False),
        sa.Column("next_review_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ("user_id",),
            ("users.id",),
            name="fk_study_sessions_user_id_users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ("material_id",),
            ("materials.id",),
            name="fk_study_sessions_material_id_materials",
            ondelete="SET NULL",
        ),
    )
    op.create_index(
        "ix_study_sessions_user_id_scheduled_at_status",
        "study_sessions",
        ("user_id", "scheduled_at", "status"),
    )

    op.create_table(
        "progress_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("topic", sa.String(length=255), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("study_minutes", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("sessions_completed", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("quizzes_taken", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("quiz_accuracy", sa.Float(), nullable=True),
        sa.Column("flashcards_reviewed", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("materials_studied", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.ForeignKeyConstraint(
            ("user_id",),
            ("users.id",),
            name="fk_progress_entries_user_id_users",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("user_id", "subject", "topic", "day", name="uq_progress_entries_user_topic_day"),
    )


def downgrade() -> None:
    op.drop_table("progress_entries")
    op.drop_index("ix_study_sessions_user_id_scheduled_at_status", table_name="study_sessions")
    op.drop_table("study_sessions")
