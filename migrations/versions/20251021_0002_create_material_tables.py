"""Create materials and flashcard tables with spaced-repetition state."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20251021_0002"
down_revision: Union[str, None] = "20251020_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "materials",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("topic", sa.String(length=255), nullable=False),
        sa.Column("estimated_read_minutes", sa.Integer(), nullable=True),
        sa.Column("last_studied_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ("user_id",),
            ("users.id",),
            name="fk_materials_user_id_users",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_materials_user_id_subject_topic",
        "materials",
        ("user_id", "subject", "topic"),
    )

    op.create_table(
        "flashcards",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("material_id", sa.Integer(), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("repetitions", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("interval_days", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column("ease_factor", sa.Float(), server_default=sa.text("2.5"), nullable=False),
        sa.Column("next_review_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_quality", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ("material_id",),
            ("materials.id",),
            name="fk_flashcards_material_id_materials",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_flashcards_material_id_next_review_at",
        "flashcards",
        ("material_id", "next_review_at"),
    )

    op.create_table(
        "flashcard_reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("flashcard_id", sa.Integer(), nullable=False),
        sa.Column("quality", sa.Integer(), nullable=False),
        sa.Column(
            "reviewed_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ("flashcard_id",),
            ("flashcards.id",),
            name="fk_flashcard_reviews_flashcard_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_flashcard_reviews_flashcard_id",
        "flashcard_reviews",
        ("flashcard_id",),
    )


def downgrade() -> None:
    op.drop_index("ix_flashcard_reviews_flashcard_id", table_name="flashcard_reviews")
    op.drop_table("flashcard_reviews")
    op.drop_index("ix_flashcards_material_id_next_review_at", table_name="flashcards")
    op.drop_table("flashcards")
    op.drop_index("ix_materials_user_id_subject_topic", table_name="materials")
    op.drop_table("materials")
