"""create notices, enrollments and notification states

Revision ID: 20261019_0003
Revises: 20261019_0002
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0003"
down_revision = "20261019_0002"
branch_labels = None
depends_on = None


enrollment_status = sa.Enum("active", "dropped", "completed", name="enrollment_status")


def upgrade() -> None:
    op.create_table(
        "notices",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("module_id", sa.String(length=36), nullable=False),
        sa.Column("module_code", sa.String(length=50), nullable=False),
        sa.Column("author_id", sa.String(length=36), nullable=False),
        sa.Column("author_name", sa.String(length=200), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_notices_module_id", "notices", ["module_id"], unique=False)
    op.create_index("ix_notices_created_at", "notices", ["created_at"], unique=False)

    op.create_table(
        "enrollments",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=False),
        sa.Column("module_id", sa.String(length=36), nullable=False),
        sa.Column("status", enrollment_status, nullable=False, server_default="active"),
        sa.Column("enrolled_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("student_id", "module_id", name="uq_enrollments_student_module"),
    )
    op.create_index("ix_enrollments_student_id", "enrollments", ["student_id"], unique=False)
    op.create_index("ix_enrollments_module_id", "enrollments", ["module_id"], unique=False)

    op.create_table(
        "notification_states",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("dismissed_ids", sa.JSON(), nullable=False),
        sa.Column("read_ids", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_index("ix_notification_states_user_id", "notification_states", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_notification_states_user_id", table_name="notification_states")
    op.drop_table("notification_states")
    op.drop_index("ix_enrollments_module_id", table_name="enrollments")
    op.drop_index("ix_enrollments_student_id", table_name="enrollments")
    op.drop_table("enrollments")
    enrollment_status.drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_notices_created_at", table_name="notices")
    op.drop_index("ix_notices_module_id", table_name="notices")
    op.drop_table("notices")
