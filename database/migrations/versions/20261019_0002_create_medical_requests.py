"""create medical requests

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


medical_status = sa.Enum(
    "pending",
    "approved_by_officer",
    "rejected",
    "forwarded_to_dept",
    "approved_by_dept",
    name="medical_status",
)


def upgrade() -> None:
    op.create_table(
        "medical_requests",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=False),
        sa.Column("status", medical_status, nullable=False, server_default="pending"),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("certificate_url", sa.String(length=1000), nullable=True),
        sa.Column("officer_comments", sa.Text(), nullable=True),
        sa.Column("officer_id", sa.String(length=36), nullable=True),
        sa.Column("forwarded_to_id", sa.String(length=36), nullable=True),
        sa.Column("forwarded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_comments", sa.Text(), nullable=True),
        sa.Column("reviewer_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_medical_requests_student_id", "medical_requests", ["student_id"], unique=False)
    op.create_index("ix_medical_requests_status", "medical_requests", ["status"], unique=False)
    op.create_index("ix_medical_requests_forwarded_to_id", "medical_requests", ["forwarded_to_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_medical_requests_forwarded_to_id", table_name="medical_requests")
    op.drop_index("ix_medical_requests_status", table_name="medical_requests")
    op.drop_index("ix_medical_requests_student_id", table_name="medical_requests")
    op.drop_table("medical_requests")
    medical_status.drop(op.get_bind(), checkfirst=True)
