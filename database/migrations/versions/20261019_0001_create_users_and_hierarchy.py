"""create users and academic hierarchy

Revision ID: 20261019_0001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


user_role_enum = sa.Enum("student", "lecturer", "admin", name="user_role")
admin_type_enum = sa.Enum("super_admin", "medical_officer", "exam_admin", name="admin_type")


def upgrade() -> None:
    op.create_table(
        "faculties",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "departments",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("faculty_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_departments_faculty_id", "departments", ["faculty_id"], unique=False)
    op.create_table(
        "degree_programs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_degree_programs_department_id", "degree_programs", ["department_id"], unique=False)
    op.create_table(
        "modules",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("semester", sa.String(length=20), nullable=True),
        sa.Column("degree_program_id", sa.String(length=36), nullable=True),
        sa.Column("leader_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_modules_code", "modules", ["code"], unique=True)
    op.create_index("ix_modules_degree_program_id", "modules", ["degree_program_id"], unique=False)
    op.create_index("ix_modules_leader_id", "modules", ["leader_id"], unique=False)

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("admin_type", admin_type_enum, nullable=True),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("degree_program_id", sa.String(length=36), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_department_id", "users", ["department_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_users_department_id", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_modules_leader_id", table_name="modules")
    op.drop_index("ix_modules_degree_program_id", table_name="modules")
    op.drop_index("ix_modules_code", table_name="modules")
    op.drop_table("modules")
    op.drop_index("ix_degree_programs_department_id", table_name="degree_programs")
    op.drop_table("degree_programs")
    op.drop_index("ix_departments_faculty_id", table_name="departments")
    op.drop_table("departments")
    op.drop_table("faculties")
    admin_type_enum.drop(op.get_bind(), checkfirst=True)
    user_role_enum.drop(op.get_bind(), checkfirst=True)
