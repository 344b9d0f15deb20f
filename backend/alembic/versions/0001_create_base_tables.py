"""create admins, departments and employees tables"""
from alembic import op
import sqlalchemy as sa

revision = "0001_create_base_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "admins",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_admins"),
    )
    op.create_index("ix_admins_email", "admins", ["email"], unique=True)

    # head_of_department_id gets its FK once employees exists
    op.create_table(
        "departments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("budget", sa.Float(), nullable=False, server_default="0"),
        sa.Column("head_of_department_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_departments"),
        sa.UniqueConstraint("name", name="uq_departments_name"),
    )
    op.create_index("ix_departments_is_active", "departments", ["is_active"])

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=50), nullable=False),
        sa.Column("last_name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("job_title", sa.String(length=100), nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("supervisor_id", sa.Integer(), nullable=True),
        sa.Column("salary", sa.Float(), nullable=False),
        sa.Column("hire_date", sa.Date(), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("state", sa.String(length=100), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("address", sa.String(length=200), nullable=True),
        sa.Column("profile_image", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_employees"),
        sa.UniqueConstraint("email", name="uq_employees_email"),
        sa.ForeignKeyConstraint(
            ["department_id"], ["departments.id"], name="fk_employees_department_id_departments"
        ),
        sa.ForeignKeyConstraint(
            ["supervisor_id"], ["employees.id"], name="fk_employees_supervisor_id_employees"
        ),
    )
    op.create_index("ix_employees_name", "employees", ["first_name", "last_name"])
    op.create_index("ix_employees_job_title", "employees", ["job_title"])
    op.create_index("ix_employees_department_id", "employees", ["department_id"])
    op.create_index("ix_employees_supervisor_id", "employees", ["supervisor_id"])
    op.create_index("ix_employees_is_active", "employees", ["is_active"])

    with op.batch_alter_table("departments") as batch:
        batch.create_foreign_key(
            "fk_departments_head_of_department_id_employees",
            "employees",
            ["head_of_department_id"],
            ["id"],
        )


def downgrade() -> None:
    with op.batch_alter_table("departments") as batch:
        batch.drop_constraint("fk_departments_head_of_department_id_employees", type_="foreignkey")
    op.drop_index("ix_employees_is_active", table_name="employees")
    op.drop_index("ix_employees_supervisor_id", table_name="employees")
    op.drop_index("ix_employees_department_id", table_name="employees")
    op.drop_index("ix_employees_job_title", table_name="employees")
    op.drop_index("ix_employees_name", table_name="employees")
    op.drop_table("employees")
    op.drop_index("ix_departments_is_active", table_name="departments")
    op.drop_table("departments")
    op.drop_index("ix_admins_email", table_name="admins")
    op.drop_table("admins")
