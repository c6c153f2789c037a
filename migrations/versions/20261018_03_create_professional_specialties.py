"""create professional specialties

Revision ID: 20261018_03
Revises: 20261018_02
Create Date: 2026-10-18 09:20:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018_03"
down_revision: Union[str, None] = "20261018_02"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "professional_specialties",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("professional_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("service_name", sa.String(length=150), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("includes_materials", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("cost", sa.Numeric(10, 2), nullable=False),
        sa.Column("cost_type", sa.String(length=10), nullable=False),
        sa.Column("is_principal", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("order", sa.Integer(), nullable=True),
        sa.Column("work_mode_remote", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("work_mode_onsite", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["professional_id"], ["professional_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["service_categories.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("professional_id", "order", name="uq_specialties_professional_order"),
        sa.CheckConstraint("cost >= 0", name="ck_specialties_cost_non_negative"),
        sa.CheckConstraint("cost_type IN ('hour', 'day', 'month')", name="ck_specialties_cost_type"),
        sa.CheckConstraint("work_mode_remote OR work_mode_onsite", name="ck_specialties_work_mode"),
    )
    op.create_index("ix_professional_specialties_id", "professional_specialties", ["id"], unique=False)
    op.create_index(
        "ix_professional_specialties_professional_id",
        "professional_specialties",
        ["professional_id"],
        unique=False,
    )
    op.create_index(
        "ix_professional_specialties_category_id",
        "professional_specialties",
        ["category_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_professional_specialties_category_id", table_name="professional_specialties")
    op.drop_index("ix_professional_specialties_professional_id", table_name="professional_specialties")
    op.drop_index("ix_professional_specialties_id", table_name="professional_specialties")
    op.drop_table("professional_specialties")
