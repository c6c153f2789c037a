"""create availability schedules and days

Revision ID: 20261018_05
Revises: 20261018_04
Create Date: 2026-10-18 09:40:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018_05"
down_revision: Union[str, None] = "20261018_04"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "availability_schedules",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("professional_id", sa.Integer(), nullable=False),
        sa.Column("always_available", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["professional_id"], ["professional_profiles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("professional_id", name="uq_availability_schedules_professional_id"),
    )
    op.create_index("ix_availability_schedules_id", "availability_schedules", ["id"], unique=False)

    op.create_table(
        "availability_days",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("schedule_id", sa.Integer(), nullable=False),
        sa.Column("weekday", sa.String(length=10), nullable=False),
        sa.Column("shift_type", sa.String(length=10), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["schedule_id"], ["availability_schedules.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("schedule_id", "weekday", name="uq_availability_days_schedule_weekday"),
        sa.UniqueConstraint("schedule_id", "order", name="uq_availability_days_schedule_order"),
        sa.CheckConstraint("shift_type IN ('8hrs', '24hrs')", name="ck_availability_days_shift_type"),
    )
    op.create_index("ix_availability_days_id", "availability_days", ["id"], unique=False)
    op.create_index("ix_availability_days_schedule_id", "availability_days", ["schedule_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_availability_days_schedule_id", table_name="availability_days")
    op.drop_index("ix_availability_days_id", table_name="availability_days")
    op.drop_table("availability_days")

    op.drop_index("ix_availability_schedules_id", table_name="availability_schedules")
    op.drop_table("availability_schedules")
