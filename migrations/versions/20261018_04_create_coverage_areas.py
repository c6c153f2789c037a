"""create coverage areas and locations

Revision ID: 20261018_04
Revises: 20261018_03
Create Date: 2026-10-18 09:30:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018_04"
down_revision: Union[str, None] = "20261018_03"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "coverage_areas",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("professional_id", sa.Integer(), nullable=False),
        sa.Column("nationwide", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["professional_id"], ["professional_profiles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("professional_id", name="uq_coverage_areas_professional_id"),
    )
    op.create_index("ix_coverage_areas_id", "coverage_areas", ["id"], unique=False)

    op.create_table(
        "coverage_locations",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("coverage_area_id", sa.Integer(), nullable=False),
        sa.Column("location_type", sa.String(length=20), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("province", sa.String(length=100), nullable=True),
        sa.Column("district", sa.String(length=100), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["coverage_area_id"], ["coverage_areas.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("coverage_area_id", "order", name="uq_coverage_locations_area_order"),
    )
    op.create_index("ix_coverage_locations_id", "coverage_locations", ["id"], unique=False)
    op.create_index(
        "ix_coverage_locations_coverage_area_id",
        "coverage_locations",
        ["coverage_area_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_coverage_locations_coverage_area_id", table_name="coverage_locations")
    op.drop_index("ix_coverage_locations_id", table_name="coverage_locations")
    op.drop_table("coverage_locations")

    op.drop_index("ix_coverage_areas_id", table_name="coverage_areas")
    op.drop_table("coverage_areas")
