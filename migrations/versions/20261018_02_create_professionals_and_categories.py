"""create professional profiles and service categories

Revision ID: 20261018_02
Revises: 20261018_01
Create Date: 2026-10-18 09:10:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018_02"
down_revision: Union[str, None] = "20261018_01"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SEED_CATEGORIES = [
    ("Plumbing", "Installation and repair of water and drainage systems"),
    ("Electrical", "Wiring, lighting and electrical repairs"),
    ("Carpentry", "Furniture, doors and woodwork"),
    ("Painting", "Interior and exterior painting"),
    ("Cleaning", "Home and office cleaning"),
    ("Gardening", "Garden design and maintenance"),
    ("Masonry", "Construction, walls and finishes"),
    ("Appliance Repair", "Repair of household appliances"),
]


def upgrade() -> None:
    op.create_table(
        "professional_profiles",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("display_name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", name="uq_professional_profiles_user_id"),
    )
    op.create_index("ix_professional_profiles_id", "professional_profiles", ["id"], unique=False)

    categories = op.create_table(
        "service_categories",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("name", name="uq_service_categories_name"),
    )
    op.create_index("ix_service_categories_id", "service_categories", ["id"], unique=False)
    op.bulk_insert(
        categories,
        [{"name": name, "description": description} for name, description in SEED_CATEGORIES],
    )


def downgrade() -> None:
    op.drop_index("ix_service_categories_id", table_name="service_categories")
    op.drop_table("service_categories")

    op.drop_index("ix_professional_profiles_id", table_name="professional_profiles")
    op.drop_table("professional_profiles")
