"""Add scraped_items indexes for listing (title, collected_at desc, collected_at+source);
bound users.display_name to 256 characters.

Revision ID: 20251018000000
Revises: 20250930000000
Create Date: 2025-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20251018000000"
down_revision: Union[str, None] = "20250930000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("users") as batch_op:
        batch_op.alter_column(
            "display_name",
            existing_type=sa.Text(),
            type_=sa.String(length=256),
            existing_nullable=True,
        )
    op.create_index(
        "ix_scraped_items_collected_at_desc",
        "scraped_items",
        [sa.text("collected_at DESC")],
        unique=False,
    )
    op.create_index(
        "ix_scraped_items_collected_at_source",
        "scraped_items",
        ["collected_at", "source"],
        unique=False,
    )
    op.create_index(op.f("ix_scraped_items_title"), "scraped_items", ["title"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_scraped_items_title"), table_name="scraped_items")
    op.drop_index("ix_scraped_items_collected_at_source", table_name="scraped_items")
    op.drop_index("ix_scraped_items_collected_at_desc", table_name="scraped_items")
    with op.batch_alter_table("users") as batch_op:
        batch_op.alter_column(
            "display_name",
            existing_type=sa.String(length=256),
            type_=sa.Text(),
            existing_nullable=True,
        )
