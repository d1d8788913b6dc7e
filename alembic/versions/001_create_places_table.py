"""Create places table

Revision ID: 001
Revises: None
Create Date: 2026-10-16 00:00:00.000000+00:00

What:  Creates the `places` table holding food-place suggestions.
Rollback: downgrade() drops the table (all suggestions are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "places",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("budget", sa.Integer(), nullable=False),
        sa.Column("location", sa.Text(), nullable=False),
        sa.Column("mood", sa.Text(), nullable=False),
        sa.Column("cuisine", sa.Text(), nullable=False),
        sa.Column("mealtime", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        # New suggestions start in the requested state
        sa.Column(
            "approved",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Serves both moderation listings: WHERE approved = ? ORDER BY id
    op.create_index("idx_places_approved_id", "places", ["approved", "id"])


def downgrade() -> None:
    op.drop_index("idx_places_approved_id", table_name="places")
    op.drop_table("places")
