"""Initial schema for Inkwell's database backend.

Revision ID: 0001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the Users and Posts tables."""
    # One user per blog
    op.create_table(
        "Users",
        sa.Column("UserID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Username", sa.Text(), nullable=False, unique=True),
        sa.Column("Bio", sa.Text(), nullable=True),
    )

    op.create_table(
        "Posts",
        sa.Column("PostID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "AuthorID",
            sa.Integer(),
            sa.ForeignKey("Users.UserID", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("Title", sa.Text(), nullable=False),
        sa.Column("Body", sa.Text(), nullable=False),
        sa.UniqueConstraint("AuthorID", "Title", name="uq_posts_author_title"),
    )
    op.create_index("ix_Posts_AuthorID", "Posts", ["AuthorID"])


def downgrade() -> None:
    """Drop the Users and Posts tables."""
    op.drop_index("ix_Posts_AuthorID", table_name="Posts")
    op.drop_table("Posts")
    op.drop_table("Users")
