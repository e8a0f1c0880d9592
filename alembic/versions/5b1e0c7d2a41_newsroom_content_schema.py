"""newsroom content schema: posts, categories, media, options, menus, ads

Revision ID: 5b1e0c7d2a41
Revises:
Create Date: 2026-10-19 10:12:03.418220

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5b1e0c7d2a41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "attachments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("url", sa.String(1024), nullable=False),
        sa.Column("alt", sa.String(512), nullable=False, server_default=""),
        sa.Column("caption", sa.Text(), nullable=False, server_default=""),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("fields", JSON, nullable=False),
        sa.UniqueConstraint("slug", name="uq_categories_slug"),
    )

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("post_type", sa.String(20), nullable=False, server_default="post"),
        sa.Column("status", sa.String(20), nullable=False, server_default="publish"),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("excerpt", sa.Text(), nullable=False, server_default=""),
        sa.Column("template", sa.String(200), nullable=False, server_default=""),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("posts.id", ondelete="SET NULL"), nullable=True),
        sa.Column("thumbnail_id", sa.Integer(), sa.ForeignKey("attachments.id", ondelete="SET NULL"), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("modified", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("fields", JSON, nullable=False),
        sa.Column("meta", JSON, nullable=False),
        sa.UniqueConstraint("post_type", "slug", name="uq_post_type_slug"),
    )
    op.create_index("ix_posts_type_status_date", "posts", ["post_type", "status", "date"], unique=False)

    op.create_table(
        "post_categories",
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )

    op.create_table(
        "options",
        sa.Column("name", sa.String(191), primary_key=True),
        sa.Column("value", JSON, nullable=True),
    )

    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("menu_id", sa.Integer(), nullable=False),
        sa.Column("parent_item_id", sa.Integer(), sa.ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=True),
        sa.Column("object_id", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("object_type", sa.String(32), nullable=False, server_default="custom"),
        sa.Column("item_type", sa.String(32), nullable=False, server_default="custom"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("url", sa.String(1024), nullable=False, server_default=""),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_menu_items_menu_id", "menu_items", ["menu_id"], unique=False)
    op.create_index("ix_menu_items_menu_position", "menu_items", ["menu_id", "position"], unique=False)

    op.create_table(
        "ad_groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("modus", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("adspeed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("repeat_impressions", sa.String(1), nullable=False, server_default="N"),
        sa.Column("gridrows", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("gridcolumns", sa.Integer(), nullable=False, server_default="1"),
    )

    op.create_table(
        "ads",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False, server_default=""),
        sa.Column("bannercode", sa.Text(), nullable=False, server_default=""),
        sa.Column("image", sa.String(1024), nullable=False, server_default=""),
        sa.Column("tracker", sa.String(1), nullable=False, server_default="N"),
        sa.Column("type", sa.String(20), nullable=False, server_default="active"),
    )

    op.create_table(
        "ad_links",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ad_id", sa.Integer(), sa.ForeignKey("ads.id", ondelete="CASCADE"), nullable=False),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("ad_groups.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("ix_ad_links_group_ad", "ad_links", ["group_id", "ad_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_ad_links_group_ad", table_name="ad_links", if_exists=True)
    op.drop_table("ad_links")
    op.drop_table("ads")
    op.drop_table("ad_groups")
    op.drop_index("ix_menu_items_menu_position", table_name="menu_items", if_exists=True)
    op.drop_index("ix_menu_items_menu_id", table_name="menu_items", if_exists=True)
    op.drop_table("menu_items")
    op.drop_table("options")
    op.drop_table("post_categories")
    op.drop_index("ix_posts_type_status_date", table_name="posts", if_exists=True)
    op.drop_table("posts")
    op.drop_table("categories")
    op.drop_table("attachments")
