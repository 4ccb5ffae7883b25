"""create portal content + analytics tables

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "themes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("colors", sa.JSON(), nullable=False),
        sa.Column("logo_url", sa.Text(), nullable=True),
        *_timestamps(),
    )

    # parent_id has no FK: deleting a parent orphans its children in place
    op.create_table(
        "subsites",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon_kind", sa.String(16), nullable=True),
        sa.Column("icon_value", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("custom_domain", sa.String(253), nullable=True),
        sa.Column("parent_id", sa.Uuid(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint(
            "icon_kind IS NULL OR icon_kind IN ('symbol', 'image')",
            name="ck_subsites_icon_kind",
        ),
    )
    op.create_index("ix_subsites_parent_id", "subsites", ["parent_id"])

    op.create_table(
        "links",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("subsite_id", sa.Uuid(), sa.ForeignKey("subsites.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon_kind", sa.String(16), nullable=True),
        sa.Column("icon_value", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint(
            "icon_kind IS NULL OR icon_kind IN ('symbol', 'image')",
            name="ck_links_icon_kind",
        ),
    )
    op.create_index("ix_links_subsite_id", "links", ["subsite_id"])

    op.create_table(
        "analytics_events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("event_type", sa.String(16), nullable=False),
        sa.Column("resource_type", sa.String(16), nullable=False),
        sa.Column("resource_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("event_type IN ('view', 'click')", name="ck_analytics_event_type"),
        sa.CheckConstraint(
            "resource_type IN ('subsite', 'link')", name="ck_analytics_resource_type"
        ),
    )
    op.create_index(
        "ix_analytics_events_type_resource",
        "analytics_events",
        ["event_type", "resource_type", "resource_id"],
    )
    op.create_index(
        "ix_analytics_events_created_at",
        "analytics_events",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("ix_analytics_events_created_at", table_name="analytics_events")
    op.drop_index("ix_analytics_events_type_resource", table_name="analytics_events")
    op.drop_table("analytics_events")
    op.drop_index("ix_links_subsite_id", table_name="links")
    op.drop_table("links")
    op.drop_index("ix_subsites_parent_id", table_name="subsites")
    op.drop_table("subsites")
    op.drop_table("themes")
