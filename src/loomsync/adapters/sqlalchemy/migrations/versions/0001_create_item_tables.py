"""Create item, item_edge and item_invalidation tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from loomsync.adapters.sqlalchemy.mappings import FieldsType, UTCDateTime

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_RESOURCE_KIND = sa.Enum(
    "HOST", "CONTAINER", "VOLUME", name="resourcekind", native_enum=False, length=9
)
_RELATIONSHIP_TYPE = sa.Enum(
    "MOUNTS", "RUNS_ON", name="relationshiptype", native_enum=False, length=7
)


def upgrade() -> None:
    op.create_table(
        "item",
        sa.Column("logical_id", sa.String(), nullable=False),
        sa.Column("item_type", _RESOURCE_KIND, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("fields", FieldsType(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("logical_id", name=op.f("pk_item")),
    )
    op.create_index("ix_item_item_type", "item", ["item_type"])

    op.create_table(
        "item_edge",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("source_id", sa.String(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("relationship_type", _RELATIONSHIP_TYPE, nullable=False),
        sa.Column("target_item_type", _RESOURCE_KIND, nullable=False),
        sa.Column("target_logical_id", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_item_edge")),
        sa.UniqueConstraint("source_id", "position", name=op.f("uq_item_edge_source_id")),
    )
    op.create_index("ix_item_edge_source_id", "item_edge", ["source_id"])

    op.create_table(
        "item_invalidation",
        sa.Column("item_type", _RESOURCE_KIND, nullable=False),
        sa.Column("logical_id", sa.String(), nullable=False),
        sa.Column("invalidated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("item_type", "logical_id", name=op.f("pk_item_invalidation")),
    )


def downgrade() -> None:
    op.drop_table("item_invalidation")
    op.drop_index("ix_item_edge_source_id", table_name="item_edge")
    op.drop_table("item_edge")
    op.drop_index("ix_item_item_type", table_name="item")
    op.drop_table("item")
