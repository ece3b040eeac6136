"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select, update

from loomsync.adapters.sqlalchemy.mappings import (
    item_edge_table,
    item_invalidation_table,
    item_table,
)
from loomsync.domain.model import AttributeRecord, Item, RelationshipEdge

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from loomsync.domain.model import LogicalId, ResourceKind


class SqlAlchemyItemRepository:
    """Persist items as one row each plus ordered edge rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def load(self, item_type: ResourceKind) -> dict[LogicalId, Item]:
        rows = self.session.execute(
            select(item_table)
            .where(item_table.c.item_type == item_type)
            .order_by(item_table.c.logical_id)
        ).all()
        edges = self._load_edges(item_type)
        return {
            row.logical_id: Item(
                logical_id=row.logical_id,
                item_type=item_type,
                attributes=self._attributes(row),
                edges=edges.get(row.logical_id, ()),
            )
            for row in rows
        }

    def save(self, item: Item, *, invalidate: bool) -> None:
        exists = self.session.execute(
            select(item_table.c.logical_id).where(item_table.c.logical_id == item.logical_id)
        ).scalar_one_or_none()
        values = self._attribute_values(item)
        if exists is None:
            self.session.execute(
                insert(item_table).values(
                    logical_id=item.logical_id,
                    item_type=item.item_type,
                    **values,
                )
            )
        else:
            self.session.execute(
                update(item_table)
                .where(item_table.c.logical_id == item.logical_id)
                .values(**values)
            )
        self.session.execute(
            delete(item_edge_table).where(item_edge_table.c.source_id == item.logical_id)
        )
        if item.edges:
            self.session.execute(
                insert(item_edge_table),
                [
                    {
                        "source_id": item.logical_id,
                        "position": position,
                        "relationship_type": edge.relationship_type,
                        "target_item_type": edge.target_item_type,
                        "target_logical_id": edge.target_logical_id,
                    }
                    for position, edge in enumerate(item.edges)
                ],
            )
        if invalidate:
            self._mark_invalidated(item.item_type, [item.logical_id])

    def refresh_attributes(self, item: Item) -> None:
        self.session.execute(
            update(item_table)
            .where(item_table.c.logical_id == item.logical_id)
            .values(**self._attribute_values(item))
        )

    def remove(self, item_type: ResourceKind, logical_ids: Iterable[LogicalId]) -> int:
        ids = sorted(set(logical_ids))
        if not ids:
            return 0
        self.session.execute(delete(item_edge_table).where(item_edge_table.c.source_id.in_(ids)))
        result = self.session.execute(
            delete(item_table)
            .where(item_table.c.item_type == item_type)
            .where(item_table.c.logical_id.in_(ids))
        )
        self._mark_invalidated(item_type, ids)
        return result.rowcount

    def invalidated(self, item_type: ResourceKind) -> tuple[LogicalId, ...]:
        stmt = (
            select(item_invalidation_table.c.logical_id)
            .where(item_invalidation_table.c.item_type == item_type)
            .order_by(item_invalidation_table.c.logical_id)
        )
        return tuple(self.session.execute(stmt).scalars())

    def clear_invalidated(
        self,
        item_type: ResourceKind,
        logical_ids: Iterable[LogicalId] | None = None,
    ) -> None:
        stmt = delete(item_invalidation_table).where(
            item_invalidation_table.c.item_type == item_type
        )
        if logical_ids is not None:
            stmt = stmt.where(item_invalidation_table.c.logical_id.in_(list(logical_ids)))
        self.session.execute(stmt)

    def _mark_invalidated(
        self,
        item_type: ResourceKind,
        logical_ids: list[LogicalId],
    ) -> None:
        now = datetime.now(tz=UTC)
        self.clear_invalidated(item_type, logical_ids)
        self.session.execute(
            insert(item_invalidation_table),
            [
                {"item_type": item_type, "logical_id": logical_id, "invalidated_at": now}
                for logical_id in logical_ids
            ],
        )

    def _load_edges(
        self,
        item_type: ResourceKind,
    ) -> dict[LogicalId, tuple[RelationshipEdge, ...]]:
        stmt = (
            select(item_edge_table)
            .join(item_table, item_table.c.logical_id == item_edge_table.c.source_id)
            .where(item_table.c.item_type == item_type)
            .order_by(item_edge_table.c.source_id, item_edge_table.c.position)
        )
        edges: defaultdict[LogicalId, list[RelationshipEdge]] = defaultdict(list)
        for row in self.session.execute(stmt):
            edges[row.source_id].append(
                RelationshipEdge(
                    relationship_type=row.relationship_type,
                    target_item_type=row.target_item_type,
                    target_logical_id=row.target_logical_id,
                )
            )
        return {source_id: tuple(values) for source_id, values in edges.items()}

    @staticmethod
    def _attributes(row: Row[tuple[object, ...]]) -> AttributeRecord:
        return AttributeRecord(
            item_id=row.logical_id,
            name=row.name,
            description=row.description,
            fields=row.fields,
        )

    @staticmethod
    def _attribute_values(item: Item) -> dict[str, object]:
        attributes = item.attributes
        return {
            "name": attributes.name,
            "description": attributes.description,
            "fields": dict(attributes.fields),
            "updated_at": datetime.now(tz=UTC),
        }
