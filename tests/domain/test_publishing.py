from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import pytest

from loomsync.domain.model import AttributeRecord, ChangeStatus, Item, ResourceKind
from loomsync.domain.ports.unit_of_work import ItemRepositories
from loomsync.domain.publishing import UnitOfWorkAggregationStore
from loomsync.domain.reconciliation import ItemUpdate, Publication

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType


class FakeItemRepository:
    def __init__(self) -> None:
        self.items: dict[str, Item] = {}
        self.calls: list[tuple[str, str]] = []
        self.marked: set[str] = set()

    def load(self, item_type: ResourceKind) -> dict[str, Item]:
        return {key: item for key, item in self.items.items() if item.item_type is item_type}

    def save(self, item: Item, *, invalidate: bool) -> None:
        self.calls.append(("save", item.logical_id))
        self.items[item.logical_id] = item
        if invalidate:
            self.marked.add(item.logical_id)

    def refresh_attributes(self, item: Item) -> None:
        self.calls.append(("refresh", item.logical_id))
        self.items[item.logical_id] = item

    def remove(self, item_type: ResourceKind, logical_ids: Iterable[str]) -> int:
        removed = 0
        for logical_id in logical_ids:
            self.calls.append(("remove", logical_id))
            if self.items.pop(logical_id, None) is not None:
                removed += 1
            self.marked.add(logical_id)
        return removed

    def invalidated(self, item_type: ResourceKind) -> tuple[str, ...]:
        return tuple(sorted(self.marked))

    def clear_invalidated(
        self,
        item_type: ResourceKind,
        logical_ids: Iterable[str] | None = None,
    ) -> None:
        if logical_ids is None:
            self.marked.clear()
        else:
            self.marked.difference_update(logical_ids)


class FakeUnitOfWork:
    def __init__(self, repository: FakeItemRepository) -> None:
        self.repositories = ItemRepositories(items=repository)
        self.committed = False
        self.rolled_back = False

    def __enter__(self) -> FakeUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        self.rolled_back = True


def _item(logical_id: str, *, size: int = 1) -> Item:
    return Item(
        logical_id=logical_id,
        item_type=ResourceKind.VOLUME,
        attributes=AttributeRecord(
            item_id=logical_id,
            name=logical_id,
            description="volume",
            fields={"size_bytes": size},
        ),
    )


def test_publish_writes_only_changed_items() -> None:
    repository = FakeItemRepository()
    repository.items["volume:old"] = _item("volume:old")
    units: list[FakeUnitOfWork] = []

    def factory() -> FakeUnitOfWork:
        units.append(FakeUnitOfWork(repository))
        return units[-1]

    store = UnitOfWorkAggregationStore(factory)
    store.publish(
        Publication(
            item_type=ResourceKind.VOLUME,
            updates=(
                ItemUpdate(_item("volume:a"), ChangeStatus.CHANGED_UPDATE),
                ItemUpdate(_item("volume:b"), ChangeStatus.CHANGED_IGNORE),
                ItemUpdate(_item("volume:c"), ChangeStatus.UNCHANGED),
            ),
            removed=("volume:old",),
        )
    )

    assert repository.calls == [
        ("save", "volume:a"),
        ("refresh", "volume:b"),
        ("remove", "volume:old"),
    ]
    assert units[-1].committed
    assert store.invalidated(ResourceKind.VOLUME) == ("volume:a", "volume:old")


def test_publish_failure_rolls_back_and_propagates() -> None:
    class BrokenRepository(FakeItemRepository):
        def remove(self, item_type: ResourceKind, logical_ids: Iterable[str]) -> int:
            raise RuntimeError("disk full")

    repository = BrokenRepository()
    unit = FakeUnitOfWork(repository)
    store = UnitOfWorkAggregationStore(lambda: unit)

    with pytest.raises(RuntimeError, match="disk full"):
        store.publish(Publication(item_type=ResourceKind.VOLUME, removed=("volume:x",)))

    assert unit.rolled_back
    assert not unit.committed


def test_publication_rejects_foreign_items_and_overlaps() -> None:
    with pytest.raises(ValueError, match="contains a volume item"):
        Publication(
            item_type=ResourceKind.HOST,
            updates=(ItemUpdate(_item("volume:a"), ChangeStatus.UNCHANGED),),
        )
    with pytest.raises(ValueError, match="both updated and removed"):
        Publication(
            item_type=ResourceKind.VOLUME,
            updates=(ItemUpdate(_item("volume:a"), ChangeStatus.UNCHANGED),),
            removed=("volume:a",),
        )
