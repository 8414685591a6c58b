"""
Position helpers shared by the reorder coordinator.

Positions are dense per container: 0..n-1, no gaps, no duplicates.
"""
import re
from typing import Any, List, Sequence, Tuple

from .errors import ReorderError
from .schema import ItemType

_SORTABLE_ID = re.compile(r"^(task|list)-(\d+)$")


def dense_pack(items: List[Any]) -> List[Any]:
    """Set each item's position to its index."""
    for index, item in enumerate(items):
        item.position = index
    return items


def is_dense(items: Sequence[Any]) -> bool:
    return sorted(item.position for item in items) == list(range(len(items)))


def order_of(items: Sequence[Any]) -> List[int]:
    return [item.id for item in items]


def index_of(items: Sequence[Any], item_id: int) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return -1


def move_within(items: List[Any], from_index: int, to_index: int) -> List[Any]:
    """Move one element, shifting the ones in between (array-move semantics)."""
    if from_index == to_index:
        return items
    item = items.pop(from_index)
    items.insert(to_index, item)
    return items


def insert_at(items: List[Any], item: Any, index: int) -> int:
    """Insert with the index clamped into range. Returns the index used."""
    index = max(0, min(index, len(items)))
    items.insert(index, item)
    return index


def parse_sortable_id(value: str) -> Tuple[ItemType, int]:
    """Split a drag widget id like "task-12" into (ItemType.TASK, 12)."""
    match = _SORTABLE_ID.match(str(value).strip())
    if not match:
        raise ReorderError(f"Not a sortable id: {value!r}")
    return ItemType(match.group(1)), int(match.group(2))


def sortable_id(item_type: ItemType, item_id: int) -> str:
    return f"{item_type.value}-{item_id}"
