"""
Drag-and-drop reordering for a board, with optimistic commit.

State machine:

  Idle ──drag_start──▶ Dragging ──drag_over──▶ Dragging
                          │
                       drag_end
                          │
          unchanged ◀─────┴─────▶ Committing ──ok──────▶ Idle
             │                        │
             ▼                        ├──PersistenceError──▶ Idle, rollback, notify
            Idle                      └──other error───────▶ Idle, rollback, re-raise

The board is mutated in place while dragging (preview) and on drop
(optimistic). A snapshot taken at drag start is restored on cancel or on a
failed persistence call, so a failure leaves the board exactly as it was.

Items may be given as (type, id) or as a single drag widget id such as
"task-12" or "list-3".
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .client import PositionPersistence
from .errors import DragStateError, PersistenceError, ReorderError
from .ordering import (
    dense_pack,
    index_of,
    insert_at,
    move_within,
    order_of,
    parse_sortable_id,
    sortable_id,
)
from .schema import Board, ItemType
from .status import completion_change, status_for_list_name

logger = logging.getLogger(__name__)


def utc_now() -> str:
    """ISO-8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def item_ref(
    item_type: Union[ItemType, str, None],
    item_id: Optional[int] = None,
) -> Tuple[Optional[ItemType], Optional[int]]:
    """Normalize (type, id), or a lone widget id like "task-12", to (ItemType, id)."""
    if item_id is None and isinstance(item_type, str):
        return parse_sortable_id(item_type)
    if item_type is not None and not isinstance(item_type, ItemType):
        item_type = ItemType.from_str(item_type)
    return item_type, item_id


# ── Drag state ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Idle:
    """Nothing is being dragged."""


@dataclass
class Dragging:
    """An item is held. Containers are list ids for tasks, the board id for lists."""
    active_type: ItemType
    active_id: int
    source_container_id: int
    target_container_id: int
    snapshot: Board = field(repr=False)


@dataclass
class ReorderMutation:
    """One persistence call worth of position updates."""
    item_type: ItemType
    item_id: int
    board_id: int
    container_ids: List[int]
    payload: List[Dict[str, Any]]


@dataclass
class Committing:
    """Optimistic order applied, waiting on the persistence call."""
    drag: Dragging
    mutation: ReorderMutation


DragState = Union[Idle, Dragging, Committing]


# ── Coordinator ──────────────────────────────────────────────────────────────


class BoardReorderCoordinator:
    """Turns drag gestures over a board into position updates."""

    def __init__(
        self,
        board: Board,
        persistence: PositionPersistence,
        notifier: Optional[Callable[[str], None]] = None,
    ):
        self.board = board
        self.persistence = persistence
        self.notifier = notifier
        self.subscribers: Dict[str, list] = {}  # event_type -> list of callbacks
        self._state: DragState = Idle()

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return isinstance(self._state, Dragging)

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """Register a callback for an event type."""
        self.subscribers.setdefault(event_type, []).append(callback)

    def _emit(self, event_type: str, **kwargs) -> None:
        for callback in self.subscribers.get(event_type, []):
            try:
                callback(**kwargs)
            except Exception as e:
                logger.warning(f"Error in {event_type} callback: {e}")

    # ── Gesture ──────────────────────────────────────────────────────────

    def drag_start(
        self,
        item_type: Union[ItemType, str],
        item_id: Optional[int] = None,
    ) -> Dragging:
        """Pick up a task or list. Only allowed while idle."""
        if not isinstance(self._state, Idle):
            raise DragStateError(
                f"Cannot start a drag while {type(self._state).__name__.lower()}"
            )
        item_type, item_id = item_ref(item_type, item_id)
        if item_type is None or item_id is None:
            raise ReorderError("drag_start needs an item type and id")

        if item_type == ItemType.TASK:
            board_list = self.board.list_of_task(item_id)
            if board_list is None:
                raise ReorderError(f"Task {item_id} is not on board {self.board.id}")
            source = board_list.id
        else:
            if self.board.get_list(item_id) is None:
                raise ReorderError(f"List {item_id} is not on board {self.board.id}")
            source = self.board.id

        self._state = Dragging(
            active_type=item_type,
            active_id=item_id,
            source_container_id=source,
            target_container_id=source,
            snapshot=self.board.snapshot(),
        )
        self._emit("drag_started", item_type=item_type, item_id=item_id)
        return self._state

    def drag_over(
        self,
        over_type: Union[ItemType, str, None],
        over_id: Optional[int] = None,
    ) -> None:
        """Track the hovered container; tasks preview their move across lists."""
        drag = self._state
        if not isinstance(drag, Dragging):
            return
        over_type, over_id = item_ref(over_type, over_id)
        if over_id is None:
            return
        container_id, index = self._resolve_target(drag, over_type, over_id)
        drag.target_container_id = container_id

        if drag.active_type == ItemType.TASK:
            current = self.board.list_of_task(drag.active_id)
            if current.id != container_id:
                self._place(drag, container_id, index)

    def drag_end(
        self,
        over_type: Union[ItemType, str, None] = None,
        over_id: Optional[int] = None,
    ) -> bool:
        """
        Drop the held item and persist the new order.

        Returns True when a change was persisted; False for a no-op drop or
        a failed (rolled back) persistence call.
        """
        drag = self._state
        if not isinstance(drag, Dragging):
            raise DragStateError("No drag in progress")

        over_type, over_id = item_ref(over_type, over_id)
        if over_id is not None:
            container_id, index = self._resolve_target(drag, over_type, over_id)
            drag.target_container_id = container_id
            self._place(drag, container_id, index)

        if self._unchanged(drag):
            self.board.restore(drag.snapshot)
            self._state = Idle()
            logger.debug(
                f"Drop of {sortable_id(drag.active_type, drag.active_id)} left order unchanged"
            )
            self._emit("reorder_skipped", item_type=drag.active_type, item_id=drag.active_id)
            return False

        mutation = self._apply(drag)
        self._state = Committing(drag=drag, mutation=mutation)
        error = None
        try:
            self._persist(mutation)
        except PersistenceError as e:
            error = e
        except Exception:
            self.board.restore(drag.snapshot)
            self._state = Idle()
            raise
        self._state = Idle()

        if error is not None:
            self.board.restore(drag.snapshot)
            logger.warning(
                f"Reorder of {sortable_id(drag.active_type, drag.active_id)} failed, "
                f"rolled back: {error}"
            )
            self._notify(drag, error)
            self._emit("reorder_failed", mutation=mutation, error=error)
            return False

        logger.info(
            f"Moved {sortable_id(drag.active_type, drag.active_id)} "
            f"({drag.source_container_id} -> {drag.target_container_id})"
        )
        self._emit("reorder_committed", mutation=mutation)
        return True

    def drag_cancel(self) -> None:
        """Abort the gesture and discard any preview."""
        drag = self._state
        if isinstance(drag, Dragging):
            self.board.restore(drag.snapshot)
        self._state = Idle()

    # ── Internals ────────────────────────────────────────────────────────

    def _resolve_target(
        self,
        drag: Dragging,
        over_type: Union[ItemType, str, None],
        over_id: int,
    ) -> Tuple[int, Optional[int]]:
        """(container id, index within it or None for "end / keep")."""
        if over_type is None:
            over_type = drag.active_type

        if over_type == ItemType.LIST:
            over_list = self.board.get_list(over_id)
            if over_list is None:
                raise ReorderError(f"List {over_id} is not on board {self.board.id}")
            if drag.active_type == ItemType.LIST:
                return self.board.id, index_of(self.board.lists, over_id)
            return over_list.id, None

        over_list = self.board.list_of_task(over_id)
        if over_list is None:
            raise ReorderError(f"Task {over_id} is not on board {self.board.id}")
        if drag.active_type == ItemType.LIST:
            return self.board.id, index_of(self.board.lists, over_list.id)
        return over_list.id, index_of(over_list.tasks, over_id)

    def _place(self, drag: Dragging, container_id: int, index: Optional[int]) -> None:
        if drag.active_type == ItemType.LIST:
            if index is not None:
                current = index_of(self.board.lists, drag.active_id)
                move_within(self.board.lists, current, index)
            return

        current = self.board.list_of_task(drag.active_id)
        if current.id == container_id:
            if index is not None:
                move_within(current.tasks, index_of(current.tasks, drag.active_id), index)
            return

        task = current.tasks.pop(index_of(current.tasks, drag.active_id))
        target = self.board.get_list(container_id)
        insert_at(target.tasks, task, len(target.tasks) if index is None else index)

    def _affected_containers(self, drag: Dragging) -> List[int]:
        containers = [drag.source_container_id]
        if drag.target_container_id != drag.source_container_id:
            containers.append(drag.target_container_id)
        return containers

    def _unchanged(self, drag: Dragging) -> bool:
        if drag.active_type == ItemType.LIST:
            return order_of(self.board.lists) == order_of(drag.snapshot.lists)

        current = self.board.list_of_task(drag.active_id)
        if current.id != drag.source_container_id:
            return False
        for list_id in {drag.source_container_id, drag.target_container_id}:
            before = drag.snapshot.get_list(list_id)
            after = self.board.get_list(list_id)
            if order_of(after.tasks) != order_of(before.tasks):
                return False
        return True

    def _apply(self, drag: Dragging) -> ReorderMutation:
        """Dense-pack affected containers and build the persistence payload."""
        if drag.active_type == ItemType.LIST:
            dense_pack(self.board.lists)
            payload = [{"id": bl.id, "position": bl.position} for bl in self.board.lists]
            return ReorderMutation(
                item_type=ItemType.LIST,
                item_id=drag.active_id,
                board_id=self.board.id,
                container_ids=[self.board.id],
                payload=payload,
            )

        task = self.board.get_task(drag.active_id)
        target = self.board.list_of_task(drag.active_id)
        drag.target_container_id = target.id
        status_changed = False
        if target.id != drag.source_container_id:
            task.list_id = target.id
            new_status = status_for_list_name(target.name)
            change = completion_change(task.status, new_status)
            if new_status is not None and new_status != task.status:
                task.status = new_status
                status_changed = True
            if change == "set":
                task.completed_at = utc_now()
            elif change == "clear":
                task.completed_at = None

        containers = self._affected_containers(drag)
        payload = []
        for list_id in containers:
            board_list = self.board.get_list(list_id)
            for item in dense_pack(board_list.tasks):
                entry = {"id": item.id, "position": item.position, "list_id": board_list.id}
                if item.id == task.id and status_changed:
                    entry["status"] = task.status.value
                    if task.completed_at:
                        entry["completed_at"] = task.completed_at
                payload.append(entry)

        return ReorderMutation(
            item_type=ItemType.TASK,
            item_id=task.id,
            board_id=self.board.id,
            container_ids=containers,
            payload=payload,
        )

    def _persist(self, mutation: ReorderMutation) -> None:
        if mutation.item_type == ItemType.LIST:
            self.persistence.update_list_positions(mutation.board_id, mutation.payload)
        else:
            self.persistence.update_task_positions(mutation.payload)

    def _notify(self, drag: Dragging, error: PersistenceError) -> None:
        if self.notifier is None:
            return
        what = "task" if drag.active_type == ItemType.TASK else "column"
        try:
            self.notifier(f"Could not move {what}: {error}")
        except Exception as e:
            logger.warning(f"Notifier failed: {e}")
