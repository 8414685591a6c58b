"""
Board data model as held by the client.

A Board owns ordered lists (columns); each list owns ordered tasks. Positions
are integer ordering keys within the owning container:
  - a list's container is its board
  - a task's container is its list
"""
import copy
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from .errors import ReorderError
from .status import Status, status_from_column_name


class ItemType(Enum):
    """Draggable item kinds."""
    TASK = "task"
    LIST = "list"

    @classmethod
    def from_str(cls, value: str) -> "ItemType":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ReorderError(f"Unknown item type: {value!r}") from None


@dataclass
class BoardTask:
    """A task card inside a list."""
    id: int
    list_id: int
    title: str = ""
    position: int = 0
    status: Status = Status.TO_DO
    completed_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "list_id": self.list_id,
            "title": self.title,
            "position": self.position,
            "status": self.status.value,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoardTask":
        return cls(
            id=int(data["id"]),
            list_id=int(data["list_id"]),
            title=data.get("title", ""),
            position=int(data.get("position", 0)),
            status=Status.from_str(data.get("status") or "to_do"),
            completed_at=data.get("completed_at"),
        )


@dataclass
class BoardList:
    """A column on a board."""
    id: int
    board_id: int
    name: str
    position: int = 0
    tasks: List[BoardTask] = field(default_factory=list)

    @property
    def status(self) -> Status:
        return status_from_column_name(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "board_id": self.board_id,
            "name": self.name,
            "position": self.position,
            "tasks": [t.to_dict() for t in self.tasks],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoardList":
        list_id = int(data["id"])
        tasks = [
            BoardTask.from_dict({**t, "list_id": t.get("list_id", list_id)})
            for t in data.get("tasks", [])
        ]
        tasks.sort(key=lambda t: t.position)
        return cls(
            id=list_id,
            board_id=int(data["board_id"]),
            name=data.get("name", ""),
            position=int(data.get("position", 0)),
            tasks=tasks,
        )


@dataclass
class Board:
    """A board and its lists, ordered by position."""
    id: int
    project_id: int
    name: str = ""
    lists: List[BoardList] = field(default_factory=list)

    def get_list(self, list_id: int) -> Optional[BoardList]:
        for board_list in self.lists:
            if board_list.id == list_id:
                return board_list
        return None

    def get_task(self, task_id: int) -> Optional[BoardTask]:
        board_list = self.list_of_task(task_id)
        if board_list is None:
            return None
        for task in board_list.tasks:
            if task.id == task_id:
                return task
        return None

    def list_of_task(self, task_id: int) -> Optional[BoardList]:
        """The list currently holding a task, by membership rather than list_id."""
        for board_list in self.lists:
            if any(t.id == task_id for t in board_list.tasks):
                return board_list
        return None

    def snapshot(self) -> "Board":
        return copy.deepcopy(self)

    def restore(self, snapshot: "Board") -> None:
        """Replace lists with a copy of the snapshot's, in place."""
        self.lists = copy.deepcopy(snapshot.lists)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "lists": [bl.to_dict() for bl in self.lists],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Board":
        board_id = int(data["id"])
        lists = [
            BoardList.from_dict({**bl, "board_id": bl.get("board_id", board_id)})
            for bl in data.get("lists", [])
        ]
        lists.sort(key=lambda bl: bl.position)
        return cls(
            id=board_id,
            project_id=int(data["project_id"]),
            name=data.get("name", ""),
            lists=lists,
        )
