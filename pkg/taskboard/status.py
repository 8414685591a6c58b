"""
Column name <-> task status mapping.

Boards let users name their columns freely ("Backlog", "QA", "Shipped ✨").
Filtering across boards needs one fixed vocabulary, so every column name is
resolved to one of five statuses:

  to_do → in_progress → in_review → blocked → done

Resolution runs in passes over an ordered keyword table; the first hit wins,
so table order matters wherever keywords overlap ("in review" vs "review").
"""
import re
from enum import Enum
from typing import List, Optional, Tuple, Union


class Status(Enum):
    """The closed set of task statuses."""
    TO_DO = "to_do"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    BLOCKED = "blocked"
    DONE = "done"

    @classmethod
    def from_str(cls, value: str) -> "Status":
        try:
            return cls(value)
        except ValueError:
            return cls.TO_DO


# Ordered (keyword, status) pairs. Do not sort.
STATUS_KEYWORDS: Tuple[Tuple[str, Status], ...] = (
    # To do
    ("to do", Status.TO_DO),
    ("todo", Status.TO_DO),
    ("backlog", Status.TO_DO),
    ("planned", Status.TO_DO),
    ("new", Status.TO_DO),
    ("open", Status.TO_DO),
    ("pending", Status.TO_DO),
    ("not started", Status.TO_DO),

    # In progress
    ("in progress", Status.IN_PROGRESS),
    ("in-progress", Status.IN_PROGRESS),
    ("inprogress", Status.IN_PROGRESS),
    ("doing", Status.IN_PROGRESS),
    ("active", Status.IN_PROGRESS),
    ("working", Status.IN_PROGRESS),
    ("started", Status.IN_PROGRESS),
    ("development", Status.IN_PROGRESS),
    ("dev", Status.IN_PROGRESS),

    # Done
    ("done", Status.DONE),
    ("completed", Status.DONE),
    ("complete", Status.DONE),
    ("finished", Status.DONE),
    ("closed", Status.DONE),
    ("resolved", Status.DONE),
    ("deployed", Status.DONE),
    ("live", Status.DONE),

    # Review
    ("review", Status.IN_REVIEW),
    ("in review", Status.IN_REVIEW),
    ("in-review", Status.IN_REVIEW),
    ("testing", Status.IN_REVIEW),
    ("qa", Status.IN_REVIEW),
    ("quality assurance", Status.IN_REVIEW),
    ("code review", Status.IN_REVIEW),
    ("peer review", Status.IN_REVIEW),

    # Blocked
    ("blocked", Status.BLOCKED),
    ("on hold", Status.BLOCKED),
    ("waiting", Status.BLOCKED),
    ("paused", Status.BLOCKED),
    ("stuck", Status.BLOCKED),
    ("impediment", Status.BLOCKED),
)

# Lists that a task is dropped into also treat failure-ish names as blocked.
LIST_STATUS_KEYWORDS: Tuple[Tuple[str, Status], ...] = STATUS_KEYWORDS + (
    ("error", Status.BLOCKED),
    ("failed", Status.BLOCKED),
    ("issue", Status.BLOCKED),
)

# Last-resort fragments, checked in this priority order.
FALLBACK_PATTERNS: Tuple[Tuple[Tuple[str, ...], Status], ...] = (
    (("do", "start", "plan"), Status.TO_DO),
    (("progress", "work", "dev"), Status.IN_PROGRESS),
    (("done", "complete", "finish"), Status.DONE),
    (("review", "test", "qa"), Status.IN_REVIEW),
    (("block", "hold", "wait"), Status.BLOCKED),
)

DEFAULT_COLUMN_NAMES = {
    Status.TO_DO: "To Do",
    Status.IN_PROGRESS: "In Progress",
    Status.IN_REVIEW: "In Review",
    Status.DONE: "Done",
    Status.BLOCKED: "Blocked",
}

_EXACT = dict(STATUS_KEYWORDS)
_EXACT_LIST = dict(LIST_STATUS_KEYWORDS)
_WORD_PATTERNS = tuple(
    (re.compile(rf"\b{re.escape(keyword)}\b", re.ASCII), status)
    for keyword, status in STATUS_KEYWORDS
)


def _normalize(name: Optional[str]) -> str:
    return (name or "").lower().strip()


def _fallback(normalized: str) -> Optional[Status]:
    for fragments, status in FALLBACK_PATTERNS:
        if any(fragment in normalized for fragment in fragments):
            return status
    return None


def status_from_column_name(name: Optional[str]) -> Status:
    """
    Map a column name to a status. Total: unknown names map to TO_DO.

    Passes, first hit wins:
      1. exact keyword
      2. keyword as a whole word
      3. keyword as a substring
      4. fallback fragments (do/start/plan, progress/work/dev, ...)
    """
    normalized = _normalize(name)
    if not normalized:
        return Status.TO_DO

    if normalized in _EXACT:
        return _EXACT[normalized]

    for pattern, status in _WORD_PATTERNS:
        if pattern.search(normalized):
            return status

    for keyword, status in STATUS_KEYWORDS:
        if keyword in normalized:
            return status

    return _fallback(normalized) or Status.TO_DO


def status_for_list_name(name: Optional[str]) -> Optional[Status]:
    """
    Status a task should take when it lands in a list, or None to keep its own.

    Stricter than status_from_column_name: no whole-word pass and no TO_DO
    default, so a list called "Ideas" leaves task statuses untouched.
    """
    normalized = _normalize(name)
    if not normalized:
        return None

    if normalized in _EXACT_LIST:
        return _EXACT_LIST[normalized]

    for keyword, status in LIST_STATUS_KEYWORDS:
        if keyword in normalized:
            return status

    return _fallback(normalized)


def column_name_from_status(status: Union[Status, str, None]) -> str:
    """Default column name for a status. Unknown values give "To Do"."""
    if not isinstance(status, Status):
        try:
            status = Status(status)
        except ValueError:
            return DEFAULT_COLUMN_NAMES[Status.TO_DO]
    return DEFAULT_COLUMN_NAMES[status]


def valid_statuses() -> List[Status]:
    """All statuses in board order."""
    return list(Status)


def is_valid_status(value: Union[Status, str, None]) -> bool:
    if isinstance(value, Status):
        return True
    return value in {s.value for s in valid_statuses()}


def completion_change(old: Optional[Status], new: Optional[Status]) -> Optional[str]:
    """How completed_at changes for old -> new: "set", "clear" or None."""
    if new is None or new == old:
        return None
    if new == Status.DONE:
        return "set"
    if old == Status.DONE:
        return "clear"
    return None
