"""Shared fixtures for task board tests."""

from unittest.mock import MagicMock

import pytest

from pkg.taskboard.schema import Board


@pytest.fixture
def board():
    """
    Board 1 / project 7:
        list 10 "To Do"        tasks 100, 101, 102
        list 11 "In Progress"  task  110
        list 12 "Done"         task  120 (done)
        list 13 "Ideas"        (empty)
    """
    return Board.from_dict({
        "id": 1,
        "project_id": 7,
        "name": "Main",
        "lists": [
            {"id": 10, "name": "To Do", "position": 0, "tasks": [
                {"id": 100, "title": "Write docs", "position": 0, "status": "to_do"},
                {"id": 101, "title": "Fix login", "position": 1, "status": "to_do"},
                {"id": 102, "title": "Plan sprint", "position": 2, "status": "to_do"},
            ]},
            {"id": 11, "name": "In Progress", "position": 1, "tasks": [
                {"id": 110, "title": "Refactor API", "position": 0, "status": "in_progress"},
            ]},
            {"id": 12, "name": "Done", "position": 2, "tasks": [
                {"id": 120, "title": "Ship v1", "position": 0, "status": "done",
                 "completed_at": "2025-06-01T10:00:00Z"},
            ]},
            {"id": 13, "name": "Ideas", "position": 3, "tasks": []},
        ],
    })


@pytest.fixture
def persistence():
    return MagicMock(spec=["update_task_positions", "update_list_positions"])
