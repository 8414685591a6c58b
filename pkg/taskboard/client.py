"""
HTTP client for the board position endpoints.

The server owns the routes; this client only knows their shape:

  POST /projects/{project}/tasks/positions
       {"tasks": [{"id", "position", "list_id", "status"?, "completed_at"?}]}
  POST /projects/{project}/boards/{board}/lists/positions
       {"lists": [{"id", "position"}]}
  GET  /projects/{project}/boards                 (reachability check)

Every failure surfaces as PersistenceError so the reorder coordinator can
roll back.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol

import requests

from .errors import PersistenceError

logger = logging.getLogger(__name__)


class PositionPersistence(Protocol):
    """What the reorder coordinator needs from the persistence layer."""

    def update_task_positions(self, tasks: List[Dict[str, Any]]) -> None: ...

    def update_list_positions(self, board_id: int, lists: List[Dict[str, Any]]) -> None: ...


class BoardApiClient:
    """HTTP client for the board API."""

    def __init__(
        self,
        base_url: str,
        project_id: int,
        api_key: Optional[str] = None,
        timeout: float = 5,
    ):
        self.base_url = base_url.rstrip("/")
        self.project_id = project_id
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            r = requests.post(url, json=body, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise PersistenceError(f"Request to {path} failed: {e}") from e

        if not r.ok:
            raise PersistenceError(
                f"Server rejected {path} with HTTP {r.status_code}",
                status_code=r.status_code,
            )

        try:
            data = r.json()
        except ValueError:
            data = {}
        if isinstance(data, dict) and data.get("success") is False:
            raise PersistenceError(
                data.get("error") or f"Server reported failure for {path}",
                status_code=r.status_code,
            )
        return data if isinstance(data, dict) else {}

    def update_task_positions(self, tasks: List[Dict[str, Any]]) -> None:
        logger.debug(f"Persisting {len(tasks)} task position(s)")
        self._post(f"/projects/{self.project_id}/tasks/positions", {"tasks": tasks})

    def update_list_positions(self, board_id: int, lists: List[Dict[str, Any]]) -> None:
        logger.debug(f"Persisting {len(lists)} list position(s) on board {board_id}")
        self._post(
            f"/projects/{self.project_id}/boards/{board_id}/lists/positions",
            {"lists": lists},
        )

    def health(self) -> bool:
        """Check the project's board index answers. Never raises."""
        try:
            r = requests.get(
                f"{self.base_url}/projects/{self.project_id}/boards",
                headers=self._headers(),
                timeout=self.timeout,
            )
            return r.ok
        except requests.RequestException:
            return False
