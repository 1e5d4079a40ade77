"""Client-side view state for the dashboard.

The five collections are replaced wholesale from ``/api/dashboard`` and
never patched incrementally. Any change event triggers the same reload.
"""
import threading
from typing import Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)

CONNECTION_ERROR_MESSAGE = "Cannot connect to the database. Please check your connection settings."

COLLECTIONS = ("workers", "projects", "vehicles", "equipment", "allocations")


class DashboardState:
    def __init__(self, http: httpx.Client, path: str = "/api/dashboard"):
        self.http = http
        self.path = path
        self.workers: list[dict] = []
        self.projects: list[dict] = []
        self.vehicles: list[dict] = []
        self.equipment: list[dict] = []
        self.allocations: list[dict] = []
        self.stats: dict = {}
        self.loading = True
        self.connection_error: Optional[str] = None
        self.reload_count = 0

        self._in_flight = threading.Lock()
        self._pending_lock = threading.Lock()
        self._pending = False

    def reload(self) -> bool:
        """Fetch everything again.

        Returns False when another reload is already running; that reload
        then runs once more before releasing, so the request is not lost.
        """
        with self._pending_lock:
            self._pending = True
            if not self._in_flight.acquire(blocking=False):
                return False

        try:
            while True:
                with self._pending_lock:
                    if not self._pending:
                        self._in_flight.release()
                        return True
                    self._pending = False
                self._fetch()
        except BaseException:
            with self._pending_lock:
                self._in_flight.release()
            raise

    def handle_change(self, event: dict) -> bool:
        logger.debug("dashboard_change_received", operation=event.get("event"), table=event.get("table"))
        return self.reload()

    def listen(self, events) -> None:
        """Consume an iterable of change events, reloading for each."""
        for event in events:
            self.handle_change(event)

    def _fetch(self) -> None:
        try:
            self.connection_error = None
            response = self.http.get(self.path)
            if response.status_code == 503:
                # Body may be a proxy error page, not JSON
                self._mark_unreachable(f"HTTP {response.status_code}")
                return
            response.raise_for_status()
            snapshot = response.json()
        except httpx.TransportError as exc:
            self._mark_unreachable(str(exc))
            return
        except httpx.HTTPStatusError as exc:
            logger.warning("dashboard_reload_failed", status_code=exc.response.status_code)
            return
        finally:
            self.loading = False

        for name in COLLECTIONS:
            setattr(self, name, snapshot.get(name, []))
        self.stats = snapshot.get("stats", {})
        self.reload_count += 1

    def _mark_unreachable(self, reason) -> None:
        self.connection_error = CONNECTION_ERROR_MESSAGE
        logger.warning("dashboard_reload_failed", reason=reason)
