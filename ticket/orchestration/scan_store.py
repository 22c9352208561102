"""
Latest Scan Store - Most recent scan outcome per user, held in memory
"""
import threading
from typing import Any, Dict, Optional

from ..models import ScanOutcome


class LatestScanStore:
    """Keeps the latest outcome per user so it can be re-read without re-running extraction."""

    def __init__(self):
        self._outcomes: Dict[Any, ScanOutcome] = {}
        self._lock = threading.Lock()

    def save(self, outcome: ScanOutcome) -> None:
        with self._lock:
            self._outcomes[outcome.user_id] = outcome

    def get(self, user_id: Any) -> Optional[ScanOutcome]:
        with self._lock:
            return self._outcomes.get(user_id)

    def clear(self, user_id: Any = None) -> None:
        with self._lock:
            if user_id is None:
                self._outcomes.clear()
            else:
                self._outcomes.pop(user_id, None)
