from __future__ import annotations

import threading
import uuid
from typing import Dict, List, Optional

from ...engine.puzzle import Puzzle


class InMemorySessionStore:
    """Thread-safe in-memory puzzle session store.

    Sessions are keyed by a random ``puzzle_id``; at most ``max_sessions`` are
    kept, the oldest being dropped first.
    """

    def __init__(self, max_sessions: int = 1024) -> None:
        self._lock = threading.RLock()
        self._puzzles: Dict[str, Puzzle] = {}
        self._max = max_sessions

    def create(self, puzzle: Puzzle) -> str:
        pid = uuid.uuid4().hex
        with self._lock:
            self._puzzles[pid] = puzzle
            while len(self._puzzles) > self._max:
                oldest = next(iter(self._puzzles))
                del self._puzzles[oldest]
        return pid

    def get(self, puzzle_id: str) -> Optional[Puzzle]:
        with self._lock:
            return self._puzzles.get(puzzle_id)

    def delete(self, puzzle_id: str) -> bool:
        with self._lock:
            return self._puzzles.pop(puzzle_id, None) is not None

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._puzzles)
