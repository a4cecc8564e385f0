"""In-memory classification of every session the renamer has observed."""

import threading


class SessionStateTracker:
    """Tracks which sessions are temporary, locked, or already renamed.

    A session absent from all three sets is unseen. Temporary and locked
    marks are permanent for the process lifetime; the renamed mark is a
    claim that ``release`` gives back after a failed attempt.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._temporary: set[str] = set()
        self._locked: set[str] = set()
        self._renamed: set[str] = set()

    def mark_temporary(self, session_id: str) -> None:
        with self._lock:
            self._temporary.add(session_id)

    def mark_locked(self, session_id: str) -> None:
        with self._lock:
            self._locked.add(session_id)

    def try_claim(self, session_id: str) -> bool:
        """Mark the session renamed unless it is excluded or already claimed."""
        with self._lock:
            if (
                session_id in self._temporary
                or session_id in self._locked
                or session_id in self._renamed
            ):
                return False
            self._renamed.add(session_id)
            return True

    def release(self, session_id: str) -> None:
        """Drop a claim so a later event may retry."""
        with self._lock:
            self._renamed.discard(session_id)

    def is_temporary(self, session_id: str) -> bool:
        return session_id in self._temporary

    def is_locked(self, session_id: str) -> bool:
        return session_id in self._locked

    def is_renamed(self, session_id: str) -> bool:
        return session_id in self._renamed

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {
                "temporary": len(self._temporary),
                "locked": len(self._locked),
                "renamed": len(self._renamed),
            }
