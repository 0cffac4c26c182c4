"""
app/services/session_registry.py

Purpose: Track the latest Vonage verify request per phone number

- One entry per destination, overwritten on every new attempt
- Entries are only ever replaced, never expired (no completion feedback
  reaches this process)
- Lives in memory only; state is lost on restart
"""

from typing import Dict, Optional


class SessionRegistry:
    """In-memory map of destination (E.164, verbatim) -> provider request id."""

    def __init__(self):
        self._active: Dict[str, str] = {}

    def get(self, destination: str) -> Optional[str]:
        return self._active.get(destination)

    def set(self, destination: str, request_id: str) -> None:
        self._active[destination] = request_id

    def remove(self, destination: str) -> None:
        self._active.pop(destination, None)

    def __contains__(self, destination: str) -> bool:
        return destination in self._active

    def __len__(self) -> int:
        return len(self._active)
