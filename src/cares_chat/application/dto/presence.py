from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class PresenceSnapshot:
    """Point-in-time view of connected participants, split by role."""

    students: frozenset[int] = field(default_factory=frozenset)
    counselors: frozenset[int] = field(default_factory=frozenset)

    def to_payload(self) -> dict[str, Any]:
        return {
            "counselors": sorted(self.counselors),
            "students": sorted(self.students),
            "all": sorted(self.students | self.counselors),
        }
