from __future__ import annotations

from pydantic import BaseModel


class PresenceResponse(BaseModel):
    counselors: list[int]
    students: list[int]
    all: list[int]
