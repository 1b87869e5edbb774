from __future__ import annotations

from typing import NewType

MessageId = NewType("MessageId", int)
StudentId = NewType("StudentId", int)
CounselorId = NewType("CounselorId", int)
