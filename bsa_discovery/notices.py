"""
Toast-style notices shown to the user.

Components post notices as side effects (rejected upload, export started,
text copied). The browser drains them on its next poll.
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class NoticeVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notice(BaseModel):
    """A single user-visible message."""

    title: str
    description: str = ""
    variant: NoticeVariant = NoticeVariant.DEFAULT
    created_at: datetime = Field(default_factory=datetime.now)


class NoticeBoard:
    """FIFO of notices waiting to be shown."""

    def __init__(self, max_pending: int = 100):
        self._pending: List[Notice] = []
        self._max_pending = max_pending

    def post(self, title: str, description: str = "", variant: NoticeVariant = NoticeVariant.DEFAULT) -> Notice:
        notice = Notice(title=title, description=description, variant=variant)
        self._pending.append(notice)
        # Oldest notices are dropped when nobody polls
        if len(self._pending) > self._max_pending:
            del self._pending[: len(self._pending) - self._max_pending]
        return notice

    def error(self, title: str, description: str = "") -> Notice:
        return self.post(title, description, NoticeVariant.DESTRUCTIVE)

    def peek(self) -> List[Notice]:
        return list(self._pending)

    def drain(self) -> List[Notice]:
        pending, self._pending = self._pending, []
        return pending

    def __len__(self) -> int:
        return len(self._pending)
