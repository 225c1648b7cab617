"""Value types shared across the store and its consumers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IssueOutcome(str, Enum):
    CREATED = "created"
    REFRESHED = "refreshed"

    @classmethod
    def from_existed(cls, existed: bool) -> "IssueOutcome":
        return cls.REFRESHED if existed else cls.CREATED


@dataclass
class Entry:
    """Expiry and consumption state for one issued code."""

    expires_at: int
    consumed: bool = False

    def is_expired(self, now: int) -> bool:
        return now >= self.expires_at

    def is_live(self, now: int) -> bool:
        return not self.consumed and not self.is_expired(now)
