"""In-memory store for short-lived, single-use numeric codes."""

from .config import MAX_DURATION_MS, OtpStoreSettings
from .models import Entry, IssueOutcome
from .store import CodeStore, create_store

__all__ = [
    "CodeStore",
    "create_store",
    "Entry",
    "IssueOutcome",
    "OtpStoreSettings",
    "MAX_DURATION_MS",
]
