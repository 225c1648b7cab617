"""In-memory one-time code store."""

from __future__ import annotations

import heapq
import itertools
import logging
import math
import threading
import time
from typing import Callable, Dict, Hashable, List, Optional, Set, Tuple

from .config import OtpStoreSettings
from .logs import emit, mask_code
from .models import Entry, IssueOutcome

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], int]

STAGE_LABELS = {"issue": "Issue", "redeem": "Redeem", "sweep": "Sweep"}
EVENT_LABELS = {
    ("issue", IssueOutcome.CREATED.value): "New code issued",
    ("issue", IssueOutcome.REFRESHED.value): "Live code refreshed",
    ("redeem", "accepted"): "Code redeemed",
    ("redeem", "rejected"): "Code rejected",
    ("sweep", "evicted"): "Evicted stale entries",
}


def _log(stage: str, event: str, level: int = logging.INFO, **fields: object) -> None:
    emit(LOGGER, "Code Store", STAGE_LABELS, EVENT_LABELS, stage, event, level=level, **fields)


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _coerce_duration(value: object) -> float:
    try:
        duration = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    except OverflowError:
        # Integers too large for a float still clamp to the cap.
        return -math.inf if value < 0 else math.inf  # type: ignore[operator]
    if math.isnan(duration):
        return 0.0
    return duration


class CodeStore:
    """Issues short-lived codes and accepts each one at most once.

    Every entry whose expiry has passed or which has been redeemed is
    treated as absent and is evicted before the operation that observed
    it returns. Eviction is driven by a min-heap keyed on expiry; heap
    items left behind by a refresh no longer match the entry's current
    expiry and are discarded when they surface.
    """

    def __init__(
        self,
        settings: Optional[OtpStoreSettings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.settings = settings or OtpStoreSettings()
        self.max_duration_ms = self.settings.max_duration_ms
        self._clock = clock or wall_clock_ms
        self._entries: Dict[Hashable, Entry] = {}
        self._expiry_heap: List[Tuple[int, int, Hashable]] = []
        self._consumed: Set[Hashable] = set()
        self._sequence = itertools.count()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    def issue(self, code: int, duration_ms: object = None) -> bool:
        """Create or refresh ``code`` for ``duration_ms`` milliseconds.

        Returns True when a live entry for the code already existed. The
        duration is clamped to ``[0, max_duration_ms]``; values that are
        not numeric count as 0, which yields a code that is already expired.
        """
        with self._lock:
            now = self._clock()
            self._sweep(now)
            capped = self._cap_duration(duration_ms)
            current = self._entries.get(code)
            existed = current is not None and current.is_live(now)
            expires_at = now + capped
            self._entries[code] = Entry(expires_at=expires_at)
            heapq.heappush(self._expiry_heap, (expires_at, next(self._sequence), code))
        _log(
            "issue",
            IssueOutcome.from_existed(existed).value,
            code=mask_code(code),
            duration_ms=capped,
            expires_at=expires_at,
        )
        return existed

    def redeem(self, code: int) -> bool:
        """Accept ``code`` if it is live, consuming it.

        Unknown, expired and already consumed codes all return False.
        """
        with self._lock:
            now = self._clock()
            self._sweep(now)
            entry = self._entries.get(code)
            if entry is None:
                reason = "unknown"
            elif not entry.is_live(now):
                del self._entries[code]
                reason = "consumed" if entry.consumed else "expired"
            else:
                entry.consumed = True
                self._consumed.add(code)
                self._sweep(now)
                reason = None
        if reason is not None:
            _log("redeem", "rejected", code=mask_code(code), reason=reason)
            return False
        _log("redeem", "accepted", code=mask_code(code))
        return True

    use_once = redeem

    # Internals ---------------------------------------------------------
    def _cap_duration(self, duration_ms: object) -> int:
        duration = _coerce_duration(duration_ms)
        return int(min(max(duration, 0.0), self.max_duration_ms))

    def _sweep(self, now: int) -> int:
        removed = 0
        for code in self._consumed:
            if self._entries.pop(code, None) is not None:
                removed += 1
        self._consumed.clear()

        heap = self._expiry_heap
        while heap and heap[0][0] <= now:
            expires_at, _, code = heapq.heappop(heap)
            entry = self._entries.get(code)
            if entry is not None and entry.expires_at == expires_at:
                del self._entries[code]
                removed += 1

        if removed:
            _log("sweep", "evicted", level=logging.DEBUG, removed=removed, remaining=len(self._entries))
        return removed


def create_store(
    settings: Optional[OtpStoreSettings] = None,
    clock: Optional[Clock] = None,
) -> CodeStore:
    """Return a new, independent code store."""
    return CodeStore(settings=settings, clock=clock)
