from __future__ import annotations

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from otp_store import CodeStore, OtpStoreSettings, create_store


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store_settings() -> OtpStoreSettings:
    return OtpStoreSettings(max_duration_ms=5 * 60 * 1000)


@pytest.fixture
def store(store_settings: OtpStoreSettings, clock: FakeClock) -> CodeStore:
    return create_store(store_settings, clock=clock)
