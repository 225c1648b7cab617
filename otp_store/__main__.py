"""Command-line self-test and demo for the code store."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

from . import CodeStore, OtpStoreSettings, create_store

TEN_MINUTES_MS = 10 * 60 * 1000


@dataclass
class Check:
    name: str
    description: str
    expected: bool
    actual: bool

    @property
    def passed(self) -> bool:
        return self.actual is self.expected


def run_selftest(store: Optional[CodeStore] = None) -> List[Check]:
    store = store or create_store()
    return [
        Check("New key issue", "issue 123456 for 10 minutes", False, store.issue(123456, TEN_MINUTES_MS)),
        Check(
            "Key re-issue & duration overwrite",
            "issue 123456 again for 30 seconds",
            True,
            store.issue(123456, 30_000),
        ),
        Check("First use", "redeem 123456", True, store.redeem(123456)),
        Check("Second use (single-use)", "redeem 123456 again", False, store.redeem(123456)),
        Check(
            "Duration cap enforcement",
            "issue 999888 for 10 minutes (capped to 5)",
            False,
            store.issue(999888, TEN_MINUTES_MS),
        ),
        Check("Invalid passcode rejection", "redeem never-issued 999999", False, store.redeem(999999)),
    ]


def _print_report(checks: Sequence[Check]) -> None:
    width = 60
    print("=" * width)
    for index, check in enumerate(checks, start=1):
        status = "PASS" if check.passed else "FAIL"
        print(f"{index}. {check.name}: {status}")
        print(f"   {check.description} -> {check.actual} (expected {check.expected})")
    print("=" * width)
    passed = sum(1 for check in checks if check.passed)
    print(f"{passed}/{len(checks)} checks passed")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="One-time code store self-test")
    parser.add_argument(
        "--max-duration-ms",
        type=int,
        default=None,
        help="Override the validity cap in milliseconds",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log store operations")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("selftest", help="Run the scripted issue/redeem checks (default)")
    issue = sub.add_parser("issue", help="Issue a code, then optionally redeem it")
    issue.add_argument("code", type=int)
    issue.add_argument("duration_ms", nargs="?", default=None)
    issue.add_argument("--redeem", type=int, default=0, help="Number of redemption attempts")
    args = parser.parse_args(argv)
    if args.max_duration_ms is not None and args.max_duration_ms <= 0:
        parser.error("--max-duration-ms must be a positive number of milliseconds")
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
    )
    settings = (
        OtpStoreSettings(max_duration_ms=args.max_duration_ms)
        if args.max_duration_ms is not None
        else OtpStoreSettings()
    )
    store = create_store(settings)

    if args.command == "issue":
        existed = store.issue(args.code, args.duration_ms)
        print(f"issue({args.code}) -> {existed} ({'refreshed' if existed else 'created'})")
        for attempt in range(1, args.redeem + 1):
            print(f"redeem #{attempt} -> {store.redeem(args.code)}")
        return 0

    checks = run_selftest(store)
    _print_report(checks)
    return 0 if all(check.passed for check in checks) else 1


if __name__ == "__main__":
    sys.exit(main())
