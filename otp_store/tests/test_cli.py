from __future__ import annotations

import pytest

from otp_store.__main__ import main, run_selftest


def test_selftest_checks_all_pass(store):
    checks = run_selftest(store)
    assert len(checks) == 6
    assert all(check.passed for check in checks)


def test_selftest_exit_code(capsys):
    assert main(["selftest"]) == 0
    out = capsys.readouterr().out
    assert "6/6 checks passed" in out


def test_default_command_runs_selftest(capsys):
    assert main([]) == 0
    assert "FAIL" not in capsys.readouterr().out


def test_issue_command_redeems_once(capsys):
    assert main(["issue", "123456", "30000", "--redeem", "2"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "issue(123456) -> False (created)",
        "redeem #1 -> True",
        "redeem #2 -> False",
    ]


def test_redeem_is_not_a_standalone_command(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["redeem", "123456"])
    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


@pytest.mark.parametrize("cap", ["0", "-5"])
def test_non_positive_cap_is_a_usage_error(capsys, cap):
    with pytest.raises(SystemExit) as excinfo:
        main([f"--max-duration-ms={cap}", "selftest"])
    assert excinfo.value.code == 2
    assert "--max-duration-ms must be a positive" in capsys.readouterr().err


def test_custom_cap_applies_to_issue(capsys):
    assert main(["--max-duration-ms", "1000", "issue", "123456", "600000", "--redeem", "1"]) == 0
    assert capsys.readouterr().out.splitlines()[-1] == "redeem #1 -> True"
