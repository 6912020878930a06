"""Smoke tests for the package surface and metadata banner."""

from __future__ import annotations

import pytest

import lib_log_rotate
from lib_log_rotate import __init__conf__


def test_summary_info_contains_metadata() -> None:
    summary = __init__conf__.summary_info()
    assert "Info for lib_log_rotate" in summary
    assert f"version       = {__init__conf__.version}" in summary
    assert summary.endswith("\n")


def test_summary_info_is_idempotent() -> None:
    assert __init__conf__.summary_info() == __init__conf__.summary_info()


def test_print_info_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    __init__conf__.print_info()
    assert capsys.readouterr().out == __init__conf__.summary_info()


@pytest.mark.parametrize("name", lib_log_rotate.__all__)
def test_public_names_are_importable(name: str) -> None:
    assert getattr(lib_log_rotate, name) is not None
