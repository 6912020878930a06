from __future__ import annotations

import logging
from pathlib import Path

import pytest
from rich.console import Console

from lib_log_rotate.adapters.reporter import ConsoleReporter
from lib_log_rotate.application.ports.reporter import ReporterPort


def test_console_reporter_satisfies_port(record_console: Console) -> None:
    assert isinstance(ConsoleReporter(console=record_console), ReporterPort)


def test_console_reporter_prints_message_path_and_error(record_console: Console) -> None:
    reporter = ConsoleReporter(console=record_console)

    reporter.report("opening log file failed", path=Path("logs/error.log"), error=PermissionError("denied"))

    output = record_console.export_text()
    assert "opening log file failed" in output
    assert "error.log" in output
    assert "denied" in output


def test_console_reporter_does_not_interpret_markup(record_console: Console) -> None:
    reporter = ConsoleReporter(console=record_console)

    reporter.report("writing log failed", path=Path("[bold]odd[/bold].log"))

    assert "[bold]odd[/bold].log" in record_console.export_text()


def test_console_reporter_forwards_to_stdlib_logging(record_console: Console, caplog: pytest.LogCaptureFixture) -> None:
    reporter = ConsoleReporter(console=record_console)

    with caplog.at_level(logging.WARNING, logger="lib_log_rotate.adapters.reporter"):
        reporter.report("closing log file failed", error=OSError("io"))

    assert [record.getMessage() for record in caplog.records] == ["closing log file failed (io)"]


def test_console_reporter_defaults_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    ConsoleReporter().report("writing log failed")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "writing log failed" in captured.err
