from __future__ import annotations

import os
import re
import subprocess
import sys
import threading
from pathlib import Path

import pytest

import lib_log_rotate
from lib_log_rotate import Logger, RotationResult, TraceLevel, default_logger, new_logger
from lib_log_rotate.logger import exit_process
from lib_log_rotate.adapters.rotation import RotationEngine
from lib_log_rotate.application.ports import RotationPort
from tests._helpers import RecordingReporter, SteppingClock
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

LINE_RE = re.compile(r"^\[(?P<ts>[^\]]+)\]\[(?P<tag>Debug|Info|Warning|Error|Fatal)\]\[(?P<body>.*)\]$")


class CountingRotation(RotationPort):
    def __init__(self) -> None:
        self.calls = 0

    def rotate(self) -> RotationResult:
        self.calls += 1
        return RotationResult(ok=True)


class ExitRecorder:
    def __init__(self) -> None:
        self.codes: list[int] = []

    def __call__(self, code: int) -> None:
        self.codes.append(code)


def _logger(primary: Path, level: TraceLevel, reporter: RecordingReporter, clock: SteppingClock, **kwargs: object) -> Logger:
    return Logger(primary, level, reporter=reporter, clock=clock, **kwargs)  # type: ignore[arg-type]


def test_positional_call_writes_formatted_line(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock)

    log.error("disk full", 3, None)

    assert primary.read_text() == "[2026-10-19T12:00:00Z][Error][disk full, 3, None]\n"
    assert reporter.reports == []


def test_template_call_writes_formatted_line(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock)

    log.infof("%s took %.1fs", "sync", 1.25)

    assert primary.read_text() == "[2026-10-19T12:00:00Z][Info][sync took 1.2s]\n"


def test_template_without_values_writes_literal_percent(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock)

    log.infof("100%% done")
    log.infof("%d%% done", 100)

    assert primary.read_text().splitlines() == [
        "[2026-10-19T12:00:00Z][Info][100% done]",
        "[2026-10-19T12:00:01Z][Info][100% done]",
    ]


@pytest.mark.parametrize(
    "method, tag",
    [("debug", "Debug"), ("info", "Info"), ("warning", "Warning"), ("error", "Error")],
)
def test_each_non_fatal_entry_point_uses_its_tag(
    method: str, tag: str, primary: Path, reporter: RecordingReporter, clock: SteppingClock
) -> None:
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock)

    getattr(log, method)("plain")
    getattr(log, f"{method}f")("tmpl %d", 1)

    bodies = [LINE_RE.match(line) for line in primary.read_text().splitlines()]
    assert [(match["tag"], match["body"]) for match in bodies if match] == [(tag, "plain"), (tag, "tmpl 1")]


def test_threshold_suppresses_lower_levels(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    exits = ExitRecorder()
    log = _logger(primary, TraceLevel.WARNING, reporter, clock, exit_hook=exits)

    log.debug("d")
    log.debugf("%s", "d")
    log.info("i")
    log.infof("%s", "i")
    assert not primary.exists()

    log.warning("w")
    log.error("e")
    with pytest.raises(SystemExit):
        log.fatal("f")

    tags = [LINE_RE.match(line)["tag"] for line in primary.read_text().splitlines()]  # type: ignore[index]
    assert tags == ["Warning", "Error", "Fatal"]


def test_suppressed_calls_do_no_formatting_or_rotation(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    class Exploding:
        def __str__(self) -> str:
            raise AssertionError("formatted a suppressed call")

    rotation = CountingRotation()
    log = _logger(primary, TraceLevel.ERROR, reporter, clock, rotation=rotation)

    log.warning(Exploding())
    log.infof("%s", Exploding())

    assert rotation.calls == 0
    assert clock.current.second == 0
    assert not primary.exists()


def test_embedded_newlines_stay_on_one_physical_line(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock)

    log.warning("line1\nline2")
    log.warningf("%s\n%s", "a", "b")

    lines = primary.read_text().splitlines()
    assert [LINE_RE.match(line)["body"] for line in lines] == ["line1 line2", "a b"]  # type: ignore[index]


def test_every_write_rotates_into_view_file(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock)

    for name in ("A", "B", "C"):
        log.info(name)

    view = primary.parent / "view_error.log"
    bodies = [LINE_RE.match(line)["body"] for line in view.read_text().splitlines()]  # type: ignore[index]
    assert bodies == ["C", "B", "A"]


def test_crossing_threshold_archives_and_restarts_primary(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock)
    payload = "x" * 60

    written = 0
    while primary.exists() or written == 0:
        log.error(payload, written)
        written += 1
        assert written < 100

    archives = sorted(primary.parent.glob("view_error.log.*"))
    assert len(archives) == 1
    archived = archives[0].read_text().splitlines()
    assert len(archived) == written
    assert LINE_RE.match(archived[0])["body"] == f"{payload}, {written - 1}"  # type: ignore[index]
    assert LINE_RE.match(archived[-1])["body"] == f"{payload}, 0"  # type: ignore[index]
    assert not (primary.parent / "view_error.log").exists()

    log.info("after archive")
    assert primary.read_text().count("\n") == 1
    assert "after archive" in (primary.parent / "view_error.log").read_text()


def test_concurrent_writers_never_interleave(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    rotation = CountingRotation()
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock, rotation=rotation)
    threads_count, calls_each = 8, 40
    barrier = threading.Barrier(threads_count)

    def worker(index: int) -> None:
        barrier.wait()
        for call in range(calls_each):
            log.infof("worker=%02d call=%03d %s", index, call, "y" * 50)

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    lines = primary.read_text().splitlines()
    assert len(lines) == threads_count * calls_each
    assert rotation.calls == threads_count * calls_each
    seen = set()
    for line in lines:
        match = LINE_RE.match(line)
        assert match is not None, line
        assert re.fullmatch(r"worker=\d\d call=\d\d\d y{50}", match["body"])
        seen.add(match["body"][:18])
    assert len(seen) == threads_count * calls_each


def test_concurrent_writers_with_real_rotation_keep_view_consistent(
    log_dir: Path, primary: Path, reporter: RecordingReporter, clock: SteppingClock
) -> None:
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock, size_threshold=10_000_000)

    def worker(index: int) -> None:
        for call in range(10):
            log.error(index, call)

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    primary_lines = primary.read_text().splitlines()
    view_lines = (log_dir / "view_error.log").read_text().splitlines()
    assert len(primary_lines) == 40
    assert view_lines == list(reversed(primary_lines))
    assert reporter.reports == []


def test_fatal_writes_then_exits_with_status_one(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock)

    with pytest.raises(SystemExit) as excinfo:
        log.fatal("unrecoverable")

    assert excinfo.value.code == 1
    assert primary.read_text() == "[2026-10-19T12:00:00Z][Fatal][unrecoverable]\n"


def test_fatalf_calls_custom_exit_hook(primary: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    exits = ExitRecorder()
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock, exit_hook=exits)

    with pytest.raises(SystemExit):
        log.fatalf("code %d", 7)

    assert exits.codes == [1]
    assert "[Fatal][code 7]" in primary.read_text()


def _run_script(script: str, *args: str) -> subprocess.CompletedProcess[str]:
    src = Path(lib_log_rotate.__file__).resolve().parents[1]
    env = dict(os.environ, PYTHONPATH=os.pathsep.join(filter(None, [str(src), os.environ.get("PYTHONPATH")])))
    return subprocess.run(
        [sys.executable, "-c", script, *args],
        capture_output=True,
        text=True,
        env=env,
        timeout=60,
    )


def test_fatal_terminates_a_real_process(tmp_path: Path) -> None:
    target = tmp_path / "logs" / "error.log"
    target.parent.mkdir()
    script = (
        "import sys\n"
        "from lib_log_rotate import Logger\n"
        "log = Logger(sys.argv[1], 'debug')\n"
        "log.fatal('process going down')\n"
        "print('unreachable')\n"
    )

    completed = _run_script(script, str(target))

    assert completed.returncode == 1
    assert "unreachable" not in completed.stdout
    assert "[Fatal][process going down]" in target.read_text()


def test_exit_process_raises_system_exit_on_main_thread() -> None:
    with pytest.raises(SystemExit) as excinfo:
        exit_process(1)

    assert excinfo.value.code == 1


def test_fatal_from_worker_thread_terminates_the_process(tmp_path: Path) -> None:
    target = tmp_path / "logs" / "error.log"
    target.parent.mkdir()
    script = (
        "import sys, threading\n"
        "from lib_log_rotate import Logger\n"
        "log = Logger(sys.argv[1], 'debug')\n"
        "worker = threading.Thread(target=log.fatal, args=('worker gave up',))\n"
        "worker.start()\n"
        "worker.join()\n"
        "print('still alive')\n"
    )

    completed = _run_script(script, str(target))

    assert completed.returncode == 1
    assert "still alive" not in completed.stdout
    assert "[Fatal][worker gave up]" in target.read_text()


def test_failure_is_reported_once_on_stderr_without_logging_setup(tmp_path: Path) -> None:
    target = tmp_path / "missing-dir" / "error.log"
    script = (
        "import sys\n"
        "from lib_log_rotate import Logger\n"
        "Logger(sys.argv[1], 'debug').error('lost')\n"
    )

    completed = _run_script(script, str(target))

    assert completed.returncode == 0
    assert completed.stderr.count("opening log file failed") == 1


def test_open_failure_is_reported_and_skips_rotation(tmp_path: Path, reporter: RecordingReporter, clock: SteppingClock) -> None:
    rotation = CountingRotation()
    target = tmp_path / "missing-dir" / "error.log"
    log = _logger(target, TraceLevel.DEBUG, reporter, clock, rotation=rotation)

    log.error("lost")

    assert reporter.messages == ["opening log file failed"]
    assert reporter.reports[0][1] == target
    assert isinstance(reporter.reports[0][2], OSError)
    assert rotation.calls == 0
    assert not target.parent.exists()


def test_write_failure_is_reported_and_still_rotates(
    primary: Path, reporter: RecordingReporter, clock: SteppingClock, monkeypatch: pytest.MonkeyPatch
) -> None:
    import lib_log_rotate.logger as logger_module

    class BrokenStream:
        def write(self, data: bytes) -> int:
            raise OSError("disk full")

        def close(self) -> None:
            raise OSError("close failed")

    monkeypatch.setattr(logger_module, "open_append", lambda path: BrokenStream())
    rotation = CountingRotation()
    log = _logger(primary, TraceLevel.DEBUG, reporter, clock, rotation=rotation)

    log.error("never lands")

    assert reporter.messages == ["writing log failed", "closing log file failed"]
    assert rotation.calls == 1


def test_loggers_on_different_files_rotate_independently(
    log_dir: Path, reporter: RecordingReporter, clock: SteppingClock
) -> None:
    alpha = _logger(log_dir / "alpha.log", TraceLevel.DEBUG, reporter, clock)
    beta = _logger(log_dir / "beta.log", TraceLevel.DEBUG, reporter, clock)

    alpha.info("a")
    beta.info("b")

    assert "[a]" in (log_dir / "view_alpha.log").read_text()
    assert "[b]" in (log_dir / "view_beta.log").read_text()
    assert not (log_dir / "view_error.log").exists()


def test_logger_accepts_level_names_and_ranks(primary: Path) -> None:
    assert Logger(primary, "warning").trace_level is TraceLevel.WARNING
    assert Logger(primary, 4).trace_level is TraceLevel.ERROR
    with pytest.raises(ValueError):
        Logger(primary, "loud")


def test_default_rotation_engine_is_bound_to_the_logger_path(primary: Path) -> None:
    log = Logger(primary)
    assert isinstance(log.rotation, RotationEngine)
    assert log.rotation.primary_path == primary
    assert log.rotation.view_path == primary.parent / "view_error.log"


def test_new_logger_and_default_logger(primary: Path) -> None:
    custom = new_logger(primary, TraceLevel.ERROR)
    assert custom.file_path == primary
    assert custom.trace_level is TraceLevel.ERROR

    first = default_logger()
    second = default_logger()
    assert first.file_path == Path("./logs/error.log")
    assert first.trace_level is TraceLevel.DEBUG
    assert first is not second


def test_repr_mentions_path_and_level(primary: Path) -> None:
    assert "TraceLevel.INFO" in repr(Logger(primary, TraceLevel.INFO))
