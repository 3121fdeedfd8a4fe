import sys
import threading

import pytest
from feather.errors import IOFailure
from feather.jobs.launcher import LaunchState, launch, resolve_executable
from conftest import make_script


class Recorder:
    """Completion callback that remembers every call and its thread."""

    def __init__(self):
        self.events = []
        self.threads = []

    def __call__(self, event):
        self.events.append(event)
        self.threads.append(threading.current_thread())


def test_missing_executable_fails_synchronously(tmp_path):
    recorder = Recorder()
    with pytest.raises(IOFailure):
        launch(str(tmp_path / "Cotton.exe"), ["lighten", "specs.json"], recorder)
    with pytest.raises(IOFailure):
        launch("surely-not-a-feather-worker", ["lighten"], recorder)
    assert recorder.events == []


def test_not_executable(tmp_path):
    script = tmp_path / "plain.txt"
    script.write_text("not a program")
    with pytest.raises(IOFailure, match="not executable"):
        resolve_executable(str(script))


def test_completion_fires_once(tmp_path):
    worker = make_script(tmp_path / "ok.py", "import sys\nsys.exit(0)\n")
    recorder = Recorder()
    handle = launch(str(worker), ["lighten", "specs.json"], recorder)
    event = handle.wait(timeout=30)
    assert event.returncode == 0
    assert not event.cancelled and not event.timed_out
    assert recorder.events == [event]
    assert recorder.threads[0] is not threading.main_thread()
    assert handle.state is LaunchState.COMPLETED
    assert handle.done()


def test_exit_code_is_passed_through(tmp_path):
    worker = make_script(tmp_path / "fail.py", "import sys\nsys.exit(3)\n")
    recorder = Recorder()
    event = launch(str(worker), [], recorder).wait(timeout=30)
    assert event.returncode == 3
    assert len(recorder.events) == 1


def test_arguments_are_passed(tmp_path):
    out = tmp_path / "argv.txt"
    worker = make_script(
        tmp_path / "argv.py",
        f"import sys\nopen({str(out)!r}, 'w').write(' '.join(sys.argv[1:]))\n",
    )
    launch(str(worker), ["printable", "/tmp/specs.json"]).wait(timeout=30)
    assert out.read_text() == "printable /tmp/specs.json"


def test_with_log_tees_output(tmp_path):
    worker = make_script(
        tmp_path / "chatty.py",
        "import sys\nprint('voxelizing')\nprint('oops', file=sys.stderr)\n",
    )
    log = tmp_path / "worker-log.txt"
    launch(str(worker), [], log_path=log).wait(timeout=30)
    lines = log.read_text().splitlines()
    assert "voxelizing" in lines
    assert "oops" in lines


def test_detached_worker_writes_log_directly(tmp_path):
    worker = make_script(
        tmp_path / "chatty.py",
        "import sys\nprint('voxelizing')\nprint('oops', file=sys.stderr)\n",
    )
    log = tmp_path / "worker-log.txt"
    handle = launch(str(worker), [], log_path=log, detached=True)
    assert handle.process.stdout is None
    assert handle.wait(timeout=30).returncode == 0
    lines = log.read_text().splitlines()
    assert "voxelizing" in lines
    assert "oops" in lines


def test_cancel(tmp_path):
    worker = make_script(tmp_path / "slow.py", "import time\ntime.sleep(60)\n")
    recorder = Recorder()
    handle = launch(str(worker), [], recorder)
    assert handle.state is LaunchState.RUNNING
    assert handle.cancel()
    event = handle.wait(timeout=30)
    assert event.cancelled
    assert event.returncode != 0
    assert len(recorder.events) == 1
    assert not handle.cancel()


def test_cancel_agrees_with_completion(tmp_path):
    """Racing cancel against a worker that exits by itself stays consistent."""
    worker = make_script(tmp_path / "quick.py", "pass\n")
    for _ in range(5):
        handle = launch(str(worker), [])
        cancelled = handle.cancel()
        assert handle.wait(timeout=30).cancelled is cancelled
        assert not handle.cancel()


def test_timeout(tmp_path):
    worker = make_script(tmp_path / "slow.py", "import time\ntime.sleep(60)\n")
    recorder = Recorder()
    event = launch(str(worker), [], recorder, timeout=0.5).wait(timeout=30)
    assert event.timed_out
    assert len(recorder.events) == 1


def test_callback_error_does_not_break_completion(tmp_path):
    worker = make_script(tmp_path / "ok.py", "pass\n")

    def broken(event):
        raise RuntimeError("post process failed")

    event = launch(str(worker), [], broken).wait(timeout=30)
    assert event.returncode == 0


def test_interpreter_on_path():
    assert resolve_executable(sys.executable)
