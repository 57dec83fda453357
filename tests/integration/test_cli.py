"""
Integration tests for the command line entry point.
"""
import threading
import time

import httpx
import pytest

from configctl import main as cli


@pytest.fixture
def run(local_controller, restore_root_logger, capsys):
    """Run a client command against local_controller, returning (exit code, stdout)."""
    def _run(*argv):
        code = cli.main(["--url", local_controller.endpoint, *argv])
        return code, capsys.readouterr().out
    return _run


def test_set_and_get(run, local_controller):
    assert run("set", "HOST", "db.local") == (0, "")
    assert local_controller.get("HOST") == ("db.local", True)

    assert run("get", "HOST") == (0, "db.local\n")


def test_get_missing_exits_nonzero(run):
    code, out = run("get", "missing")

    assert code == 1
    assert out == ""


def test_prefixed_commands(run, local_controller):
    run("set-for", "svc", "PORT", "9000")
    run("add-for", "svc", "ARGS", "-v", "--delim", " ")
    run("add-for", "svc", "ARGS", "-q", "--delim", " ")

    assert run("get-for", "svc", "PORT") == (0, "9000\n")
    assert local_controller.get_for("svc", "ARGS") == ("-v -q", True)
    assert run("dump-for", "svc", "PORT") == (0, "PORT=9000\n")


def test_add_and_dump(run):
    run("add", "LIST", "a")
    run("add", "LIST", "b")

    assert run("dump", "LIST") == (0, "LIST=a,b\n")


def test_serve_until_stopped(restore_root_logger, capsys):
    stop = threading.Event()
    result = {}

    thread = threading.Thread(target=lambda: result.update(code=cli.serve("127.0.0.1", 0, stop)))
    thread.start()

    endpoint = ""
    deadline = time.monotonic() + 5.0
    while not endpoint and time.monotonic() < deadline:
        endpoint = capsys.readouterr().out.strip()
        time.sleep(0.05)

    assert endpoint.startswith("http://127.0.0.1:")
    assert httpx.get(endpoint + "/alive").text == "alive"

    stop.set()
    thread.join(5.0)

    assert result["code"] == 0
