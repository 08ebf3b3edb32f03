import pytest

from slayfi import launcher
from slayfi.launcher import start_program


class _FakePopen:
    calls = []

    def __init__(self, args, **kwargs):
        _FakePopen.calls.append((args, kwargs))


@pytest.fixture
def fake_popen(monkeypatch):
    _FakePopen.calls = []
    monkeypatch.setattr(launcher.subprocess, "Popen", _FakePopen)
    return _FakePopen


def test_start_program_detaches_through_nohup(fake_popen) -> None:
    assert start_program("firefox --new-window") is True

    args, kwargs = fake_popen.calls[0]
    assert args == ["sh", "-c", "nohup firefox --new-window > /dev/null 2>&1 &"]
    assert kwargs["stdout"] is launcher.DEVNULL


@pytest.mark.parametrize("exec_cmd", ["", "   "])
def test_empty_command_not_started(fake_popen, exec_cmd) -> None:
    assert start_program(exec_cmd) is False
    assert fake_popen.calls == []


def test_spawn_failure(monkeypatch) -> None:
    def broken_popen(args, **kwargs):
        raise OSError("sh not found")

    monkeypatch.setattr(launcher.subprocess, "Popen", broken_popen)
    assert start_program("firefox") is False
