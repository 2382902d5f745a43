import pathlib

import msgspec
import pytest

from chordal.device.eventsource import KeyCode
from chordal.device.hwtypes import KeyEvent, RawKeyEvent
from chordal.scripts import describe_cli, replay_cli
from chordal.settings import Settings


@pytest.fixture
def settings_path(tmp_path: pathlib.Path):
    path = tmp_path / "settings.json"
    Settings.for_test().save(path)
    return path


@pytest.mark.parametrize(
    "keys,expected_output,expected_code",
    (
        (["x", "s"], "C-x C-s runs the command save-buffer", 0),
        (["g", "<backspace>"], "M-DEL runs the command backward-kill-word", 0),
        (["x", " ", "b"], "C-x b runs the command switch-to-buffer", 0),
        ([" "], "SPC is undefined", 1),
        (["x"], "C-x is incomplete", 1),
    ),
)
def test_describe(settings_path: pathlib.Path, capsys, keys, expected_output, expected_code):
    code = describe_cli(["chordal-describe", str(settings_path), *keys])
    assert code == expected_code
    assert capsys.readouterr().out.strip() == expected_output


def test_replay(settings_path: pathlib.Path, tmp_path: pathlib.Path, capsys):
    recording = tmp_path / "keys.json"
    recording.write_bytes(msgspec.json.encode([RawKeyEvent.parse(k) for k in ["x", "s", "x", "x", "G", "f", "x"]]))
    assert replay_cli(["chordal-replay", str(settings_path), str(recording)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "C-x C-s runs the command save-buffer",
        "C-x C-x is undefined",
        "C-M-f runs the command forward-sexp",
    ]


def test_describe_rejects_bad_keys(settings_path: pathlib.Path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        describe_cli(["chordal-describe", str(settings_path), "x", "ab"])
    assert excinfo.value.code == 2
    assert "ab" in capsys.readouterr().err


def tap(key: KeyCode) -> list[KeyEvent]:
    return [KeyEvent.pressed(key), KeyEvent.released(key)]


def test_replay_hardware(settings_path: pathlib.Path, tmp_path: pathlib.Path, capsys):
    recording = tmp_path / "hardware.json"
    events = [
        *tap(KeyCode.KEY_X),
        *tap(KeyCode.KEY_S),
        KeyEvent.pressed(KeyCode.KEY_LEFTSHIFT),
        *tap(KeyCode.KEY_G),
        KeyEvent.released(KeyCode.KEY_LEFTSHIFT),
        *tap(KeyCode.KEY_F),
        *tap(KeyCode.KEY_X),
        *tap(KeyCode.KEY_SPACE),
        *tap(KeyCode.KEY_B),
        *tap(KeyCode.KEY_G),
        *tap(KeyCode.KEY_BACKSPACE),
    ]
    recording.write_bytes(msgspec.json.encode(events))
    assert replay_cli(["chordal-replay", str(settings_path), str(recording), "--hardware"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "C-x C-s runs the command save-buffer",
        "C-M-f runs the command forward-sexp",
        "C-x b runs the command switch-to-buffer",
        "M-DEL runs the command backward-kill-word",
    ]
