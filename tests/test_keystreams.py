# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import collections.abc
import pathlib
import typing
from contextlib import aclosing

import trio
from trio.lowlevel import checkpoint

from chordal.chords.dispatcher import CommandResolved, EpisodeResult, ResolutionFailure
from chordal.chords.interpreter import ChordInterpreter, CommandTable
from chordal.device.eventsource import KeyCode
from chordal.device.hwtypes import AnnotatedKeyEvent, KeyEvent, KeyPress, ModifierAnnotation, RawKeyEvent
from chordal.device.keystreams import MakeRawKeys, ModifierTracking, OnlyPresses, make_keystream, pump_all
from chordal.device.recorded_keyboard import Recorder, load_recording
from chordal.settings import Settings

T = typing.TypeVar("T")


async def make_async_source(
    items: collections.abc.Sequence[T],
):
    for item in items:
        await checkpoint()
        yield item


def tap(key: KeyCode) -> list[KeyEvent]:
    return [KeyEvent.pressed(key), KeyEvent.released(key)]


async def test_modifier_tracking_and_presses():
    async with (
        aclosing(
            make_async_source(
                [
                    KeyEvent.pressed(KeyCode.KEY_LEFTSHIFT),
                    *tap(KeyCode.KEY_G),
                    KeyEvent.released(KeyCode.KEY_LEFTSHIFT),
                    *tap(KeyCode.KEY_CAPSLOCK),
                    *tap(KeyCode.KEY_X),
                ]
            )
        ) as keysource,
        pump_all(keysource, ModifierTracking(), OnlyPresses()) as resultsource,
    ):
        results = [event async for event in resultsource]
        assert results == [
            AnnotatedKeyEvent(
                key=KeyCode.KEY_LEFTSHIFT,
                press=KeyPress.PRESSED,
                annotation=ModifierAnnotation(shift=True),
                is_modifier=True,
            ),
            AnnotatedKeyEvent(key=KeyCode.KEY_G, press=KeyPress.PRESSED, annotation=ModifierAnnotation(shift=True)),
            AnnotatedKeyEvent(
                key=KeyCode.KEY_CAPSLOCK,
                press=KeyPress.PRESSED,
                annotation=ModifierAnnotation(capslock=True),
                is_modifier=True,
            ),
            AnnotatedKeyEvent(key=KeyCode.KEY_X, press=KeyPress.PRESSED, annotation=ModifierAnnotation(capslock=True)),
        ]


async def test_make_raw_keys():
    async with (
        aclosing(
            make_async_source(
                [
                    AnnotatedKeyEvent(
                        key=KeyCode.KEY_LEFTSHIFT,
                        press=KeyPress.PRESSED,
                        annotation=ModifierAnnotation(shift=True),
                        is_modifier=True,
                    ),
                    AnnotatedKeyEvent(
                        key=KeyCode.KEY_G,
                        press=KeyPress.PRESSED,
                        annotation=ModifierAnnotation(shift=True),
                        character="G",
                    ),
                    AnnotatedKeyEvent(key=KeyCode.KEY_BACKSPACE, press=KeyPress.PRESSED, annotation=ModifierAnnotation()),
                    AnnotatedKeyEvent(key=KeyCode.KEY_ENTER, press=KeyPress.PRESSED, annotation=ModifierAnnotation()),
                    AnnotatedKeyEvent(key=KeyCode.KEY_SPACE, press=KeyPress.PRESSED, annotation=ModifierAnnotation(), character=" "),
                ]
            )
        ) as keysource,
        pump_all(keysource, MakeRawKeys()) as resultsource,
    ):
        results = [event async for event in resultsource]
        assert results == [
            RawKeyEvent.char("G"),
            RawKeyEvent.named("backspace"),
            RawKeyEvent.named("return"),
            RawKeyEvent.char(" "),
        ]


async def test_keystream_factory():
    settings = Settings.for_test()
    key_events = [
        *tap(KeyCode.KEY_X),
        KeyEvent.pressed(KeyCode.KEY_LEFTSHIFT),
        *tap(KeyCode.KEY_G),
        KeyEvent.released(KeyCode.KEY_LEFTSHIFT),
        *tap(KeyCode.KEY_F),
        *tap(KeyCode.KEY_SPACE),
        *tap(KeyCode.KEY_BACKSPACE),
    ]
    send_channel, receive_channel = trio.open_memory_channel[KeyEvent](len(key_events))
    for event in key_events:
        send_channel.send_nowait(event)
    send_channel.close()
    async with make_keystream(receive_channel, settings) as keystream:
        results = [event async for event in keystream]
    assert results == [
        RawKeyEvent.char("x"),
        RawKeyEvent.char("G"),
        RawKeyEvent.char("f"),
        RawKeyEvent.char(" "),
        RawKeyEvent.named("backspace"),
    ]


async def test_keyboard_to_commands(tmp_path: pathlib.Path):
    settings = Settings.for_test()
    key_events = [*tap(KeyCode.KEY_X), *tap(KeyCode.KEY_S), *tap(KeyCode.KEY_X), *tap(KeyCode.KEY_SPACE), *tap(KeyCode.KEY_Q)]
    send_channel, receive_channel = trio.open_memory_channel[KeyEvent](len(key_events))
    for event in key_events:
        send_channel.send_nowait(event)
    send_channel.close()

    saved = []
    table = CommandTable({"save-buffer": lambda sequence: saved.append(sequence)})
    interpreter = ChordInterpreter.from_settings(settings, table, notify=lambda failure: None)
    recorder = Recorder()
    async with (
        make_keystream(receive_channel, settings) as keystream,
        pump_all(keystream, recorder, interpreter) as resultsource,
    ):
        results: list[EpisodeResult] = [result async for result in resultsource]

    assert results == [
        CommandResolved(sequence="C-x C-s", command="save-buffer"),
        ResolutionFailure(sequence="C-x q"),
    ]
    assert saved == ["C-x C-s"]

    recording = tmp_path / "keys.json"
    recorder.save_events(recording)
    assert load_recording(recording) == [
        RawKeyEvent.char("x"),
        RawKeyEvent.char("s"),
        RawKeyEvent.char("x"),
        RawKeyEvent.char(" "),
        RawKeyEvent.char("q"),
    ]
