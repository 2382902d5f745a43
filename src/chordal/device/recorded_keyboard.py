# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import pathlib
import typing
from contextlib import aclosing

import msgspec
import trio

from .hwtypes import KeyEvent, RawKeyEvent
from .keystreams import Section

recording_decoder = msgspec.json.Decoder(list[RawKeyEvent])
hardware_recording_decoder = msgspec.json.Decoder(list[KeyEvent])

Recordable = typing.TypeVar("Recordable", RawKeyEvent, KeyEvent)


class Recorder(Section):
    """Passes events through unchanged, keeping a copy of each for later replay.

    Works on either end of the keystream: hardware key events or the raw key events the chord interpreter reads.
    """

    def __init__(self):
        self.events: list[RawKeyEvent | KeyEvent] = []

    def save_events(self, path: pathlib.Path):
        path.write_bytes(msgspec.json.encode(self.events))

    async def pump(self, source: trio.MemoryReceiveChannel[Recordable], sink: trio.MemorySendChannel[Recordable]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                self.events.append(event)
                await sink.send(event)


def load_recording(path: pathlib.Path) -> list[RawKeyEvent]:
    return recording_decoder.decode(path.read_bytes())


def load_hardware_recording(path: pathlib.Path) -> list[KeyEvent]:
    return hardware_recording_decoder.decode(path.read_bytes())


async def replay(events: list[Recordable], sink: trio.MemorySendChannel[Recordable]):
    async with sink:
        for event in events:
            await sink.send(event)
