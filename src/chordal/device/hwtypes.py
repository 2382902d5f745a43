from __future__ import annotations

import enum
import typing

import msgspec

from .eventsource import KeyCode


class KeyPress(enum.IntEnum):
    RELEASED = 0
    PRESSED = 1
    REPEATED = 2


class KeyEvent(msgspec.Struct, frozen=True):
    key: KeyCode
    press: KeyPress

    @classmethod
    def pressed(cls, key: KeyCode):
        return cls(key=key, press=KeyPress.PRESSED)

    @classmethod
    def released(cls, key: KeyCode):
        return cls(key=key, press=KeyPress.RELEASED)


class ModifierAnnotation(msgspec.Struct, frozen=True):
    alt: bool = False
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    capslock: bool = False


class AnnotatedKeyEvent(msgspec.Struct, frozen=True):
    key: KeyCode
    press: KeyPress
    annotation: ModifierAnnotation
    character: typing.Optional[str] = None
    is_modifier: bool = False


class RawKeyEvent(msgspec.Struct, frozen=True, omit_defaults=True):
    """A single key as the chord interpreter sees it: either a character or a named special key."""

    character: typing.Optional[str] = None
    name: typing.Optional[str] = None

    def __post_init__(self):
        if (self.character is None) == (self.name is None):
            raise ValueError("A raw key event needs exactly one of character or name.")
        if self.character is not None and len(self.character) != 1:
            raise ValueError("A raw key event character must be a single character.")

    @classmethod
    def char(cls, character: str):
        return cls(character=character)

    @classmethod
    def named(cls, name: str):
        return cls(name=name)

    @classmethod
    def parse(cls, text: str):
        "Parse a command-line key: '<name>' for a named key, anything else is a single character."
        if len(text) > 2 and text.startswith("<") and text.endswith(">"):
            return cls(name=text[1:-1])
        return cls(character=text)
