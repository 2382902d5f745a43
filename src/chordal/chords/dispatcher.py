from __future__ import annotations

import enum
import logging
import typing

import msgspec

from ..commontypes import EpisodeFinished
from .builder import SequenceBuilder
from .keymap import Command, NestedKeymap, Unbound

if typing.TYPE_CHECKING:
    from ..device.hwtypes import RawKeyEvent
    from .keymap import KeymapStore
    from .modifiers import Grammar

logger = logging.getLogger(__name__)


class EpisodeState(enum.Enum):
    START = enum.auto()
    BUILDING = enum.auto()
    RESOLVED_COMMAND = enum.auto()
    RESOLVED_ERROR = enum.auto()


class Pending(msgspec.Struct, frozen=True):
    sequence: str


class CommandResolved(msgspec.Struct, frozen=True):
    sequence: str
    command: str


class ResolutionFailure(msgspec.Struct, frozen=True):
    sequence: str

    @property
    def message(self):
        return f"{self.sequence} is undefined"


EpisodeResult = Pending | CommandResolved | ResolutionFailure

TERMINAL_STATES = frozenset({EpisodeState.RESOLVED_COMMAND, EpisodeState.RESOLVED_ERROR})


class Episode:
    state: EpisodeState

    def __init__(self, grammar: Grammar, keymap: KeymapStore):
        self.keymap = keymap
        self.builder = SequenceBuilder(grammar)
        self.state = EpisodeState.START

    @property
    def sequence(self) -> str:
        return self.builder.sequence

    @property
    def prompt(self) -> str:
        return self.builder.prompt

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def events_consumed(self) -> int:
        return self.builder.events_consumed

    def handle_key_event(self, event: RawKeyEvent) -> EpisodeResult:
        if self.finished:
            raise EpisodeFinished(self.sequence)
        self.state = EpisodeState.BUILDING
        if not self.builder.feed(event):
            return Pending(sequence=self.sequence)
        return self.dispatch()

    def dispatch(self) -> EpisodeResult:
        sequence = self.sequence
        binding = self.keymap.lookup(sequence)
        match binding:
            case Command(handle=handle):
                logger.debug("%s resolved to %s", sequence, handle)
                self.state = EpisodeState.RESOLVED_COMMAND
                return CommandResolved(sequence=sequence, command=handle)
            case NestedKeymap():
                logger.debug("%s is a prefix key; continuing", sequence)
                return Pending(sequence=sequence)
            case Unbound():
                logger.debug("%s is unbound", sequence)
                self.state = EpisodeState.RESOLVED_ERROR
                return ResolutionFailure(sequence=sequence)
            case _:
                typing.assert_never(binding)
