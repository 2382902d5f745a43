from __future__ import annotations

import abc
import collections.abc
import logging
import typing
from contextlib import aclosing

import trio
import trio_util

from ..commontypes import ChordalError, UnknownCommand
from ..device.keystreams import Section
from ..util import invoke_awaiting
from .dispatcher import CommandResolved, Episode, EpisodeResult, Pending, ResolutionFailure

if typing.TYPE_CHECKING:
    from ..device.hwtypes import RawKeyEvent
    from ..settings import Settings
    from .keymap import KeymapStore
    from .modifiers import Grammar

logger = logging.getLogger(__name__)

NotifyCallback = collections.abc.Callable[[ResolutionFailure], None]
ReceiveCallback = collections.abc.Callable[[], collections.abc.Awaitable["RawKeyEvent"]]


def log_failure(failure: ResolutionFailure):
    logger.warning("%s", failure.message)


class CommandExecutor(abc.ABC):
    last_command: typing.Optional[str] = None

    @abc.abstractmethod
    async def execute(self, command: str, **context): ...


class CommandTable(CommandExecutor):
    """Runs commands by name.

    Commands may be plain or async callables. Each is called with whichever of the context keyword
    arguments (`sequence`, `interpreter`) its signature asks for.
    """

    commands: dict[str, collections.abc.Callable]

    def __init__(self, commands: typing.Optional[collections.abc.Mapping[str, collections.abc.Callable]] = None):
        self.commands = dict(commands or {})
        self.last_command = None

    def register(self, name: str, c: collections.abc.Callable):
        self.commands[name] = c
        return c

    def command(self, name: str):
        def decorator(c: collections.abc.Callable):
            return self.register(name, c)

        return decorator

    async def execute(self, command: str, **context):
        try:
            c = self.commands[command]
        except KeyError:
            raise UnknownCommand(command) from None
        return await invoke_awaiting(c, **context)


class ChordInterpreter(Section):
    episode: typing.Optional[Episode]
    prompt: trio_util.AsyncValue[str]

    def __init__(
        self,
        *,
        grammar: Grammar,
        keymap: KeymapStore,
        executor: CommandExecutor,
        notify: NotifyCallback = log_failure,
    ):
        self.grammar = grammar
        self.keymap = keymap
        self.executor = executor
        self.notify = notify
        self.episode = None
        # the keys typed so far in the current episode, for echoing; empty between episodes
        self.prompt = trio_util.AsyncValue("")

    @classmethod
    def from_settings(cls, settings: Settings, executor: CommandExecutor, notify: NotifyCallback = log_failure):
        return cls(grammar=settings.grammar, keymap=settings.make_keymap(), executor=executor, notify=notify)

    def set_grammar(self, grammar: Grammar):
        if self.episode is not None:
            raise ChordalError("The grammar cannot change in the middle of an episode.")
        self.grammar = grammar

    def _current_episode(self) -> Episode:
        if self.episode is None:
            logger.debug("Starting episode")
            self.episode = Episode(self.grammar, self.keymap)
        return self.episode

    def _end_episode(self):
        self.episode = None
        self.prompt.value = ""

    def abort(self):
        if self.episode is not None:
            logger.debug("Discarding unfinished episode at %r", self.episode.prompt)
        self._end_episode()

    async def handle_key_event(self, event: RawKeyEvent) -> EpisodeResult:
        episode = self._current_episode()
        result = episode.handle_key_event(event)
        match result:
            case Pending():
                self.prompt.value = episode.prompt
            case CommandResolved(command=command, sequence=sequence):
                self._end_episode()
                self.executor.last_command = command
                await self.executor.execute(command, sequence=sequence, interpreter=self)
            case ResolutionFailure():
                self._end_episode()
                self.notify(result)
        return result

    async def run_episode(self, receive: ReceiveCallback) -> EpisodeResult:
        "Read events until the current episode resolves. Cancellation discards the unfinished episode."
        try:
            while True:
                result = await self.handle_key_event(await receive())
                if not isinstance(result, Pending):
                    return result
        finally:
            if self.episode is not None:
                self.abort()

    async def pump(self, source: trio.MemoryReceiveChannel[RawKeyEvent], sink: trio.MemorySendChannel[EpisodeResult]):
        async with aclosing(source), aclosing(sink):
            try:
                async for event in source:
                    result = await self.handle_key_event(event)
                    if not isinstance(result, Pending):
                        await sink.send(result)
            finally:
                self.abort()

    def describe_key(self, events: collections.abc.Iterable[RawKeyEvent]) -> EpisodeResult:
        "Resolve events in a throwaway episode without running anything."
        episode = Episode(self.grammar, self.keymap)
        result: EpisodeResult = Pending(sequence="")
        for event in events:
            result = episode.handle_key_event(event)
            if episode.finished:
                break
        return result
