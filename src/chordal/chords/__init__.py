from .dispatcher import CommandResolved, Episode, EpisodeResult, EpisodeState, Pending, ResolutionFailure
from .interpreter import ChordInterpreter, CommandExecutor, CommandTable
from .keymap import Binding, Command, KeymapStore, NestedKeymap, TrieKeymap, Unbound
from .modifiers import Grammar, ModifierPrefix

__all__ = [
    "Binding",
    "ChordInterpreter",
    "Command",
    "CommandExecutor",
    "CommandResolved",
    "CommandTable",
    "Episode",
    "EpisodeResult",
    "EpisodeState",
    "Grammar",
    "KeymapStore",
    "ModifierPrefix",
    "NestedKeymap",
    "Pending",
    "ResolutionFailure",
    "TrieKeymap",
    "Unbound",
]
