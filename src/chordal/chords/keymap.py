from __future__ import annotations

import abc
import collections.abc
import logging
import typing

import msgspec
import pygtrie

from ..commontypes import KeymapConflict, NotBound

logger = logging.getLogger(__name__)


class Command(msgspec.Struct, frozen=True):
    handle: str


class NestedKeymap(msgspec.Struct, frozen=True):
    pass


class Unbound(msgspec.Struct, frozen=True):
    pass


Binding = Command | NestedKeymap | Unbound


def sequence_key(sequence: str) -> tuple[str, ...]:
    # groups are joined by single spaces; any other whitespace is a key in its own right
    return tuple(group for group in sequence.split(" ") if group)


class KeymapStore(abc.ABC):
    @abc.abstractmethod
    def lookup(self, sequence: str) -> Binding: ...


class TrieKeymap(KeymapStore):
    """Key bindings held in a trie keyed by the groups of the key description, so "C-x C-s" lives under ("C-x", "C-s")."""

    def __init__(self, bindings: typing.Optional[pygtrie.Trie | collections.abc.Mapping[str, str]] = None):
        self.trie = pygtrie.Trie()
        if bindings is None:
            return
        if isinstance(bindings, pygtrie.Trie):
            items = ((" ".join(k), v) for k, v in bindings.items())
        else:
            items = bindings.items()
        for sequence, command in items:
            self.bind(sequence, command)

    def lookup(self, sequence: str) -> Binding:
        key = sequence_key(sequence)
        node = self.trie.has_node(key)
        if node & pygtrie.Trie.HAS_VALUE:
            return Command(handle=self.trie[key])
        if node & pygtrie.Trie.HAS_SUBTRIE:
            return NestedKeymap()
        return Unbound()

    def bind(self, sequence: str, command: str):
        key = sequence_key(sequence)
        if not key:
            raise KeymapConflict(sequence, "empty key sequence")
        for i in range(1, len(key)):
            if self.trie.has_key(key[:i]):
                raise KeymapConflict(sequence, f"{' '.join(key[:i])} is bound to {self.trie[key[:i]]}, not a prefix key")
        if self.trie.has_subtrie(key):
            raise KeymapConflict(sequence, "it is already a prefix key")
        logger.debug("Binding %s to %s", " ".join(key), command)
        self.trie[key] = command

    def unbind(self, sequence: str):
        key = sequence_key(sequence)
        if not self.trie.has_key(key):
            raise NotBound(sequence)
        del self.trie[key]

    def bindings(self) -> dict[str, str]:
        return {" ".join(k): v for k, v in self.trie.items()}

    def __len__(self):
        return len(self.trie)
