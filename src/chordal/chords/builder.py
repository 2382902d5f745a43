from __future__ import annotations

import logging
import typing

from .modifiers import ModifierPrefix, render_group, resolve_modifier
from .normalizer import normalize_key

if typing.TYPE_CHECKING:
    from ..device.hwtypes import RawKeyEvent
    from .modifiers import Grammar

logger = logging.getLogger(__name__)


class SequenceBuilder:
    """Accumulates rendered key groups for one episode.

    Each raw key event is normalized and then either completes a pending lookahead or goes to the
    modifier resolver. A resolver decision that needs one more key is parked in `pending` until
    the next event arrives, so the builder never has to block or recurse on its own.
    """

    groups: list[str]
    pending: typing.Optional[ModifierPrefix]

    def __init__(self, grammar: Grammar):
        self.grammar = grammar
        self.groups = []
        self.pending = None
        self.events_consumed = 0

    @property
    def is_first(self) -> bool:
        return self.events_consumed == 0

    @property
    def sequence(self) -> str:
        return " ".join(self.groups)

    @property
    def awaiting_lookahead(self) -> bool:
        return self.pending is not None

    @property
    def prompt(self) -> str:
        "The sequence so far, with a dangling prefix such as 'M-' while a lookahead is pending."
        if self.pending is None:
            return self.sequence
        return " ".join([*self.groups, self.pending.value])

    def feed(self, event: RawKeyEvent) -> bool:
        "Consume one raw key event. Returns True when it completed a group."
        token = normalize_key(event)
        first = self.is_first
        self.events_consumed += 1
        if self.pending is not None:
            prefix = self.pending
            self.pending = None
            return self._append(prefix, token)
        decision = resolve_modifier(token, first, self.grammar)
        if decision.lookahead:
            logger.debug("%r selects %s; waiting for one more key", token, decision.prefix.name)
            self.pending = decision.prefix
            return False
        return self._append(decision.prefix, token)

    def _append(self, prefix: ModifierPrefix, token: str) -> bool:
        group = render_group(prefix, token)
        self.groups.append(group)
        logger.debug("Appended %s; sequence is now %r", group, self.sequence)
        return True
