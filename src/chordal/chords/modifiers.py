import enum

import msgspec

from .normalizer import normalize_token

LITERAL_ESCAPE = " "
META_TRIGGER = "g"
CONTROL_META_TRIGGER = "G"


class ModifierPrefix(enum.Enum):
    NONE = ""
    META = "M-"
    CONTROL_META = "C-M-"
    CONTROL = "C-"


class Grammar(msgspec.Struct, frozen=True):
    """The three configurable trigger tokens. Everything else about the grammar is fixed."""

    literal_escape: str = LITERAL_ESCAPE
    meta_trigger: str = META_TRIGGER
    control_meta_trigger: str = CONTROL_META_TRIGGER

    def __post_init__(self):
        tokens = [self.escape_token, self.meta_token, self.control_meta_token]
        if not all(tokens):
            raise ValueError("Trigger tokens must not be empty.")
        if len(set(tokens)) != len(tokens):
            raise ValueError(f"Trigger tokens must be distinct, got {tokens!r}.")

    @property
    def escape_token(self) -> str:
        return normalize_token(self.literal_escape)

    @property
    def meta_token(self) -> str:
        return normalize_token(self.meta_trigger)

    @property
    def control_meta_token(self) -> str:
        return normalize_token(self.control_meta_trigger)


class ModifierDecision(msgspec.Struct, frozen=True):
    prefix: ModifierPrefix
    # the group is completed by the next token, rendered verbatim under this prefix
    lookahead: bool = False


def resolve_modifier(token: str, first: bool, grammar: Grammar) -> ModifierDecision:
    if token == grammar.escape_token:
        # At the start of an episode there is nothing to escape, so the escape key stands for itself.
        return ModifierDecision(prefix=ModifierPrefix.NONE, lookahead=not first)
    if token == grammar.meta_token:
        return ModifierDecision(prefix=ModifierPrefix.META, lookahead=True)
    if token == grammar.control_meta_token:
        return ModifierDecision(prefix=ModifierPrefix.CONTROL_META, lookahead=True)
    return ModifierDecision(prefix=ModifierPrefix.CONTROL)


def render_group(prefix: ModifierPrefix, token: str) -> str:
    return prefix.value + token
