import dataclasses
import json
import operator
import pathlib
import typing

import cattrs
import pygtrie
import tomli

from .chords.keymap import TrieKeymap, sequence_key
from .chords.modifiers import CONTROL_META_TRIGGER, LITERAL_ESCAPE, META_TRIGGER, Grammar
from .device.eventsource import KeyCode

BINDINGS = {
    "C-x C-s": "save-buffer",
    "C-x C-f": "find-file",
    "C-x C-c": "save-buffers-kill-terminal",
    "C-x b": "switch-to-buffer",
    "C-x k": "kill-buffer",
    "C-x u": "undo",
    "C-f": "forward-char",
    "C-b": "backward-char",
    "C-n": "next-line",
    "C-p": "previous-line",
    "C-a": "move-beginning-of-line",
    "C-e": "move-end-of-line",
    "C-d": "delete-char",
    "C-k": "kill-line",
    "C-w": "kill-region",
    "C-y": "yank",
    "C-s": "isearch-forward",
    "C-r": "isearch-backward",
    "C-/": "undo",
    "C-SPC": "set-mark-command",
    "M-f": "forward-word",
    "M-b": "backward-word",
    "M-w": "kill-ring-save",
    "M-x": "execute-extended-command",
    "M-<": "beginning-of-buffer",
    "M->": "end-of-buffer",
    "M-DEL": "backward-kill-word",
    "C-M-f": "forward-sexp",
    "C-M-b": "backward-sexp",
}

KEYMAPS = {
    "KEY_GRAVE": ["`", "~"],
    "KEY_1": ["1", "!"],
    "KEY_2": ["2", "@"],
    "KEY_3": ["3", "#"],
    "KEY_4": ["4", "$"],
    "KEY_5": ["5", "%"],
    "KEY_6": ["6", "^"],
    "KEY_7": ["7", "&"],
    "KEY_8": ["8", "*"],
    "KEY_9": ["9", "("],
    "KEY_0": ["0", ")"],
    "KEY_MINUS": ["-", "_"],
    "KEY_EQUAL": ["=", "+"],
    "KEY_Q": ["q", "Q"],
    "KEY_W": ["w", "W"],
    "KEY_E": ["e", "E"],
    "KEY_R": ["r", "R"],
    "KEY_T": ["t", "T"],
    "KEY_Y": ["y", "Y"],
    "KEY_U": ["u", "U"],
    "KEY_I": ["i", "I"],
    "KEY_O": ["o", "O"],
    "KEY_P": ["p", "P"],
    "KEY_LEFTBRACE": ["[", "{"],
    "KEY_RIGHTBRACE": ["]", "}"],
    "KEY_BACKSLASH": ["\\", "|"],
    "KEY_A": ["a", "A"],
    "KEY_S": ["s", "S"],
    "KEY_D": ["d", "D"],
    "KEY_F": ["f", "F"],
    "KEY_G": ["g", "G"],
    "KEY_H": ["h", "H"],
    "KEY_J": ["j", "J"],
    "KEY_K": ["k", "K"],
    "KEY_L": ["l", "L"],
    "KEY_SEMICOLON": [";", ":"],
    "KEY_APOSTROPHE": ["'", '"'],
    "KEY_Z": ["z", "Z"],
    "KEY_X": ["x", "X"],
    "KEY_C": ["c", "C"],
    "KEY_V": ["v", "V"],
    "KEY_B": ["b", "B"],
    "KEY_N": ["n", "N"],
    "KEY_M": ["m", "M"],
    "KEY_COMMA": [",", "<"],
    "KEY_DOT": [".", ">"],
    "KEY_SLASH": ["/", "?"],
    "KEY_SPACE": [" ", " "],
}


settings_converter = cattrs.Converter()


def unstructure_trie(t: pygtrie.Trie):
    return {" ".join(k): v for k, v in t.items()}


def structure_trie(d: dict, typ: type[pygtrie.Trie]):
    return pygtrie.Trie({sequence_key(k): v for k, v in d.items()})


settings_converter.register_unstructure_hook(pygtrie.Trie, unstructure_trie)
settings_converter.register_structure_hook(pygtrie.Trie, structure_trie)
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v))
settings_converter.register_unstructure_hook(KeyCode, operator.attrgetter("name"))
settings_converter.register_structure_hook(KeyCode, lambda v, _: KeyCode[v])


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: pathlib.Path
    literal_escape: str = LITERAL_ESCAPE
    meta_trigger: str = META_TRIGGER
    control_meta_trigger: str = CONTROL_META_TRIGGER
    bindings: pygtrie.Trie
    keymaps: dict[KeyCode, list[str]]

    def __post_init__(self):
        # the triggers must form a valid Grammar and the bindings a valid keymap
        self.grammar  # noqa: B018
        self.make_keymap()

    @property
    def grammar(self) -> Grammar:
        # Built fresh each time; an episode keeps the one it started with.
        return Grammar(
            literal_escape=self.literal_escape,
            meta_trigger=self.meta_trigger,
            control_meta_trigger=self.control_meta_trigger,
        )

    def make_keymap(self) -> TrieKeymap:
        return TrieKeymap(self.bindings)

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        with dest.open("w") as outfile:
            json.dump(raw, outfile, indent=2)

    @classmethod
    def load(cls, src: pathlib.Path):
        if src.suffix == ".toml":
            with src.open("rb") as infile:
                raw = tomli.load(infile)
        else:
            with src.open() as infile:
                raw = json.load(infile)
        raw["_path"] = src
        return settings_converter.structure(raw, cls)

    @classmethod
    def for_test(cls):
        return settings_converter.structure(
            {
                "_path": "test.settings.json",
                "bindings": BINDINGS,
                "keymaps": KEYMAPS,
            },
            cls,
        )


settings_converter.register_structure_hook(Settings, cattrs.gen.make_dict_structure_fn(Settings, settings_converter))
