# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    from ..device.hwtypes import RawKeyEvent

CHARACTER_TOKENS = {
    " ": "SPC",
}

NAMED_TOKENS = {
    "backspace": "DEL",
}


def normalize_token(text: str) -> str:
    return CHARACTER_TOKENS.get(text, text)


def normalize_key(event: RawKeyEvent) -> str:
    if event.character is not None:
        return normalize_token(event.character)
    # unrecognized named keys pass through as their names
    return NAMED_TOKENS.get(event.name, event.name)
