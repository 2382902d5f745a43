# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Keyboard event stages
# stage 0: OS-specific; watch keyboard device and issue keystream, or replay a recorded keystream
# stage 1: track modifier keydown/up and annotate keystream with current modifiers
# stage 2: convert key event + modifier into character
# stage 3: convert characters and special keys into raw key events for the chord interpreter
