# Input - store key input states and check these per cycle.
# The VM only needs two things from the host: whether hex key K is held, and
# which hex digit (if any) was just pressed.

import numpy as np

# Host key layouts by pyglet key name (pyglet.window.key.<name>) to keypad digit.
# Default: each hex digit on its own key, so letters a-f are 10-15.
HEX_LAYOUT = {
    "_0": 0x0, "_1": 0x1, "_2": 0x2, "_3": 0x3,
    "_4": 0x4, "_5": 0x5, "_6": 0x6, "_7": 0x7,
    "_8": 0x8, "_9": 0x9, "A": 0xA, "B": 0xB,
    "C": 0xC, "D": 0xD, "E": 0xE, "F": 0xF,
}

# COSMAC VIP keypad layout on the 1234/QWER/ASDF/ZXCV block
COSMAC_LAYOUT = {
    "_1": 0x1, "_2": 0x2, "_3": 0x3, "_4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

DEFAULT_LAYOUT = HEX_LAYOUT


def build_keymap(layout, keys):
    """Resolve a layout against a key-symbol namespace such as pyglet.window.key."""
    return {getattr(keys, name): digit for name, digit in layout.items()}


class Keypad:

    def __init__(self):
        self.keys = np.zeros(16, dtype=np.uint8)
        self._typed = None

    def press(self, key):
        self.keys[key] = 1
        self._typed = key

    def release(self, key):
        self.keys[key] = 0

    def clear(self):
        self.keys[:] = 0
        self._typed = None

    # ---- interface polled by the VM ----
    def is_down(self, key):
        return bool(self.keys[key])

    def typed_hex(self):
        # consumed on read so one keystroke resolves at most one wait
        digit, self._typed = self._typed, None
        return digit
