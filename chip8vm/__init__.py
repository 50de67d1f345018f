"""A CHIP-8 virtual machine with a pyglet front end."""

from chip8vm.config import Quirks
from chip8vm.errors import Chip8Error, IllegalAddress, IllegalReturn, StackFull, UnknownOp
from chip8vm.keypad import Keypad
from chip8vm.vm import AwaitingKey, Chip8, Flow, Running

__version__ = "0.1.0"

__all__ = [
    "AwaitingKey",
    "Chip8",
    "Chip8Error",
    "Flow",
    "IllegalAddress",
    "IllegalReturn",
    "Keypad",
    "Quirks",
    "Running",
    "StackFull",
    "UnknownOp",
]
