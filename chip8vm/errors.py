"""Faults raised by the interpreter core.

Every fault is fatal to the cycle that raised it and leaves the machine
as it was before that cycle started. The host decides whether to halt.
"""


class Chip8Error(Exception):
    """Base class for all VM faults."""

    description = "The virtual machine faulted!"

    def __init__(self, message=None):
        super().__init__(message or self.description)


class IllegalAddress(Chip8Error):
    description = "Trying to access illegal address!"

    def __init__(self, address, message=None):
        self.address = address
        super().__init__(message or "%s (0x%04X)" % (self.description, address))


class IllegalReturn(Chip8Error):
    description = "Trying to return from global scope!"


class StackFull(Chip8Error):
    description = "The call stack is full! Cannot call another function."


class UnknownOp(Chip8Error):
    description = "An unknown opcode has been encountered!"

    def __init__(self, opcode, message=None):
        self.opcode = opcode
        super().__init__(message or "%s (%04X)" % (self.description, opcode))
