import random

import pytest

from chip8vm.vm import Chip8


class FakeKeypad:
    """Keypad whose held keys and typed digits are set directly by the test."""

    def __init__(self):
        self.down = set()
        self.typed = []
        self.polls = 0

    def is_down(self, key):
        return key in self.down

    def typed_hex(self):
        self.polls += 1
        return self.typed.pop(0) if self.typed else None


class ScriptedRandom:
    """Hands out a fixed sequence of bytes."""

    def __init__(self, values):
        self.values = list(values)

    def getrandbits(self, k):
        assert k == 8
        return self.values.pop(0)


def words(*opcodes):
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


def run(vm, *opcodes):
    """Load the opcodes at 0x200 and execute exactly that many cycles."""
    vm.load_program(words(*opcodes))
    return [vm.step() for _ in opcodes]


@pytest.fixture
def keypad():
    return FakeKeypad()


@pytest.fixture
def vm(keypad):
    return Chip8(keypad=keypad, rng=random.Random(1234))
