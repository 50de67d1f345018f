# CHIP8 Virtual Machine:
# Input - the host keypad is polled for key states and typed digits when an opcode needs them.
# Output - 64x32 framebuffer (each pixel is either on or off: 0 || 1), read by the host once per frame.
# CPU - 16 8-bit registers, a 12-bit address register, two timers decremented once per cycle,
#       and a stack of 96 return addresses.
# Memory - 4096 bytes which include the fonts and the loaded ROM.
#----------------------------------------------------------------------------------------------

import random
from dataclasses import dataclass
from enum import Enum, auto

import numpy as np

from chip8vm.config import (
    FONT_BASE,
    FONTSET,
    GLYPH_SIZE,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    REGISTER_COUNT,
    STACK_SIZE,
    Quirks,
    height,
    width,
)
from chip8vm.errors import IllegalAddress, IllegalReturn, StackFull, UnknownOp
from chip8vm.keypad import Keypad
from chip8vm.log import log
from chip8vm.opcodes import decode


class Flow(Enum):
    """What a cycle did to control flow."""
    NEXT = auto()       # PC moves past the instruction
    JUMPED = auto()     # handler already placed PC
    DREW = auto()       # like NEXT, but a sprite was drawn and the frame should be presented
    WAITING = auto()    # blocked on a key press, nothing changed


@dataclass(frozen=True)
class Running:
    pass


@dataclass(frozen=True)
class AwaitingKey:
    register: int


RUNNING = Running()


class Chip8:

    def __init__(self, keypad=None, rng=None, quirks=None):
        self.keypad = keypad if keypad is not None else Keypad()
        self.rng = rng if rng is not None else random.Random()
        self.quirks = quirks if quirks is not None else Quirks()

        # dispatch table, keyed by the names opcodes.decode() produces
        self.handlers = {
            "CLS": self.op_CLS,
            "RET": self.op_RET,
            "JP": self.op_JP,
            "CALL": self.op_CALL,
            "SE_Vx_kk": self.op_SE_Vx_kk,
            "SNE_Vx_kk": self.op_SNE_Vx_kk,
            "SE_Vx_Vy": self.op_SE_Vx_Vy,
            "LD_Vx_kk": self.op_LD_Vx_kk,
            "ADD_Vx_kk": self.op_ADD_Vx_kk,

            "LD_Vx_Vy": self.op_LD_Vx_Vy,
            "OR": self.op_OR,
            "AND": self.op_AND,
            "XOR": self.op_XOR,
            "ADD": self.op_ADD,
            "SUB": self.op_SUB,
            "SHR": self.op_SHR,
            "SUBN": self.op_SUBN,
            "SHL": self.op_SHL,

            "SNE_Vx_Vy": self.op_SNE_Vx_Vy,
            "LD_I": self.op_LD_I,
            "JP_V0": self.op_JP_V0,
            "RND": self.op_RND,
            "DRW": self.op_DRW,

            "SKP": self.op_SKP,
            "SKNP": self.op_SKNP,

            "LD_Vx_DT": self.op_LD_Vx_DT,
            "WAITKEY": self.op_WAITKEY,
            "LD_DT_Vx": self.op_LD_DT_Vx,
            "LD_ST_Vx": self.op_LD_ST_Vx,
            "ADD_I_Vx": self.op_ADD_I_Vx,
            "FONT": self.op_FONT,
            "BCD": self.op_BCD,
            "STORE": self.op_STORE,
            "LOAD": self.op_LOAD,
        }

        self.reset()

    def reset(self):
        """Power-on state: zeroed machine with the font installed at FONT_BASE."""
        self.memory = bytearray(MEMORY_SIZE)
        self.memory[FONT_BASE:FONT_BASE + len(FONTSET)] = bytes(FONTSET)
        self.V = bytearray(REGISTER_COUNT)
        self.I = 0
        self.pc = PROGRAM_START
        self.stack = np.zeros(STACK_SIZE, dtype=np.uint16)
        self.sp = 0
        self.delay = 0
        self.sound = 0
        self.vram = bytearray(width * height)
        self.state = RUNNING

    def load_program(self, data):
        """Copy raw ROM bytes into memory at 0x200.

        The host is expected to have checked the size already; an oversized
        program is a usage error, not a VM fault.
        """
        data = bytes(data)
        if len(data) > MAX_PROGRAM_SIZE:
            raise ValueError("program is %d bytes, at most %d fit in memory" % (len(data), MAX_PROGRAM_SIZE))
        self.memory[PROGRAM_START:PROGRAM_START + len(data)] = data
        log("Loaded %d bytes at 0x%03X", len(data), PROGRAM_START)

    @property
    def waiting(self):
        return isinstance(self.state, AwaitingKey)

    def frame(self):
        """Read-only (height, width) snapshot of the framebuffer."""
        return np.frombuffer(bytes(self.vram), dtype=np.uint8).reshape(height, width)

    def fetch(self):
        if self.pc + 1 >= MEMORY_SIZE:
            raise IllegalAddress(self.pc, "PC out of bounds: 0x%04X" % self.pc)
        return (self.memory[self.pc] << 8) | self.memory[self.pc + 1]

    # ---- Cycle ----
    def step(self):
        """Run one cycle and report its Flow.

        Faults propagate to the caller and leave the machine as it was
        before the cycle.
        """
        if isinstance(self.state, AwaitingKey):
            digit = self.keypad.typed_hex()
            if digit is None:
                return Flow.WAITING
            self.V[self.state.register] = digit
            log("Key %X stored in V%X", digit, self.state.register)
            self.state = RUNNING
            flow = Flow.NEXT
        else:
            ins = decode(self.fetch())
            flow = self.handlers[ins.name](ins)

        if flow is not Flow.JUMPED:
            self.pc = (self.pc + 2) & 0xFFFF

        # timers
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

        return flow

    # ---- Opcode handlers ----

    # 00E0 - Clear the display (all pixels turned off)
    def op_CLS(self, ins):
        self.vram[:] = bytes(len(self.vram))
        return Flow.NEXT

    # 00EE - Return from subroutine; the popped address is the CALL itself, so PC still advances
    def op_RET(self, ins):
        if self.sp == 0:
            raise IllegalReturn()
        self.sp -= 1
        self.pc = int(self.stack[self.sp])
        log("Return to 0x%03X", self.pc)
        return Flow.NEXT

    # 1nnn - Jump to address NNN
    def op_JP(self, ins):
        self.pc = ins.nnn
        return Flow.JUMPED

    # 2nnn - Call subroutine at NNN
    def op_CALL(self, ins):
        if self.sp >= STACK_SIZE:
            raise StackFull()
        self.stack[self.sp] = self.pc
        self.sp += 1
        self.pc = ins.nnn
        log("Call subroutine at 0x%03X", ins.nnn)
        return Flow.JUMPED

    # 3xkk - Skip next instruction if Vx == kk
    def op_SE_Vx_kk(self, ins):
        if self.V[ins.x] == ins.kk:
            self.pc += 2
        return Flow.NEXT

    # 4xkk - Skip next instruction if Vx != kk
    def op_SNE_Vx_kk(self, ins):
        if self.V[ins.x] != ins.kk:
            self.pc += 2
        return Flow.NEXT

    # 5xy0 - Skip next instruction if Vx == Vy
    def op_SE_Vx_Vy(self, ins):
        if self.V[ins.x] == self.V[ins.y]:
            self.pc += 2
        return Flow.NEXT

    def op_LD_Vx_kk(self, ins):
        self.V[ins.x] = ins.kk
        return Flow.NEXT

    # 7xkk - Add immediate, wraps, VF untouched
    def op_ADD_Vx_kk(self, ins):
        self.V[ins.x] = (self.V[ins.x] + ins.kk) & 0xFF
        return Flow.NEXT

    # 8xy0..8xyE - flag-writing ops store VF last, so VF as a destination ends up holding the flag
    def op_LD_Vx_Vy(self, ins):
        self.V[ins.x] = self.V[ins.y]
        return Flow.NEXT

    def op_OR(self, ins):
        self.V[ins.x] |= self.V[ins.y]
        if self.quirks.vf_reset:
            self.V[0xF] = 0
        return Flow.NEXT

    def op_AND(self, ins):
        self.V[ins.x] &= self.V[ins.y]
        if self.quirks.vf_reset:
            self.V[0xF] = 0
        return Flow.NEXT

    def op_XOR(self, ins):
        self.V[ins.x] ^= self.V[ins.y]
        if self.quirks.vf_reset:
            self.V[0xF] = 0
        return Flow.NEXT

    def op_ADD(self, ins):
        total = self.V[ins.x] + self.V[ins.y]
        self.V[ins.x] = total & 0xFF
        self.V[0xF] = 1 if total > 0xFF else 0
        log("Add V%X to V%X: result %d, carry=%d", ins.y, ins.x, self.V[ins.x], self.V[0xF])
        return Flow.NEXT

    def op_SUB(self, ins):
        not_borrow = 1 if self.V[ins.x] >= self.V[ins.y] else 0
        self.V[ins.x] = (self.V[ins.x] - self.V[ins.y]) & 0xFF
        self.V[0xF] = not_borrow
        return Flow.NEXT

    def op_SHR(self, ins):
        source = self.V[ins.y] if self.quirks.shift_vy else self.V[ins.x]
        self.V[ins.x] = source >> 1
        self.V[0xF] = source & 1
        return Flow.NEXT

    def op_SUBN(self, ins):
        not_borrow = 1 if self.V[ins.y] >= self.V[ins.x] else 0
        self.V[ins.x] = (self.V[ins.y] - self.V[ins.x]) & 0xFF
        self.V[0xF] = not_borrow
        return Flow.NEXT

    def op_SHL(self, ins):
        source = self.V[ins.y] if self.quirks.shift_vy else self.V[ins.x]
        self.V[ins.x] = (source << 1) & 0xFF
        self.V[0xF] = (source >> 7) & 1
        return Flow.NEXT

    # 9xy0 - Skip next instruction if Vx != Vy
    def op_SNE_Vx_Vy(self, ins):
        if self.V[ins.x] != self.V[ins.y]:
            self.pc += 2
        return Flow.NEXT

    def op_LD_I(self, ins):
        self.I = ins.nnn
        return Flow.NEXT

    # Bnnn - Jump to address NNN + V0
    def op_JP_V0(self, ins):
        self.pc = ins.nnn + self.V[0]
        return Flow.JUMPED

    # Cxkk - Vx = random byte AND kk
    def op_RND(self, ins):
        self.V[ins.x] = self.rng.getrandbits(8) & ins.kk
        return Flow.NEXT

    # Dxyn - Draw an 8xN sprite from memory[I] at (Vx, Vy).
    # Only the anchor wraps; the rest of the sprite clips at the right and bottom edges.
    def op_DRW(self, ins):
        clip = self.quirks.clip_sprites
        px = self.V[ins.x] % width      # a no-op for anchors already on screen
        py = self.V[ins.y] % height
        rows = min(ins.n, height - py) if clip else ins.n
        if self.I + rows > MEMORY_SIZE:
            raise IllegalAddress(self.I + rows - 1)

        buf = self.vram
        self.V[0xF] = 0
        collision = 0
        for row in range(rows):
            sprite = self.memory[self.I + row]
            if sprite == 0:
                continue
            base = ((py + row) % height) * width
            for bit in range(8):
                col = px + bit
                if col >= width:
                    if clip:
                        break
                    col %= width
                if sprite & (0x80 >> bit):
                    idx = base + col
                    collision |= buf[idx]
                    buf[idx] ^= 1
        self.V[0xF] = collision
        log("Drew sprite at (%d, %d), collision=%d", px, py, collision)
        return Flow.DREW

    # Ex9E / ExA1 - SKP / SKNP
    def _key_in(self, ins):
        key = self.V[ins.x]
        if key >= 16:
            raise UnknownOp(ins.opcode, "Key test on V%X = %d, not a hex key" % (ins.x, key))
        return key

    def op_SKP(self, ins):
        if self.keypad.is_down(self._key_in(ins)):
            self.pc += 2
        return Flow.NEXT

    def op_SKNP(self, ins):
        if not self.keypad.is_down(self._key_in(ins)):
            self.pc += 2
        return Flow.NEXT

    # Fx07..Fx65 - timers, memory, I, and key input
    def op_LD_Vx_DT(self, ins):
        self.V[ins.x] = self.delay
        return Flow.NEXT

    # Fx0A - suspend until a hex digit is typed; the resolving cycle moves PC past this instruction
    def op_WAITKEY(self, ins):
        self.keypad.typed_hex()     # drop anything typed before the wait began
        self.state = AwaitingKey(ins.x)
        log("Waiting for key into V%X", ins.x)
        return Flow.JUMPED

    def op_LD_DT_Vx(self, ins):
        self.delay = self.V[ins.x]
        return Flow.NEXT

    def op_LD_ST_Vx(self, ins):
        self.sound = self.V[ins.x]
        return Flow.NEXT

    def op_ADD_I_Vx(self, ins):
        self.I = (self.I + self.V[ins.x]) & 0xFFF
        return Flow.NEXT

    def op_FONT(self, ins):
        self.I = (FONT_BASE + self.V[ins.x] * GLYPH_SIZE) & 0xFFF
        return Flow.NEXT

    def op_BCD(self, ins):
        if self.I > MEMORY_SIZE - 3:
            raise IllegalAddress(self.I)
        val = self.V[ins.x]
        self.memory[self.I] = val // 100
        self.memory[self.I + 1] = (val // 10) % 10
        self.memory[self.I + 2] = val % 10
        return Flow.NEXT

    def op_STORE(self, ins):
        end = self.I + ins.x
        if end >= MEMORY_SIZE:
            raise IllegalAddress(end)
        self.memory[self.I:end + 1] = self.V[:ins.x + 1]
        if self.quirks.increment_i:
            self.I = (end + 1) & 0xFFF
        return Flow.NEXT

    def op_LOAD(self, ins):
        end = self.I + ins.x
        if end >= MEMORY_SIZE:
            raise IllegalAddress(end)
        self.V[:ins.x + 1] = self.memory[self.I:end + 1]
        if self.quirks.increment_i:
            self.I = (end + 1) & 0xFFF
        return Flow.NEXT
