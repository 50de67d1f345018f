# Opcode decoding. Cowgod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# The top nibble selects an instruction family; families 0, 5, 8, 9, E and F
# are further split on a sub-field (full word, low nibble or low byte).
#----------------------------------------------------------------------------------------------

from collections import namedtuple

from chip8vm.errors import UnknownOp

Instruction = namedtuple("Instruction", "name opcode x y n kk nnn")

# families decided by the top nibble alone
SINGLE = {
    0x1: "JP",          # 1nnn - Jump to a specific memory address
    0x2: "CALL",        # 2nnn - Call a function (subroutine) at a memory address
    0x3: "SE_Vx_kk",    # 3xkk - Skip next instruction if a register equals a specific number
    0x4: "SNE_Vx_kk",   # 4xkk - Skip next instruction if a register does NOT equal a number
    0x6: "LD_Vx_kk",    # 6xkk - Set a register to a specific number
    0x7: "ADD_Vx_kk",   # 7xkk - Add a number to a register
    0xA: "LD_I",        # Annn - Set the memory pointer (I) to a specific address
    0xB: "JP_V0",       # Bnnn - Jump to an address plus the value of register V0
    0xC: "RND",         # Cxkk - Set a register to a random number ANDed with a value
    0xD: "DRW",         # Dxyn - Draw a sprite on the screen at X,Y coordinates
}

# families with a sub-selector: (mask, {selector: name})
SUBTABLES = {
    0x0: (0xFFFF, {
        0x00E0: "CLS",
        0x00EE: "RET",
    }),
    0x5: (0x000F, {
        0x0: "SE_Vx_Vy",
    }),
    0x8: (0x000F, {
        0x0: "LD_Vx_Vy",
        0x1: "OR",
        0x2: "AND",
        0x3: "XOR",
        0x4: "ADD",
        0x5: "SUB",
        0x6: "SHR",
        0x7: "SUBN",
        0xE: "SHL",
    }),
    0x9: (0x000F, {
        0x0: "SNE_Vx_Vy",
    }),
    0xE: (0x00FF, {
        0x9E: "SKP",
        0xA1: "SKNP",
    }),
    0xF: (0x00FF, {
        0x07: "LD_Vx_DT",
        0x0A: "WAITKEY",
        0x15: "LD_DT_Vx",
        0x18: "LD_ST_Vx",
        0x1E: "ADD_I_Vx",
        0x29: "FONT",
        0x33: "BCD",
        0x55: "STORE",
        0x65: "LOAD",
    }),
}

# assembly-style rendering of each instruction, used by the state dump
SYNTAX = {
    "CLS": "CLS",
    "RET": "RET",
    "JP": "JP {nnn:03X}",
    "CALL": "CALL {nnn:03X}",
    "SE_Vx_kk": "SE V{x:X}, {kk:02X}",
    "SNE_Vx_kk": "SNE V{x:X}, {kk:02X}",
    "SE_Vx_Vy": "SE V{x:X}, V{y:X}",
    "LD_Vx_kk": "LD V{x:X}, {kk:02X}",
    "ADD_Vx_kk": "ADD V{x:X}, {kk:02X}",
    "LD_Vx_Vy": "LD V{x:X}, V{y:X}",
    "OR": "OR V{x:X}, V{y:X}",
    "AND": "AND V{x:X}, V{y:X}",
    "XOR": "XOR V{x:X}, V{y:X}",
    "ADD": "ADD V{x:X}, V{y:X}",
    "SUB": "SUB V{x:X}, V{y:X}",
    "SHR": "SHR V{x:X}, V{y:X}",
    "SUBN": "SUBN V{x:X}, V{y:X}",
    "SHL": "SHL V{x:X}, V{y:X}",
    "SNE_Vx_Vy": "SNE V{x:X}, V{y:X}",
    "LD_I": "LD I, {nnn:03X}",
    "JP_V0": "JP V0, {nnn:03X}",
    "RND": "RND V{x:X}, {kk:02X}",
    "DRW": "DRW V{x:X}, V{y:X}, {n:X}",
    "SKP": "SKP V{x:X}",
    "SKNP": "SKNP V{x:X}",
    "LD_Vx_DT": "LD V{x:X}, DT",
    "WAITKEY": "LD V{x:X}, K",
    "LD_DT_Vx": "LD DT, V{x:X}",
    "LD_ST_Vx": "LD ST, V{x:X}",
    "ADD_I_Vx": "ADD I, V{x:X}",
    "FONT": "LD F, V{x:X}",
    "BCD": "LD B, V{x:X}",
    "STORE": "LD [I], V{x:X}",
    "LOAD": "LD V{x:X}, [I]",
}


def decode(opcode):
    """Split a 16-bit opcode into an Instruction.

    Raises UnknownOp when no instruction matches.
    """
    opcode &= 0xFFFF
    family = opcode >> 12
    name = SINGLE.get(family)
    if name is None:
        mask, table = SUBTABLES[family]
        name = table.get(opcode & mask)
        if name is None:
            raise UnknownOp(opcode)
    return Instruction(
        name=name,
        opcode=opcode,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        n=opcode & 0xF,
        kk=opcode & 0xFF,
        nnn=opcode & 0x0FFF,
    )


def mnemonic(opcode):
    """Render an opcode the way a disassembler would, e.g. 'DRW V1, V2, 5'."""
    try:
        ins = decode(opcode)
    except UnknownOp:
        return "??? %04X" % (opcode & 0xFFFF)
    return SYNTAX[ins.name].format(**ins._asdict())
