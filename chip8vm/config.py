# Machine layout, host settings and interpreter quirks.
# Memory - 4096 bytes: font glyphs at 0x000, programs loaded at 0x200.
# Display - 64x32 pixels, each either on or off.
#----------------------------------------------------------------------------------------------

from dataclasses import dataclass

# ---- Machine ----
MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START   # 3584 bytes
REGISTER_COUNT = 16
STACK_SIZE = 96
FONT_BASE = 0x000
GLYPH_SIZE = 5
width, height = 64, 32

# ---- Host ----
scale = 10
panel_width = 200
window_width, window_height = width * scale + panel_width, height * scale
FRAME_HZ = 60
CYCLES_PER_FRAME = 1     # ~60 executed cycles per second

# set fonts (binary pixel patterns)
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes


@dataclass
class Quirks:
    """Behaviour switches where historical interpreters disagree.

    The defaults are the canonical behaviour of this VM.
    """
    vf_reset: bool = True        # 8XY1/8XY2/8XY3 clear VF
    shift_vy: bool = True        # 8XY6/8XYE shift Vy into Vx (False: shift Vx in place)
    clip_sprites: bool = True    # DXYN clips at the edge (False: every pixel wraps)
    increment_i: bool = True     # FX55/FX65 leave I past the last register
