import numpy as np
import pytest

from chip8vm.config import Quirks
from chip8vm.errors import IllegalAddress
from chip8vm.vm import Chip8, Flow

from conftest import FakeKeypad, words

GLYPH_0 = np.array([
    [1, 1, 1, 1, 0, 0, 0, 0],
    [1, 0, 0, 1, 0, 0, 0, 0],
    [1, 0, 0, 1, 0, 0, 0, 0],
    [1, 0, 0, 1, 0, 0, 0, 0],
    [1, 1, 1, 1, 0, 0, 0, 0],
], dtype=np.uint8)


def draw_glyph(vm, x, y, times=1, glyph=0):
    """Point I at a font glyph and draw it with DXY5 at (x, y)."""
    vm.V[0], vm.V[1], vm.V[2] = x, y, glyph
    vm.load_program(words(0xF229, *[0xD015] * times))
    flows = [vm.step() for _ in range(times + 1)]
    return flows[1:]


def test_draw_glyph_on_blank_screen(vm):
    assert draw_glyph(vm, 0, 0) == [Flow.DREW]
    frame = vm.frame()
    assert np.array_equal(frame[:5, :8], GLYPH_0)
    assert frame.sum() == GLYPH_0.sum()
    assert vm.V[0xF] == 0
    assert vm.pc == 0x204


def test_drawing_twice_erases_and_sets_collision(vm):
    draw_glyph(vm, 0, 0, times=2)
    assert vm.V[0xF] == 1
    assert not vm.frame().any()


def test_partial_overlap_sets_collision_once(vm):
    draw_glyph(vm, 10, 10)
    vm.V[0] = 12
    vm.pc = 0x202
    vm.step()
    assert vm.V[0xF] == 1
    # columns 12 and 13 of the top row were lit by both sprites
    assert vm.frame()[10, 12] == 0
    assert vm.frame()[10, 14] == 1


def test_clear_screen_after_draws(vm):
    draw_glyph(vm, 3, 4)
    vm.load_program(words(0x00E0))
    vm.pc = 0x200
    assert vm.step() is Flow.NEXT
    assert not vm.frame().any()


def test_sprite_clips_at_right_edge(vm):
    draw_glyph(vm, 60, 0)
    frame = vm.frame()
    assert np.array_equal(frame[:5, 60:64], GLYPH_0[:, :4])
    assert not frame[:, :8].any()


def test_sprite_clips_at_bottom_edge(vm):
    draw_glyph(vm, 0, 30)
    frame = vm.frame()
    assert np.array_equal(frame[30:32, :8], GLYPH_0[:2])
    assert not frame[:5].any()


def test_off_screen_anchor_wraps(vm):
    draw_glyph(vm, 64 + 2, 32 + 1)
    frame = vm.frame()
    assert np.array_equal(frame[1:6, 2:10], GLYPH_0)
    assert frame.sum() == GLYPH_0.sum()


def test_wrapping_quirk_wraps_every_pixel():
    vm = Chip8(keypad=FakeKeypad(), quirks=Quirks(clip_sprites=False))
    draw_glyph(vm, 62, 30)
    frame = vm.frame()
    # top row of the glyph: columns 62, 63, 0, 1 on line 30
    assert list(frame[30, [62, 63, 0, 1]]) == [1, 1, 1, 1]
    # last glyph row lands on line 2 after wrapping vertically
    assert list(frame[2, [62, 63, 0, 1]]) == [1, 1, 1, 1]


def test_draw_reading_past_memory_faults(vm):
    vm.load_program(words(0xAFFE, 0xD015))
    vm.step()
    with pytest.raises(IllegalAddress):
        vm.step()
    assert vm.pc == 0x202
    assert not vm.frame().any()


def test_zero_height_sprite_draws_nothing(vm):
    vm.V[0xF] = 1
    vm.load_program(words(0xD010))
    assert vm.step() is Flow.DREW
    assert vm.V[0xF] == 0
    assert not vm.frame().any()


@pytest.mark.parametrize("digit", range(16))
def test_font_glyph_address(vm, digit):
    vm.V[4] = digit
    vm.load_program(words(0xF429))
    vm.step()
    assert vm.I == digit * 5
