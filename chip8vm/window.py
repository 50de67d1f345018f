# We're subclassing pyglet (that'll handle graphics and keyboard handling)
# and overriding whatever def we need from there. The VM itself knows nothing about pyglet:
# this window feeds the keypad, schedules the cycle driver and blits whatever frame it presents.

import logging

import numpy as np
import pyglet
from pyglet.window import key

from chip8vm.config import FRAME_HZ, height, scale, width, window_height, window_width
from chip8vm.driver import CycleDriver
from chip8vm.dump import panel_lines
from chip8vm.keypad import COSMAC_LAYOUT, DEFAULT_LAYOUT, build_keymap
from chip8vm.log import toggle_logs

logger = logging.getLogger(__name__)


#map binding keys
KEYMAP = build_keymap(DEFAULT_LAYOUT, key)
COSMAC_KEYMAP = build_keymap(COSMAC_LAYOUT, key)

WHITE = (255, 255, 255, 255)
GREY = (160, 160, 160, 255)


def label(text, x, y, color=WHITE):
    return pyglet.text.Label(text, font_name="Courier New", font_size=11, x=x, y=y,
                             anchor_x='left', anchor_y='center', color=color)


class Chip8Window(pyglet.window.Window):

    def __init__(self, vm, cycles_per_frame, keymap=None, debug=False):
        super().__init__(
            width=window_width,
            height=window_height,
            caption="CHIP-8 Emulator",
            resizable=False,
            vsync=False
        )
        self.vm = vm
        self.keymap = keymap or KEYMAP
        self.debug = debug
        self.exit_status = 0
        self.driver = CycleDriver(vm, self.show_frame, cycles_per_frame, on_fault=self._on_fault)
        if debug:
            self.driver.pause()

        # Pre-allocated small framebuffer (64x32 RGBA), upscaled with numpy.repeat
        self._small_framebuf = np.zeros((height, width, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        self.image = pyglet.image.ImageData(width * scale, height * scale, 'RGBA',
                                            bytes(width * scale * height * scale * 4))

        # ---- Side panel ----
        panel_x = width * scale + 8
        self.fps_label = label("FPS: 0", panel_x, window_height - 12)
        self.cps_label = label("Cycles/s: 0", panel_x, window_height - 28)
        self.state_label = label("", panel_x, window_height - 44)
        self.register_labels = [label("", panel_x, window_height - 68 - 16 * i, GREY) for i in range(11)]
        self.help_labels = [label("SPACE run/pause", panel_x, 26, GREY),
                            label("F2 step  F3 skip", panel_x, 10, GREY)]

        # Performance tracking counters
        self._fps_counter = 0
        self._bench_time = pyglet.clock.get_default().time()

        pyglet.clock.schedule_interval(self.driver.tick, 1 / FRAME_HZ)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    # ---- Presentation sink ----
    def show_frame(self, frame):
        # pyglet's origin is bottom-left; the framebuffer's row 0 is the top line
        self._small_framebuf[..., :3] = np.flipud(frame)[..., None] * 255
        scaled = np.repeat(np.repeat(self._small_framebuf, scale, axis=0), scale, axis=1)
        self.image.set_data('RGBA', width * scale * 4, scaled.tobytes())

    # FPS / CPS
    def _update_bench(self, dt):
        now = pyglet.clock.get_default().time()
        elapsed = now - self._bench_time
        if elapsed >= 1.0:
            self.fps_label.text = f"FPS: {self._fps_counter / elapsed:.1f}"
            self.cps_label.text = f"Cycles/s: {self.driver.cycle_count}"
            self._fps_counter = 0
            self.driver.cycle_count = 0
            self._bench_time = now

    def _on_fault(self, error):
        if self.debug:
            return
        self.exit_status = 1
        self.close()

    # draw
    def on_draw(self):
        self.clear()
        self.image.blit(0, 0)

        if self.driver.fault is not None:
            self.state_label.text = "FAULT: " + type(self.driver.fault).__name__
        elif self.driver.paused:
            self.state_label.text = "Paused"
        elif self.vm.waiting:
            self.state_label.text = "Waiting for key"
        else:
            self.state_label.text = "Running"

        for text_label, text in zip(self.register_labels, panel_lines(self.vm)):
            text_label.text = text

        self.fps_label.draw()
        self.cps_label.draw()
        self.state_label.draw()
        for text_label in self.register_labels:
            text_label.draw()
        for text_label in self.help_labels:
            text_label.draw()
        self._fps_counter += 1

    # keyboard
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.close()
        elif symbol == key.F1:
            toggle_logs()
        elif symbol == key.SPACE:
            self.driver.toggle_pause()
        elif symbol == key.F2:
            self.driver.step_once()
        elif symbol == key.F3:
            self.driver.skip()
        elif symbol in self.keymap:
            self.vm.keypad.press(self.keymap[symbol])

    def on_key_release(self, symbol, modifiers):
        if symbol in self.keymap:
            self.vm.keypad.release(self.keymap[symbol])
