# Cycle driver: runs the VM at a fixed cadence and hands each frame to the display.
# A sprite draw ends the frame's batch early, so at most one draw happens per presented frame.

import logging

from chip8vm.config import CYCLES_PER_FRAME
from chip8vm.dump import format_state
from chip8vm.errors import Chip8Error
from chip8vm.vm import RUNNING, Flow

logger = logging.getLogger(__name__)


class CycleDriver:

    def __init__(self, vm, present, cycles_per_frame=CYCLES_PER_FRAME, on_fault=None):
        self.vm = vm
        self.present = present          # called with vm.frame() once per frame
        self.cycles_per_frame = cycles_per_frame
        self.on_fault = on_fault
        self.paused = False
        self.fault = None
        self.cycle_count = 0            # executed cycles, read and reset by the CPS counter

    # pyglet.clock callback
    def tick(self, dt):
        self.run_frame()

    def run_frame(self):
        if not self.paused:
            self._run(self.cycles_per_frame)
        self.present(self.vm.frame())

    def step_once(self):
        """Single-step one cycle, paused or not."""
        self._run(1)
        self.present(self.vm.frame())

    def skip(self):
        """Move PC past the instruction at PC without running it.

        This is the way past a fault (faulting cycles never advance) or an
        unwanted key wait. The driver stays paused so the user can step on.
        """
        self.vm.pc = (self.vm.pc + 2) & 0xFFFF
        self.vm.state = RUNNING
        self.fault = None
        self.paused = True
        self.present(self.vm.frame())

    def pause(self):
        self.paused = True

    def resume(self):
        self.fault = None
        self.paused = False

    def toggle_pause(self):
        if self.paused:
            self.resume()
        else:
            self.pause()
        return self.paused

    def _run(self, budget):
        for _ in range(budget):
            try:
                flow = self.vm.step()
            except Chip8Error as e:
                self._fault(e)
                return
            if flow is Flow.WAITING:
                return
            self.cycle_count += 1
            if flow is Flow.DREW:
                return

    def _fault(self, error):
        self.fault = error
        self.paused = True
        logger.error("%s\n%s", error, format_state(self.vm))
        if self.on_fault is not None:
            self.on_fault(error)
