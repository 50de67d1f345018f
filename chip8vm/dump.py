"""Human-readable views of machine state, for fault reports and the debug panel."""

from chip8vm.config import MEMORY_SIZE
from chip8vm.opcodes import mnemonic
from chip8vm.vm import AwaitingKey


def current_opcode(vm):
    """The word at PC, or None when PC points outside memory."""
    if vm.pc + 1 >= MEMORY_SIZE:
        return None
    return (vm.memory[vm.pc] << 8) | vm.memory[vm.pc + 1]


def format_instruction(vm):
    opcode = current_opcode(vm)
    if opcode is None:
        return "----  (PC outside memory)"
    return "%04X  %s" % (opcode, mnemonic(opcode))


def format_state(vm):
    """Full dump: registers, I, PC, stack, timers and the instruction at PC."""
    lines = ["Registers:"]
    for i, value in enumerate(vm.V):
        lines.append("\tV%X: %3d (0x%02X)" % (i, value, value))
    lines.append("Address Register: 0x%03X" % vm.I)
    lines.append("Program Counter: 0x%03X" % vm.pc)
    lines.append("Stack Pointer: %d" % vm.sp)
    lines.append("Stack:")
    for i in range(vm.sp):
        lines.append("\t%d: 0x%03X" % (i, int(vm.stack[i])))
    lines.append("Delay Timer: %d" % vm.delay)
    lines.append("Sound Timer: %d" % vm.sound)
    if isinstance(vm.state, AwaitingKey):
        lines.append("Waiting for key into V%X" % vm.state.register)
    lines.append("Current Instruction: %s" % format_instruction(vm))
    return "\n".join(lines)


def panel_lines(vm):
    """Compact register view for the window's side panel."""
    lines = []
    for row in range(0, 16, 2):
        lines.append("V%X %02X   V%X %02X" % (row, vm.V[row], row + 1, vm.V[row + 1]))
    lines.append("I  %03X  PC %03X" % (vm.I, vm.pc))
    lines.append("SP %2d   DT %02X ST %02X" % (vm.sp, vm.delay, vm.sound))
    lines.append(format_instruction(vm))
    return lines
