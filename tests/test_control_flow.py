"""Jumps, subroutines, skips and the fault convention.

Faults do not advance: a cycle that raises leaves PC, timers and every
other piece of state exactly as they were before it.
"""

import pytest

from chip8vm.config import STACK_SIZE
from chip8vm.errors import IllegalReturn, StackFull, UnknownOp
from chip8vm.vm import Flow

from conftest import run, words


def test_non_branching_instruction_advances_pc(vm):
    assert run(vm, 0x6001) == [Flow.NEXT]
    assert vm.pc == 0x202


def test_jump(vm):
    assert run(vm, 0x1ABC) == [Flow.JUMPED]
    assert vm.pc == 0xABC


def test_jump_plus_v0(vm):
    vm.V[0] = 0x10
    assert run(vm, 0xB300) == [Flow.JUMPED]
    assert vm.pc == 0x310


def test_call_and_return(vm):
    vm.load_program(words(0x2300))
    vm.memory[0x300:0x302] = words(0x00EE)
    assert vm.step() is Flow.JUMPED
    assert vm.pc == 0x300
    assert vm.sp == 1
    assert vm.stack[0] == 0x200
    assert vm.step() is Flow.NEXT
    assert vm.pc == 0x202
    assert vm.sp == 0


def test_stack_holds_96_calls_and_unwinds_in_order(vm):
    # each call targets the next word, so the stack fills with 0x200, 0x202, ...
    program = [0x2000 | (0x200 + 2 * (i + 1)) for i in range(STACK_SIZE + 1)]
    vm.load_program(words(*program))
    for _ in range(STACK_SIZE):
        vm.step()
    assert vm.sp == STACK_SIZE
    assert vm.pc == 0x200 + 2 * STACK_SIZE

    with pytest.raises(StackFull):
        vm.step()
    assert vm.sp == STACK_SIZE
    assert vm.pc == 0x200 + 2 * STACK_SIZE

    vm.memory[0x400:0x402] = words(0x00EE)
    returned_to = []
    for _ in range(STACK_SIZE):
        vm.pc = 0x400
        vm.step()
        returned_to.append(vm.pc)
    assert returned_to == [0x202 + 2 * i for i in reversed(range(STACK_SIZE))]
    assert vm.sp == 0

    vm.pc = 0x400
    with pytest.raises(IllegalReturn):
        vm.step()
    assert vm.pc == 0x400


def test_return_on_empty_stack(vm):
    vm.delay = 3
    vm.load_program(words(0x00EE))
    with pytest.raises(IllegalReturn):
        vm.step()
    assert vm.pc == 0x200
    assert vm.delay == 3


@pytest.mark.parametrize("setup,opcode,skips", [
    ({1: 0x42}, 0x3142, True),
    ({1: 0x41}, 0x3142, False),
    ({1: 0x41}, 0x4142, True),
    ({1: 0x42}, 0x4142, False),
    ({1: 7, 2: 7}, 0x5120, True),
    ({1: 7, 2: 8}, 0x5120, False),
    ({1: 7, 2: 8}, 0x9120, True),
    ({1: 7, 2: 7}, 0x9120, False),
])
def test_skips(vm, setup, opcode, skips):
    for reg, value in setup.items():
        vm.V[reg] = value
    assert run(vm, opcode) == [Flow.NEXT]
    assert vm.pc == (0x204 if skips else 0x202)


@pytest.mark.parametrize("opcode", [0x0000, 0x0123, 0x00E1, 0x5121, 0x8128, 0x812F, 0x9121, 0xE1FF, 0xF1FF, 0xF000])
def test_unknown_opcode_faults_without_advancing(vm, opcode):
    vm.V[1] = 5
    vm.delay = vm.sound = 4
    vm.load_program(words(opcode))
    with pytest.raises(UnknownOp) as info:
        vm.step()
    assert info.value.opcode == opcode
    assert vm.pc == 0x200
    assert vm.delay == 4 and vm.sound == 4
    assert vm.V[1] == 5 and vm.V[0xF] == 0


def test_timers_count_down_once_per_cycle_and_stop_at_zero(vm):
    vm.V[0], vm.V[1] = 2, 5
    run(vm, 0xF015, 0xF118, 0x6000, 0x6000, 0x6000)
    # set on cycles 1 and 2, then decremented at the end of every cycle including their own
    assert vm.delay == 0
    assert vm.sound == 1


def test_read_delay_timer(vm):
    vm.delay = 10
    run(vm, 0xF307)
    assert vm.V[3] == 10
    assert vm.delay == 9
