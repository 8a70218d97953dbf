# tests/arch/chip8/test_state.py
"""
hachip.arch.chip8.stateモジュールの単体テスト。
"""
from hachip.arch.chip8.state import (
    Chip8CpuState, MEMORY_SIZE, PROGRAM_START, MAX_PROGRAM_SIZE, STACK_DEPTH, REGISTER_COUNT,
)


class TestChip8CpuState:
    def test_default_state(self):
        state = Chip8CpuState()
        assert state.pc == PROGRAM_START == 0x200
        assert state.sp == 0
        assert state.i == 0
        assert state.v == [0] * REGISTER_COUNT
        assert state.stack == [0] * STACK_DEPTH
        assert (state.dt, state.st) == (0, 0)

    def test_register_files_are_not_shared(self):
        a, b = Chip8CpuState(), Chip8CpuState()
        a.v[0] = 1
        a.stack[0] = 0x200
        assert b.v[0] == 0
        assert b.stack[0] == 0

    # @intent:test_case_vf VFはv[0xF]の別名であることを検証します。
    def test_vf_alias(self):
        state = Chip8CpuState()
        state.vf = 0x1FF
        assert state.v[0xF] == 0xFF
        assert state.vf == 0xFF

    def test_memory_layout_constants(self):
        assert MEMORY_SIZE == 0x1000
        assert MAX_PROGRAM_SIZE == 0xE00
