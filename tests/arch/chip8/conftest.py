# tests/arch/chip8/conftest.py
"""
CHIP-8テスト用の共通フィクスチャ。
"""
from typing import NamedTuple

import pytest

from hachip.transport.bus import Bus, RAM
from hachip.devices.display import FrameBuffer
from hachip.devices.keypad import Keypad
from hachip.arch.chip8.cpu import Chip8Cpu
from hachip.arch.chip8.state import MEMORY_SIZE


class Machine(NamedTuple):
    cpu: Chip8Cpu
    bus: Bus
    display: FrameBuffer
    keypad: Keypad


# 乱数源は固定値を返す
FIXED_RANDOM_BYTE = 0xA5


@pytest.fixture
def machine():
    bus = Bus()
    bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))
    display = FrameBuffer()
    keypad = Keypad()
    cpu = Chip8Cpu(bus, display, keypad, random_source=lambda: FIXED_RANDOM_BYTE)
    cpu.reset()
    return Machine(cpu, bus, display, keypad)


@pytest.fixture
def run(machine):
    """
    命令ワード列を0x200から配置し、その数だけサイクルを実行して最後のSnapshotを返す関数。
    """
    def _run(*words, cycles=None):
        program = bytearray()
        for word in words:
            program += bytes([(word >> 8) & 0xFF, word & 0xFF])
        machine.cpu.load(bytes(program))
        snapshot = None
        for _ in range(len(words) if cycles is None else cycles):
            snapshot = machine.cpu.step()
        return snapshot
    return _run
