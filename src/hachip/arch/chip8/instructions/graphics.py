# hachip/arch/chip8/instructions/graphics.py
"""
画面命令（消去、スプライト描画）の実装。実際の描画はPeripherals.displayに委譲します。
"""
from hachip.core.snapshot import Operation
from hachip.transport.bus import Bus
from hachip.arch.chip8.state import Chip8CpuState, VF
from .base import (
    InstructionKind, Peripherals, make_operation, advance, check_window,
    field_x, field_y, field_n, fmt_vx, fmt_vy,
)

# --- CLS ---
def decode_cls(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.CLS, "CLS")

def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    devices.display.clear()
    advance(state)

# --- DRW Vx, Vy, n ---
def decode_drw(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.DRW, "DRW", fmt_vx(opcode), fmt_vy(opcode), f"{field_n(opcode)}")

# @intent:responsibility I から始まるnバイトのスプライトを(Vx, Vy)に描画し、衝突の有無をVFに設定します。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    opcode = op.opcode
    x = state.v[field_x(opcode)]
    y = state.v[field_y(opcode)]
    height = field_n(opcode)
    check_window(bus, state.i, height)
    sprite = [bus.read(state.i + row) for row in range(height)]
    collision = devices.display.draw(x, y, sprite)
    state.v[VF] = 1 if collision else 0
    advance(state)
