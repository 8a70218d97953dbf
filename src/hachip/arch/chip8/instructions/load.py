# hachip/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、インデックスレジスタ、タイマー、メモリ転送）の実装。
"""
from hachip.core.snapshot import Operation
from hachip.transport.bus import Bus
from hachip.arch.chip8.state import Chip8CpuState
from hachip.arch.chip8.font import GLYPH_HEIGHT
from .base import (
    InstructionKind, Peripherals, make_operation, advance, check_window,
    field_x, field_kk, field_nnn, fmt_vx, fmt_byte, fmt_addr,
)

# --- LD Vx, byte ---
def decode_ld_vx_byte(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_VX_BYTE, "LD", fmt_vx(opcode), fmt_byte(opcode))

def execute_ld_vx_byte(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] = field_kk(op.opcode)
    advance(state)

# --- LD I, addr ---
def decode_ld_i_addr(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_I_ADDR, "LD", "I", fmt_addr(opcode))

def execute_ld_i_addr(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.i = field_nnn(op.opcode)
    advance(state)

# --- LD Vx, DT ---
def decode_ld_vx_dt(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_VX_DT, "LD", fmt_vx(opcode), "DT")

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] = state.dt
    advance(state)

# --- LD DT, Vx ---
def decode_ld_dt_vx(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_DT_VX, "LD", "DT", fmt_vx(opcode))

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.dt = state.v[field_x(op.opcode)]
    advance(state)

# --- LD ST, Vx ---
def decode_ld_st_vx(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_ST_VX, "LD", "ST", fmt_vx(opcode))

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.st = state.v[field_x(op.opcode)]
    advance(state)

# --- ADD I, Vx ---
def decode_add_i_vx(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.ADD_I_VX, "ADD", "I", fmt_vx(opcode))

# @intent:responsibility IにVxを加算します。VFは変化しません。
def execute_add_i_vx(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.i = (state.i + state.v[field_x(op.opcode)]) & 0xFFFF
    advance(state)

# --- LD F, Vx ---
def decode_ld_f_vx(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_F_VX, "LD", "F", fmt_vx(opcode))

# @intent:responsibility Vxの値に対応するフォントグリフの先頭アドレスをIに設定します。
def execute_ld_f_vx(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.i = state.v[field_x(op.opcode)] * GLYPH_HEIGHT
    advance(state)

# --- LD B, Vx ---
def decode_ld_b_vx(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_B_VX, "LD", "B", fmt_vx(opcode))

# @intent:responsibility Vxを百・十・一の位に分解し、I, I+1, I+2に格納します。
# @intent:rationale 一の位は (Vx % 100) % 10 で求めます。8bit値では Vx % 10 と一致します。
def execute_ld_b_vx(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    value = state.v[field_x(op.opcode)]
    check_window(bus, state.i, 3)
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, (value % 100) % 10)
    advance(state)

# --- LD [I], Vx ---
def decode_ld_i_vx(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_I_VX, "LD", "[I]", fmt_vx(opcode))

# @intent:responsibility V0からVxまでをIから始まるメモリに格納します。Iは変化しません。
def execute_ld_i_vx(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    x = field_x(op.opcode)
    check_window(bus, state.i, x + 1)
    for offset in range(x + 1):
        bus.write(state.i + offset, state.v[offset])
    advance(state)

# --- LD Vx, [I] ---
def decode_ld_vx_i(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_VX_I, "LD", fmt_vx(opcode), "[I]")

def execute_ld_vx_i(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    x = field_x(op.opcode)
    check_window(bus, state.i, x + 1)
    for offset in range(x + 1):
        state.v[offset] = bus.read(state.i + offset)
    advance(state)
