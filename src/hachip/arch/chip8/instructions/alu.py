# hachip/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

VF（V[0xF]）への副作用は各命令の規則どおりに設定されます。
ADD Vx, Vyは桁あふれが無い場合にVFを変更せず、SHLはVFに0x80マスクの生の値を格納します。
"""
from hachip.core.snapshot import Operation
from hachip.transport.bus import Bus
from hachip.arch.chip8.state import Chip8CpuState, VF
from .base import (
    InstructionKind, Peripherals, make_operation, advance,
    field_x, field_y, field_kk, fmt_vx, fmt_vy, fmt_byte,
)

# --- ADD Vx, byte ---
def decode_add_vx_byte(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.ADD_VX_BYTE, "ADD", fmt_vx(opcode), fmt_byte(opcode))

# @intent:responsibility 即値を加算します。桁あふれは切り捨てられ、VFは変化しません。
def execute_add_vx_byte(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    x = field_x(op.opcode)
    state.v[x] = (state.v[x] + field_kk(op.opcode)) & 0xFF
    advance(state)

# --- LD Vx, Vy ---
def decode_ld_vx_vy(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_VX_VY, "LD", fmt_vx(opcode), fmt_vy(opcode))

def execute_ld_vx_vy(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] = state.v[field_y(op.opcode)]
    advance(state)

# --- OR / AND / XOR ---
def decode_or(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.OR, "OR", fmt_vx(opcode), fmt_vy(opcode))

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] |= state.v[field_y(op.opcode)]
    advance(state)

def decode_and(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.AND, "AND", fmt_vx(opcode), fmt_vy(opcode))

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] &= state.v[field_y(op.opcode)]
    advance(state)

def decode_xor(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.XOR, "XOR", fmt_vx(opcode), fmt_vy(opcode))

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.v[field_x(op.opcode)] ^= state.v[field_y(op.opcode)]
    advance(state)

# --- ADD Vx, Vy ---
def decode_add_vx_vy(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.ADD_VX_VY, "ADD", fmt_vx(opcode), fmt_vy(opcode))

# @intent:responsibility Vx + Vy を実行します。桁あふれ時のみVF=1とし、それ以外ではVFをクリアしません。
def execute_add_vx_vy(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    x, y = field_x(op.opcode), field_y(op.opcode)
    total = state.v[x] + state.v[y]
    if total > 0xFF:
        state.v[VF] = 1
    state.v[x] = total & 0xFF
    advance(state)

# --- SUB Vx, Vy ---
def decode_sub(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SUB, "SUB", fmt_vx(opcode), fmt_vy(opcode))

# @intent:responsibility Vx - Vy を実行します。VFは元のVxがVyより大きい場合に1（等しい場合は0）。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    x, y = field_x(op.opcode), field_y(op.opcode)
    vx, vy = state.v[x], state.v[y]
    state.v[VF] = 1 if vx > vy else 0
    state.v[x] = (vx - vy) & 0xFF
    advance(state)

# --- SHR Vx ---
def decode_shr(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SHR, "SHR", fmt_vx(opcode))

def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    x = field_x(op.opcode)
    state.v[VF] = state.v[x] & 0x01
    state.v[x] = state.v[x] >> 1
    advance(state)

# --- SUBN Vx, Vy ---
def decode_subn(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SUBN, "SUBN", fmt_vx(opcode), fmt_vy(opcode))

# @intent:responsibility Vy - Vx をVxに格納します。借りが発生した場合VF=0、それ以外はVF=1。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    x, y = field_x(op.opcode), field_y(op.opcode)
    vx, vy = state.v[x], state.v[y]
    state.v[VF] = 0 if vy < vx else 1
    state.v[x] = (vy - vx) & 0xFF
    advance(state)

# --- SHL Vx ---
def decode_shl(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SHL, "SHL", fmt_vx(opcode))

# @intent:responsibility Vxを左シフトします。VFには最上位ビットのマスク値（0x80または0x00）がそのまま入ります。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    x = field_x(op.opcode)
    state.v[VF] = state.v[x] & 0x80
    state.v[x] = (state.v[x] << 1) & 0xFF
    advance(state)

# --- RND Vx, byte ---
def decode_rnd(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.RND, "RND", fmt_vx(opcode), fmt_byte(opcode))

# @intent:responsibility 乱数バイトとkkの論理積をVxに格納します。
# @intent:pre-condition 乱数源の失敗時はRandomSourceErrorが送出され、状態は変更されません。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    value = devices.random_byte() & 0xFF
    state.v[field_x(op.opcode)] = value & field_kk(op.opcode)
    advance(state)
