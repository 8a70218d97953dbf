# hachip/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
import logging

from hachip.core.errors import StackError
from hachip.core.snapshot import Operation
from hachip.transport.bus import Bus
from hachip.arch.chip8.state import Chip8CpuState, STACK_DEPTH, STACK_SENTINEL
from .base import (
    InstructionKind, Peripherals, make_operation, advance,
    field_x, field_y, field_kk, field_nnn, fmt_vx, fmt_vy, fmt_byte, fmt_addr,
)

logger = logging.getLogger(__name__)

# --- RET ---
def decode_ret(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.RET, "RET")

# @intent:responsibility RET命令を実行します。
# @intent:rationale スタックにはCALL命令自身のアドレスが積まれているため、復帰先はその+2になります。
#                  空いたスロットには番兵値を書き込みます。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    if state.sp == 0:
        raise StackError(f"Stack underflow on RET at {state.pc:#05x}")
    state.sp = (state.sp - 1) & 0xFF
    return_addr = state.stack[state.sp]
    state.stack[state.sp] = STACK_SENTINEL
    state.pc = (return_addr + 2) & 0xFFFF
    logger.debug("return to %#05x (sp=%d)", state.pc, state.sp)

# --- JP addr ---
def decode_jp(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.JP, "JP", fmt_addr(opcode))

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.pc = field_nnn(op.opcode)

# --- CALL addr ---
def decode_call(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.CALL, "CALL", fmt_addr(opcode))

# @intent:responsibility CALL命令を実行し、現在のPC（CALL命令のアドレス）をスタックに積んでジャンプします。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    if state.sp >= STACK_DEPTH:
        raise StackError(f"Stack overflow on CALL at {state.pc:#05x}")
    state.stack[state.sp] = state.pc
    state.sp = (state.sp + 1) & 0xFF
    state.pc = field_nnn(op.opcode)
    logger.debug("call subroutine at %#05x (sp=%d)", state.pc, state.sp)

# --- SE Vx, byte ---
def decode_se_vx_byte(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SE_VX_BYTE, "SE", fmt_vx(opcode), fmt_byte(opcode))

def execute_se_vx_byte(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    advance(state, skip=state.v[field_x(op.opcode)] == field_kk(op.opcode))

# --- SNE Vx, byte ---
def decode_sne_vx_byte(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SNE_VX_BYTE, "SNE", fmt_vx(opcode), fmt_byte(opcode))

def execute_sne_vx_byte(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    advance(state, skip=state.v[field_x(op.opcode)] != field_kk(op.opcode))

# --- SE Vx, Vy ---
def decode_se_vx_vy(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SE_VX_VY, "SE", fmt_vx(opcode), fmt_vy(opcode))

def execute_se_vx_vy(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    opcode = op.opcode
    advance(state, skip=state.v[field_x(opcode)] == state.v[field_y(opcode)])

# --- SNE Vx, Vy ---
def decode_sne_vx_vy(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SNE_VX_VY, "SNE", fmt_vx(opcode), fmt_vy(opcode))

def execute_sne_vx_vy(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    opcode = op.opcode
    advance(state, skip=state.v[field_x(opcode)] != state.v[field_y(opcode)])

# --- JP V0, addr ---
def decode_jp_v0_addr(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.JP_V0_ADDR, "JP", "V0", fmt_addr(opcode))

def execute_jp_v0_addr(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    state.pc = (state.v[0] + field_nnn(op.opcode)) & 0xFFFF
