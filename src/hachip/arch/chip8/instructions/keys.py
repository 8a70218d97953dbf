# hachip/arch/chip8/instructions/keys.py
"""
キー入力命令の実装。キー状態はPeripherals.keypadから参照します。
"""
from hachip.core.errors import KeyIndexError
from hachip.core.snapshot import Operation
from hachip.transport.bus import Bus
from hachip.arch.chip8.state import Chip8CpuState
from hachip.devices.keypad import KEY_COUNT
from .base import InstructionKind, Peripherals, make_operation, advance, field_x, fmt_vx

# @intent:pre-condition Vxが範囲外なら、PCを動かす前にKeyIndexErrorとします。
def _key_in_vx(state: Chip8CpuState, op: Operation) -> int:
    key = state.v[field_x(op.opcode)]
    if key >= KEY_COUNT:
        raise KeyIndexError(key, state.pc)
    return key

# --- SKP Vx ---
def decode_skp(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SKP, "SKP", fmt_vx(opcode))

def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    advance(state, skip=devices.keypad.is_down(_key_in_vx(state, op)))

# --- SKNP Vx ---
def decode_sknp(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.SKNP, "SKNP", fmt_vx(opcode))

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    advance(state, skip=not devices.keypad.is_down(_key_in_vx(state, op)))

# --- LD Vx, K ---
def decode_ld_vx_k(opcode: int) -> Operation:
    return make_operation(opcode, InstructionKind.LD_VX_K, "LD", fmt_vx(opcode), "K")

# @intent:responsibility キー待ちを1回のポーリングとして実行します。
# @intent:rationale 0..15を順に走査し、押されているキーごとにVxを更新してPCを2進めます。
#                  その後、押下の有無に関わらずPCをさらに2進めます。
#                  キーが押されていない場合も次の命令へ進むため、待機の継続は呼び出し側のループに委ねられます。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, op: Operation, devices: Peripherals) -> None:
    x = field_x(op.opcode)
    for index in range(KEY_COUNT):
        if devices.keypad.is_down(index):
            state.v[x] = index
            advance(state)
    advance(state)
