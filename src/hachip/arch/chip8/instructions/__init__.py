# hachip/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from typing import Optional

from hachip.core.errors import EmulationError, UnknownOpcodeError
from hachip.core.snapshot import Operation
from hachip.transport.bus import Bus
from hachip.arch.chip8.state import Chip8CpuState
from .base import InstructionKind, Peripherals, make_operation, advance, system_random_byte
from .maps import DECODE_MAP, EXECUTE_MAP, classify

# @intent:responsibility CHIP-8の命令ワードをデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    命令ワードを分類し、Operationオブジェクトを返します。
    未定義のワードは種別UNKNOWNのOperationになります。
    """
    decoder = DECODE_MAP.get(classify(opcode))
    if decoder:
        return decoder(opcode)
    return make_operation(opcode, InstructionKind.UNKNOWN, "UNKNOWN", f"${opcode:04X}")

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:return 未定義の命令であればUnknownOpcodeError（PCは2進めた後）、それ以外はNone。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus,
                        devices: Peripherals) -> Optional[EmulationError]:
    executor = EXECUTE_MAP.get(operation.kind)
    if executor is None:
        address = state.pc
        advance(state)
        return UnknownOpcodeError(operation.opcode, address)
    executor(state, bus, operation, devices)
    return None
