# hachip/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通定義とユーティリティ。

命令ワードのフィールド配置:
    x   = bits 11-8 (レジスタ番号)
    y   = bits 7-4  (レジスタ番号)
    n   = bits 3-0
    kk  = bits 7-0
    nnn = bits 11-0
"""
import secrets
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from hachip.core.errors import MemoryAccessError, RandomSourceError
from hachip.core.snapshot import Operation
from hachip.devices.display import Display
from hachip.devices.keypad import KeyState
from hachip.transport.bus import Bus
from hachip.arch.chip8.state import Chip8CpuState


# @intent:responsibility デコード結果の命令種別を表す閉じた列挙型です。UNKNOWNは未定義ワードを表します。
class InstructionKind(Enum):
    CLS = auto()          # 00E0
    RET = auto()          # 00EE
    JP = auto()           # 1nnn
    CALL = auto()         # 2nnn
    SE_VX_BYTE = auto()   # 3xkk
    SNE_VX_BYTE = auto()  # 4xkk
    SE_VX_VY = auto()     # 5xy0
    LD_VX_BYTE = auto()   # 6xkk
    ADD_VX_BYTE = auto()  # 7xkk
    LD_VX_VY = auto()     # 8xy0
    OR = auto()           # 8xy1
    AND = auto()          # 8xy2
    XOR = auto()          # 8xy3
    ADD_VX_VY = auto()    # 8xy4
    SUB = auto()          # 8xy5
    SHR = auto()          # 8xy6
    SUBN = auto()         # 8xy7
    SHL = auto()          # 8xyE
    SNE_VX_VY = auto()    # 9xy0
    LD_I_ADDR = auto()    # Annn
    JP_V0_ADDR = auto()   # Bnnn
    RND = auto()          # Cxkk
    DRW = auto()          # Dxyn
    SKP = auto()          # Ex9E
    SKNP = auto()         # ExA1
    LD_VX_DT = auto()     # Fx07
    LD_VX_K = auto()      # Fx0A
    LD_DT_VX = auto()     # Fx15
    LD_ST_VX = auto()     # Fx18
    ADD_I_VX = auto()     # Fx1E
    LD_F_VX = auto()      # Fx29
    LD_B_VX = auto()      # Fx33
    LD_I_VX = auto()      # Fx55
    LD_VX_I = auto()      # Fx65
    UNKNOWN = auto()


# @intent:utility_function OSの暗号論的乱数源から1バイトを取得します。
# @intent:post-condition 乱数源が利用できない場合はRandomSourceErrorを送出し、固定値で代用しません。
def system_random_byte() -> int:
    try:
        return secrets.randbits(8)
    except (OSError, NotImplementedError) as e:
        raise RandomSourceError(f"Random source unavailable: {e}") from e


# @intent:responsibility 命令の実行関数が参照する周辺装置をまとめます。
@dataclass
class Peripherals:
    display: Display
    keypad: KeyState
    random_byte: Callable[[], int] = system_random_byte


# --- フィールド抽出 ---

def field_x(opcode: int) -> int:
    return (opcode >> 8) & 0xF

def field_y(opcode: int) -> int:
    return (opcode >> 4) & 0xF

def field_n(opcode: int) -> int:
    return opcode & 0xF

def field_kk(opcode: int) -> int:
    return opcode & 0xFF

def field_nnn(opcode: int) -> int:
    return opcode & 0xFFF


# --- オペランド表示 ---

def fmt_vx(opcode: int) -> str:
    return f"V{field_x(opcode):X}"

def fmt_vy(opcode: int) -> str:
    return f"V{field_y(opcode):X}"

def fmt_byte(opcode: int) -> str:
    return f"#{field_kk(opcode):02X}"

def fmt_addr(opcode: int) -> str:
    return f"${field_nnn(opcode):03X}"


# @intent:utility_function 命令ワードと種別からOperationを生成します。
def make_operation(opcode: int, kind: InstructionKind, mnemonic: str, *operands: str) -> Operation:
    return Operation(opcode_hex=f"{opcode:04X}", mnemonic=mnemonic, operands=list(operands), kind=kind)


# @intent:utility_function PCを次の命令へ進めます。skip=Trueの場合は次の命令を1つ飛ばします。
def advance(state: Chip8CpuState, skip: bool = False) -> None:
    state.pc = (state.pc + (4 if skip else 2)) & 0xFFFF


# @intent:utility_function メモリウィンドウ [address, address+length) が全てマップされていることを確認します。
# @intent:pre-condition 命令の実行関数は、状態を変更する前にこれを呼び出します。
def check_window(bus: Bus, address: int, length: int) -> None:
    if length <= 0:
        return
    if not (bus.is_mapped(address) and bus.is_mapped(address + length - 1)):
        raise MemoryAccessError(address, length)
