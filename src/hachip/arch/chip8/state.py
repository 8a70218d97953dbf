# hachip/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from hachip.core.state import CpuState

# @intent:constant メモリレイアウトとレジスタファイルの寸法を定義します。
MEMORY_SIZE = 0x1000
FONT_START = 0x000
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START  # 0xE00
REGISTER_COUNT = 16
STACK_DEPTH = 16
VF = 0xF
# RETで空いたスタックスロットに書き込まれる値
STACK_SENTINEL = 0xBEEF


# @intent:responsibility CHIP-8 CPUの全てのレジスタ（V0-VF, I, PC, SP, スタック, 2つのタイマー）を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    VFは独立したフラグレジスタではなく、インデックス0xFの汎用レジスタです。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000  # Index Register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    dt: int = 0x00  # Delay Timer
    st: int = 0x00  # Sound Timer

    @property
    def vf(self) -> int:
        return self.v[VF]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[VF] = value & 0xFF
