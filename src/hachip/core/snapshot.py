# hachip/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクル実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
UIとデバッガへの情報提供、および未定義オペコードなどの障害の報告に用いる責務を負います。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from hachip.core.state import CpuState
from hachip.core.errors import EmulationError
from hachip.transport.bus import BusAccessType, BusAccess


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True)
class Operation:
    """
    デコードされた命令の詳細（HEX、ニーモニック、オペランド、命令種別）を記録するデータクラス。
    """
    opcode_hex: str  # 例: "8124"
    mnemonic: str  # 例: "ADD"
    operands: List[str] = field(default_factory=list)  # 例: ["V1", "V2"]
    kind: Optional[Enum] = None  # アーキテクチャ固有の命令種別（実行関数の選択に使用）
    cycle_count: int = 1
    length: int = 2  # 命令のバイト長

    @property
    def opcode(self) -> int:
        return int(self.opcode_hex, 16)

    # @intent:responsibility 表示用の "MNEMONIC op1, op2" 文字列を返します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    累計サイクル数と、実行した命令の表示用文字列。
    """
    cycle_count: int
    disassembly: Optional[str] = None  # 例: "0x200: LD V1, #AA"


# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1サイクル実行後の状態を記録した不変のデータ構造。
    `fault` が設定されている場合、そのサイクルは障害を報告して終了しています。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
    fault: Optional[EmulationError] = None

    @property
    def ok(self) -> bool:
        return self.fault is None

    # @intent:responsibility 指定種別のバスアクセスのみを抽出します。
    def accesses(self, access_type: BusAccessType) -> List[BusAccess]:
        return [a for a in self.bus_activity if a.access_type == access_type]
