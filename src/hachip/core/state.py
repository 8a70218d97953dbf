# hachip/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（PCとSP）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass

# @intent:responsibility 全アーキテクチャ共通のPCとSPを保持します。固有のレジスタはサブクラスで追加します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    具体的なアーキテクチャ（CHIP-8など）はこれを拡張します。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x00    # Stack Pointer
