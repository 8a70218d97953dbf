# hachip/config/models.py
"""
システム構成のデータモデル。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


# @intent:responsibility 未定義オペコードが報告された時の実行制御の方針です。
class FaultPolicy(Enum):
    HALT = "halt"
    CONTINUE = "continue"


# ホストのキー名から論理キー(0x0-0xF)への既定の対応表。
# 左上の4x4（1234/QWER/ASDF/ZXCV）をCOSMAC VIPのキー配置に対応させます。
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#FFFFFF"
    background: str = "#000000"


@dataclass
class TimingConfig:
    cycle_interval_ms: int = 8


@dataclass
class SystemConfig:
    rom: Optional[str] = None
    display: DisplayConfig = field(default_factory=DisplayConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    fault_policy: FaultPolicy = FaultPolicy.HALT
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
