# hachip/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import logging
from typing import Callable, Dict, List, Optional, Tuple

from hachip.core.cpu import AbstractCpu
from hachip.core.errors import EmulationError, MemoryAccessError
from hachip.core.snapshot import Operation, Snapshot
from hachip.common.types import RegisterLayoutInfo, RegisterInfo
from hachip.devices.display import Display
from hachip.devices.keypad import KeyState
from hachip.transport.bus import Bus
from hachip.arch.chip8.state import (
    Chip8CpuState, FONT_START, PROGRAM_START, MAX_PROGRAM_SIZE, REGISTER_COUNT, VF,
)
from hachip.arch.chip8.font import FONT_SET
from hachip.arch.chip8.instructions import (
    Peripherals, decode_opcode, execute_instruction, system_random_byte,
)
from hachip.arch.chip8 import disassembler

logger = logging.getLogger(__name__)


# @intent:responsibility CHIP-8 CPUのフェッチ・デコード・実行サイクルとタイマー更新を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8インタプリタ。
    画面とキー状態は注入された周辺装置を通じてのみ操作します。
    """
    # @intent:pre-condition busには0x000-0xFFFの4KBメモリがマップされている必要があります。
    def __init__(self, bus: Bus, display: Display, keypad: KeyState,
                 random_source: Optional[Callable[[], int]] = None):
        self._devices = Peripherals(
            display=display,
            keypad=keypad,
            random_byte=random_source or system_random_byte,
        )
        super().__init__(bus)

    @property
    def display(self) -> Display:
        return self._devices.display

    @property
    def keypad(self) -> KeyState:
        return self._devices.keypad

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility レジスタとメモリをゼロに戻し、画面を消去し、フォントセットを再配置します。
    def reset(self) -> None:
        super().reset()
        self._bus.clear()
        self.display.clear()
        for offset, data in enumerate(FONT_SET):
            self._bus.load(FONT_START + offset, data)

    # @intent:responsibility プログラムイメージを0x200から配置します。
    # @intent:pre-condition イメージは0xE00バイト以下である必要があります。超える場合は何も書き込まずにエラーとします。
    def load(self, program: bytes) -> None:
        if len(program) > MAX_PROGRAM_SIZE:
            raise MemoryAccessError(PROGRAM_START, len(program))
        for offset, data in enumerate(program):
            self._bus.load(PROGRAM_START + offset, data)
        logger.info("ROM loaded (%d bytes)", len(program))

    # @intent:responsibility PCの2バイトをビッグエンディアンで結合して命令ワードとします。
    def _fetch(self) -> int:
        pc = self._state.pc
        if not (self._bus.is_mapped(pc) and self._bus.is_mapped(pc + 1)):
            raise MemoryAccessError(pc, 2)
        return (self._bus.read(pc) << 8) | self._bus.read(pc + 1)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> Optional[EmulationError]:
        return execute_instruction(operation, self._state, self._bus, self._devices)

    # @intent:responsibility 正常に実行されたサイクルの最後に、2つのタイマーをそれぞれ1だけ減らします。
    def _end_cycle(self) -> None:
        if self._state.dt > 0:
            self._state.dt -= 1
        if self._state.st > 0:
            self._state.st -= 1

    # @intent:responsibility 1サイクルを実行し、障害が報告された場合はそれを例外として送出します。
    def run_cycle(self) -> Snapshot:
        snapshot = self.step()
        if snapshot.fault is not None:
            raise snapshot.fault
        return snapshot

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{n:X}": s.v[n] for n in range(REGISTER_COUNT)}
        registers.update({"I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.dt, "ST": s.st})
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility VFを唯一のフラグとして報告します（非ゼロでTrue）。
    def get_flag_state(self) -> Dict[str, bool]:
        return {"VF": self._state.v[VF] != 0}

    # @intent:responsibility 呼び出しスタックの有効な部分（底から順）を返します。
    def get_call_stack(self) -> List[int]:
        return list(self._state.stack[:self._state.sp])

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
