# tests/core/test_cpu.py
"""
hachip.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List, Optional, Tuple

from hachip.core.state import CpuState
from hachip.core.cpu import AbstractCpu
from hachip.core.errors import EmulationError, UnknownOpcodeError
from hachip.core.snapshot import Snapshot, Operation
from hachip.transport.bus import Bus, RAM, BusAccessType
from hachip.common.types import RegisterLayoutInfo, RegisterInfo

# @intent:test_suite CPUの状態管理と抽象CPUの命令サイクル（Template Method）を検証します。

class DummyCpu(AbstractCpu):
    """
    1バイト命令のテスト用CPU。0x00はNOP、0xFFは未定義命令として障害を報告します。
    """
    def __init__(self, bus: Bus):
        super().__init__(bus)
        self.end_cycle_calls = 0

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=0x0000, sp=0x0000)

    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        if opcode == 0xFF:
            return Operation(opcode_hex=f"{opcode:02X}", mnemonic="UNKNOWN", length=1)
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic="NOP", length=1)

    def _execute(self, operation: Operation) -> Optional[EmulationError]:
        address = self._state.pc
        self._state.pc += 1
        if operation.mnemonic == "UNKNOWN":
            return UnknownOpcodeError(operation.opcode, address)
        self._bus.write(0x0020, 0xAB)
        return None

    def _end_cycle(self) -> None:
        self.end_cycle_calls += 1

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16), RegisterInfo("SP", 16)])]

    def get_flag_state(self) -> Dict[str, bool]:
        return {}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return [(start_addr + i, "00", "NOP") for i in range(length)]


class TestCpuState:
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0
        assert state.sp == 0

    def test_cpu_state_init_custom(self):
        state = CpuState(pc=0x1234, sp=0x0F)
        assert state.pc == 0x1234
        assert state.sp == 0x0F


class TestAbstractCpu:
    @pytest.fixture
    def cpu(self):
        bus = Bus()
        bus.register_device(0x0000, 0x00FF, RAM(0x100))
        return DummyCpu(bus)

    # @intent:test_case_step_returns_snapshot stepがSnapshotを返し、状態とバスアクティビティを含むことを検証します。
    def test_step_returns_snapshot(self, cpu):
        snapshot = cpu.step()

        assert isinstance(snapshot, Snapshot)
        assert snapshot.ok
        assert snapshot.state.pc == 1
        assert snapshot.operation.mnemonic == "NOP"
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.metadata.disassembly == "0x000: NOP"
        # フェッチ時の読み込みと実行時の書き込みが記録される
        assert [a.access_type for a in snapshot.bus_activity] == [BusAccessType.READ, BusAccessType.WRITE]
        assert snapshot.accesses(BusAccessType.WRITE)[0].address == 0x0020

    # @intent:test_case_snapshot_is_copy Snapshotの状態が以降のサイクルで書き換えられないことを検証します。
    def test_snapshot_state_is_independent(self, cpu):
        first = cpu.step()
        cpu.step()
        assert first.state.pc == 1
        assert cpu.get_state().pc == 2

    # @intent:test_case_fault_skips_end_cycle 障害が報告されたサイクルでは終了処理が呼ばれないことを検証します。
    def test_fault_is_reported_without_end_cycle(self, cpu):
        cpu.bus.write(0x0000, 0xFF)
        cpu.bus.get_and_clear_activity_log()

        snapshot = cpu.step()

        assert not snapshot.ok
        assert isinstance(snapshot.fault, UnknownOpcodeError)
        assert snapshot.fault.address == 0x0000
        assert cpu.end_cycle_calls == 0

        cpu.step()
        assert cpu.end_cycle_calls == 1

    def test_reset_restores_initial_state(self, cpu):
        cpu.step()
        cpu.step()
        assert cpu.cycle_count == 2

        cpu.reset()
        assert cpu.get_state().pc == 0
        assert cpu.cycle_count == 0

    def test_step_clears_stale_activity(self, cpu):
        cpu.bus.write(0x0010, 0x01)  # step前の残存ログ
        snapshot = cpu.step()
        assert all(a.address != 0x0010 for a in snapshot.bus_activity)
