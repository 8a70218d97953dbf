# hachip/debugger/debugger.py
"""
実行制御

CPUを1サイクルずつ進め、ブレークポイントと障害方針（FaultPolicy）に従って停止させます。
UIのタイマーもこのクラスを通じてCPUを駆動します。
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from hachip.core.cpu import AbstractCpu
from hachip.core.errors import EmulationError
from hachip.core.snapshot import Snapshot
from hachip.transport.bus import BusAccessType
from hachip.config.models import FaultPolicy

logger = logging.getLogger(__name__)


class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # 次に実行する命令のアドレスがvalue
    MEMORY_READ = "MEMORY_READ"         # 直前のサイクルがaddressを読んだ
    MEMORY_WRITE = "MEMORY_WRITE"       # 直前のサイクルがaddressに書いた
    REGISTER_VALUE = "REGISTER_VALUE"   # register_nameの値がvalue
    REGISTER_CHANGE = "REGISTER_CHANGE" # register_nameの値が直前のサイクルで変わった


class StopReason(Enum):
    BREAKPOINT = "BREAKPOINT"
    FAULT = "FAULT"
    STOPPED = "STOPPED"
    STEP_LIMIT = "STEP_LIMIT"


# @intent:responsibility 1つの停止条件。レジスタ名はget_register_map()のキー（"V3", "I"など）です。
@dataclass(frozen=True)
class BreakpointCondition:
    condition_type: BreakpointConditionType
    value: Optional[int] = None
    address: Optional[int] = None
    register_name: Optional[str] = None
    enabled: bool = True


_MEMORY_CONDITIONS = {
    BreakpointConditionType.MEMORY_READ: BusAccessType.READ,
    BreakpointConditionType.MEMORY_WRITE: BusAccessType.WRITE,
}


# @intent:responsibility ブレークポイントの管理と、停止条件付きのサイクル実行を行います。
class Debugger:
    def __init__(self, cpu: AbstractCpu, fault_policy: FaultPolicy = FaultPolicy.HALT):
        self._cpu = cpu
        self._fault_policy = fault_policy
        self._conditions: List[BreakpointCondition] = []
        self._running = False
        self._registers_before: Dict[str, int] = cpu.get_register_map()
        self._last_snapshot: Optional[Snapshot] = None
        self._last_fault: Optional[EmulationError] = None
        # PC_MATCHで止まった直後の再開では、そのアドレスの命令を1度だけ実行させる
        self._resume_from_break = False

    @property
    def fault_policy(self) -> FaultPolicy:
        return self._fault_policy

    @fault_policy.setter
    def fault_policy(self, policy: FaultPolicy) -> None:
        self._fault_policy = policy

    # --- ブレークポイント管理（同じ条件は1つだけ保持） ---

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._conditions:
            return
        self._conditions.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        for n, condition in enumerate(self._conditions):
            if condition == old_condition:
                self._conditions[n] = new_condition
                return

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        self._conditions = [c for c in self._conditions if c != condition]

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._conditions)

    # --- 状態参照 ---

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def get_last_fault(self) -> Optional[EmulationError]:
        return self._last_fault

    def is_running(self) -> bool:
        return self._running

    def _pc_breakpoint_hit(self, pc: int) -> bool:
        return any(
            c.enabled and c.condition_type == BreakpointConditionType.PC_MATCH and c.value == pc
            for c in self._conditions
        )

    def _condition_met(self, condition: BreakpointCondition, snapshot: Snapshot,
                       registers: Dict[str, int]) -> bool:
        kind = condition.condition_type
        if kind in _MEMORY_CONDITIONS:
            accesses = snapshot.accesses(_MEMORY_CONDITIONS[kind])
            return any(a.address == condition.address for a in accesses)
        name = condition.register_name
        if kind == BreakpointConditionType.REGISTER_VALUE:
            return name in registers and registers[name] == condition.value
        if kind == BreakpointConditionType.REGISTER_CHANGE:
            if name not in registers or name not in self._registers_before:
                return False
            return registers[name] != self._registers_before[name]
        return False

    # @intent:responsibility 直前のサイクルの結果に対して、PC_MATCH以外の条件を評価します。
    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        registers = self._cpu.get_register_map()
        return any(
            c.enabled and self._condition_met(c, snapshot, registers)
            for c in self._conditions
        )

    # @intent:responsibility 1サイクル実行します。障害が返された場合はFaultPolicyに従って記録・停止します。
    def step_instruction(self) -> Snapshot:
        self._registers_before = self._cpu.get_register_map()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot

        if snapshot.fault is not None:
            self._last_fault = snapshot.fault
            if self._fault_policy == FaultPolicy.HALT:
                self._running = False
                logger.error("Halted: %s", snapshot.fault)
            else:
                logger.info("Continuing after fault: %s", snapshot.fault)
        return snapshot

    # @intent:responsibility 停止条件が成立するまでサイクルを繰り返し、停止理由を返します。
    # @intent:pre-condition max_stepsがNoneなら、stop()・ブレークポイント・HALT方針の障害のいずれかまで実行します。
    # @intent:post-condition 例外で抜けた場合も実行中フラグは下ろされます。
    def run(self, max_steps: Optional[int] = None) -> StopReason:
        self._running = True
        try:
            return self._run_loop(max_steps)
        finally:
            self._running = False

    def _run_loop(self, max_steps: Optional[int]) -> StopReason:
        executed = 0
        check_pc = not self._resume_from_break
        self._resume_from_break = False

        while self._running:
            pc = self._cpu.get_state().pc
            if check_pc and self._pc_breakpoint_hit(pc):
                self._resume_from_break = True
                logger.info("Breakpoint hit at PC: %#05x", pc)
                return StopReason.BREAKPOINT
            check_pc = True

            if max_steps is not None and executed >= max_steps:
                return StopReason.STEP_LIMIT

            snapshot = self.step_instruction()
            executed += 1

            if snapshot.fault is not None and self._fault_policy == FaultPolicy.HALT:
                return StopReason.FAULT

            if self._check_other_breakpoints(snapshot):
                logger.info("Breakpoint hit at PC: %#05x", snapshot.state.pc)
                return StopReason.BREAKPOINT

        return StopReason.STOPPED

    def stop(self) -> None:
        self._running = False
