# hachip/core/cpu.py
"""
命令サイクルの骨格

AbstractCpuは1サイクル（フェッチ、デコード、実行、サイクル終了処理）の順序だけを決め、
命令セット固有の処理はサブクラスとその命令テーブルに任せます。
"""
import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from hachip.transport.bus import Bus
from hachip.core.errors import EmulationError
from hachip.core.snapshot import Snapshot, Operation, Metadata
from hachip.core.state import CpuState
from hachip.common.types import RegisterLayoutInfo

logger = logging.getLogger(__name__)


# @intent:responsibility サイクルの実行順序と、UI・デバッガ向けの参照用インターフェースを定めます。
class AbstractCpu(ABC):
    # @intent:pre-condition サブクラスは_create_initial_stateを呼べる状態でsuper().__init__を呼びます。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._cycle_count = 0
        self._state: CpuState = self._create_initial_state()

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility レジスタとサイクル数を初期値に戻します。メモリと周辺装置はサブクラスが扱います。
    def reset(self) -> None:
        self._cycle_count = 0
        self._state = self._create_initial_state()

    def get_state(self) -> CpuState:
        return self._state

    @property
    def bus(self) -> Bus:
        return self._bus

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility PCの位置にある命令ワードを返します。PCは動かしません。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:return 未定義オペコードのような続行可能な障害はエラーオブジェクトとして返し、無ければNone。
    @abstractmethod
    def _execute(self, operation: Operation) -> Optional[EmulationError]:
        pass

    # @intent:responsibility 障害なく実行できたサイクルの最後にだけ呼ばれます。
    def _end_cycle(self) -> None:
        pass

    # @intent:responsibility 1サイクルを実行し、実行後の状態とバスアクセスを収めたSnapshotを返します。
    # @intent:rationale Template Methodパターン: ログ破棄→フェッチ→デコード→実行→終了処理→Snapshot生成。
    def step(self) -> Snapshot:
        """
        障害が返されたサイクルでは_end_cycleを呼ばず、障害をSnapshot.faultに入れて返します。
        例外として送出されたエラー（スタック、メモリ範囲、乱数源）はそのまま呼び出し側へ伝わります。
        """
        self._bus.get_and_clear_activity_log()  # step外で記録されたアクセスは捨てる
        pc_at_fetch = self._state.pc

        operation = self._decode(self._fetch())
        fault = self._execute(operation)

        if fault is None:
            self._end_cycle()
        else:
            logger.warning("%s", fault)
        return self._snapshot(pc_at_fetch, operation, fault)

    def _snapshot(self, pc_at_fetch: int, operation: Operation,
                  fault: Optional[EmulationError]) -> Snapshot:
        self._cycle_count += operation.cycle_count
        return Snapshot(
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(
                cycle_count=self._cycle_count,
                disassembly=f"{pc_at_fetch:#05x}: {operation.text()}",
            ),
            bus_activity=self._bus.get_and_clear_activity_log(),
            fault=fault,
        )

    # @intent:responsibility レジスタ名から現在値への辞書。表示側はこれだけを見てレジスタを描きます。
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    # @intent:responsibility レジスタのグループ分けとビット幅。RegisterViewのレイアウトに使います。
    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    # @intent:return (アドレス, 命令ワードのHEX, ニーモニック) のリスト。
    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        pass
