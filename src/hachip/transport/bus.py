# hachip/transport/bus.py
"""
メモリバス

CHIP-8の4KBアドレス空間をデバイスに振り分け、CPUからの読み書きを記録します。
記録はサイクルごとにSnapshotへ引き渡され、デバッガのメモリブレークポイントが参照します。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Tuple


class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility 1回の読み書き（アドレス、バイト値、種別）を記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType


# @intent:responsibility バスに接続できる記憶装置の契約です。アドレスはデバイス先頭からのオフセットです。
class Device(ABC):
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

    # @intent:responsibility 電源投入時の内容に戻します。既定では何もしません。
    def clear(self) -> None:
        pass


# @intent:responsibility ゼロ初期化されたバイト配列によるRAMです。
class RAM(Device):
    # @intent:pre-condition sizeは正の整数です。それ以外はValueErrorとします。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"RAM size must be a positive integer, got {size!r}.")
        self._size = size
        self._cells = bytearray(size)

    def _check_offset(self, offset: int) -> None:
        if offset < 0 or offset >= self._size:
            raise IndexError(f"Offset {offset:#x} is outside RAM of {self._size} bytes.")

    def read(self, address: int) -> int:
        self._check_offset(address)
        return self._cells[address]

    def write(self, address: int, data: int) -> None:
        self._check_offset(address)
        if data < 0 or data > 0xFF:
            raise ValueError(f"RAM cells hold one byte; {data} does not fit.")
        self._cells[address] = data

    def clear(self) -> None:
        self._cells = bytearray(self._size)

    def get_size(self) -> int:
        return self._size


class _Mapping(NamedTuple):
    start: int
    end: int
    device: Device


# @intent:responsibility アドレスをデバイスとオフセットに解決し、CPUからのアクセスを記録する共通バスです。
class Bus:
    """
    read/writeは記録され、peek/loadは記録されません。
    peekは逆アセンブラやUIの表示、loadはフォントとROMイメージの配置に使います。
    """
    def __init__(self):
        self._mappings: List[_Mapping] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility デバイスを [start_address, end_address] に接続します。
    # @intent:pre-condition 範囲は非負かつ昇順です。RAMは範囲と同じ大きさである必要があります。
    #                      範囲の重複は検査しません（SystemBuilderが重ならないように構成します）。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if start_address < 0 or end_address < start_address:
            raise ValueError(f"Bad address range {start_address:#x}-{end_address:#x}.")
        if not isinstance(device, Device):
            raise TypeError(f"{type(device).__name__} is not a Device.")
        span = end_address - start_address + 1
        if isinstance(device, RAM) and device.get_size() != span:
            raise ValueError(
                f"RAM of {device.get_size()} bytes cannot cover {span} bytes "
                f"at {start_address:#x}-{end_address:#x}."
            )
        self._mappings.append(_Mapping(start_address, end_address, device))

    # @intent:post-condition どのデバイスにも属さないアドレスはIndexErrorとします。
    def _resolve(self, address: int) -> Tuple[Device, int]:
        for mapping in self._mappings:
            if mapping.start <= address <= mapping.end:
                return mapping.device, address - mapping.start
        raise IndexError(f"Address {address:#06x} is not mapped.")

    def is_mapped(self, address: int) -> bool:
        return any(m.start <= address <= m.end for m in self._mappings)

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def write(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    def peek(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    def load(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)

    # @intent:responsibility これまでのアクセス記録を返し、記録を空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity

    # @intent:responsibility 全デバイスの内容とアクセス記録を消去します。
    def clear(self) -> None:
        for mapping in self._mappings:
            mapping.device.clear()
        self._activity = []
