# hachip/devices/keypad.py
"""
16キーの論理キーパッドの押下状態を保持します。
ホストのキーボードから論理キーへの対応付けは設定（keymap）側の責務です。
"""
from abc import ABC, abstractmethod
from typing import Iterable, Tuple

KEY_COUNT = 16


# @intent:responsibility CPUが参照するキー状態の契約を定義します。
class KeyState(ABC):
    # @intent:responsibility 押下中のキー集合を丸ごと置き換えます。
    @abstractmethod
    def set_pressed(self, indices: Iterable[int]) -> None:
        pass

    @abstractmethod
    def is_down(self, index: int) -> bool:
        pass


class Keypad(KeyState):
    def __init__(self):
        self._keys = [False] * KEY_COUNT

    # @intent:pre-condition 各インデックスは0..15である必要があります。範囲外は状態を変更せずIndexErrorを送出します。
    def set_pressed(self, indices: Iterable[int]) -> None:
        indices = list(indices)
        for index in indices:
            self._check_index(index)
        self._keys = [False] * KEY_COUNT
        for index in indices:
            self._keys[index] = True

    def is_down(self, index: int) -> bool:
        self._check_index(index)
        return self._keys[index]

    def pressed(self) -> Tuple[int, ...]:
        return tuple(i for i, down in enumerate(self._keys) if down)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < KEY_COUNT:
            raise IndexError(f"Key index {index} out of range 0..{KEY_COUNT - 1}.")
