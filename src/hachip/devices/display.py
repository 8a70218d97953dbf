# hachip/devices/display.py
"""
出力サーフェス（64x32 モノクロフレームバッファ）

CPUは `Display` インターフェースを介してのみ画面にアクセスします。
描画の実体（Qtウィジェットなど）はフレームバッファの内容を読み取って表示します。
"""
from abc import ABC, abstractmethod
from typing import List, Sequence

WIDTH = 64
HEIGHT = 32


# @intent:responsibility CPUが画面に対して要求する操作の契約を定義します。
class Display(ABC):
    @abstractmethod
    def clear(self) -> None:
        pass

    # @intent:responsibility スプライトをXOR描画し、点灯していたピクセルが消えた場合にTrueを返します。
    @abstractmethod
    def draw(self, x: int, y: int, sprite: Sequence[int]) -> bool:
        pass

    @abstractmethod
    def set_pixel(self, x: int, y: int, value: int) -> None:
        pass

    @abstractmethod
    def get_pixel(self, x: int, y: int) -> bool:
        pass


# @intent:responsibility メモリ上のピクセル配列としてDisplayを実装します。
class FrameBuffer(Display):
    """
    64x32ピクセルのフレームバッファ。
    描画座標は画面サイズで折り返されます。内容が変化するとdirtyフラグが立ちます。
    """
    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height)
        self.dirty = True

    def clear(self) -> None:
        self._pixels = bytearray(self.width * self.height)
        self.dirty = True

    # @intent:rationale 行の各バイトはbit7が左端の列に対応します。
    def draw(self, x: int, y: int, sprite: Sequence[int]) -> bool:
        collision = False
        for row, bits in enumerate(sprite):
            for col in range(8):
                if (bits >> (7 - col)) & 0x01 == 0:
                    continue
                px = (x + col) % self.width
                py = (y + row) % self.height
                old = self.get_pixel(px, py)
                if old:
                    collision = True
                self.set_pixel(px, py, 0 if old else 1)
        return collision

    def set_pixel(self, x: int, y: int, value: int) -> None:
        self._pixels[x + y * self.width] = 1 if value else 0
        self.dirty = True

    def get_pixel(self, x: int, y: int) -> bool:
        return self._pixels[x + y * self.width] == 1

    # @intent:responsibility レンダラ用に、各行を0/1のリストとして返します。
    def rows(self) -> List[List[int]]:
        return [
            list(self._pixels[y * self.width:(y + 1) * self.width])
            for y in range(self.height)
        ]

    def lit_count(self) -> int:
        return sum(self._pixels)
