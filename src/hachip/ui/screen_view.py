# hachip/ui/screen_view.py
"""
フレームバッファの内容を拡大表示するウィジェット。
"""
from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtGui import QPainter, QColor
from PySide6.QtCore import QSize

from hachip.devices.display import FrameBuffer


# @intent:responsibility FrameBufferの点灯ピクセルをscale倍の矩形として描画します。
class ScreenView(QWidget):
    def __init__(self, framebuffer: FrameBuffer, scale: int = 10,
                 foreground: str = "#FFFFFF", background: str = "#000000", parent=None):
        super().__init__(parent)
        self._framebuffer = framebuffer
        self._scale = scale
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        self.setFixedSize(self.sizeHint())

    def sizeHint(self) -> QSize:
        return QSize(self._framebuffer.width * self._scale, self._framebuffer.height * self._scale)

    # @intent:responsibility フレームバッファが変化していれば再描画を要求します。
    # @intent:return 再描画を要求した場合True。
    def refresh(self) -> bool:
        if not self._framebuffer.dirty:
            return False
        self._framebuffer.dirty = False
        self.update()
        return True

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        scale = self._scale
        for y, row in enumerate(self._framebuffer.rows()):
            for x, lit in enumerate(row):
                if lit:
                    painter.fillRect(x * scale, y * scale, scale, scale, self._foreground)
        painter.end()
