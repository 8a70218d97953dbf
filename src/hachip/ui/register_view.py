# hachip/ui/register_view.py
"""
レジスタ表示ドック。
CPUが返すレイアウト情報（グループとビット幅）から行を組み立て、値を16進で表示します。
"""
from typing import Dict, Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout, QFormLayout, QLabel, QGroupBox
from PySide6.QtGui import QFontDatabase
from PySide6.QtCore import Qt

from hachip.common.types import RegisterLayoutInfo
from hachip.core.cpu import AbstractCpu

_GROUP_STYLE = """
QGroupBox {
    font-weight: bold;
    border: 1px solid #222;
    border-radius: 4px;
    margin-top: 20px;
    color: #EEE;
}
QGroupBox::title {
    subcontrol-origin: margin;
    left: 10px;
    padding: 0 5px;
    color: #00AAAA;
}
"""


# @intent:responsibility CPUの種類に依存せず、get_register_layout()の内容どおりにレジスタを並べます。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")
        self._column = QVBoxLayout(self)
        self._column.setContentsMargins(5, 5, 5, 5)
        self._mono = QFontDatabase.systemFont(QFontDatabase.FixedFont).family()
        self._values: Dict[str, QLabel] = {}
        self._digits: Dict[str, int] = {}
        self._cpu: Optional[AbstractCpu] = None

    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._rebuild()
        self.update_registers()

    def _rebuild(self) -> None:
        while self._column.count():
            widget = self._column.takeAt(0).widget()
            if widget is not None:
                widget.deleteLater()
        self._values.clear()
        self._digits.clear()

        for group in self._cpu.get_register_layout():
            self._column.addWidget(self._group_box(group))
        self._column.addStretch()

    def _group_box(self, group: RegisterLayoutInfo) -> QGroupBox:
        box = QGroupBox(group.group_name)
        box.setStyleSheet(_GROUP_STYLE)
        form = QFormLayout(box)
        form.setLabelAlignment(Qt.AlignLeft)
        form.setContentsMargins(10, 15, 10, 10)
        form.setSpacing(3)

        for reg in group.registers:
            digits = (reg.width + 3) // 4  # 8bit -> 2桁, 16bit -> 4桁
            value = QLabel("0x" + "0" * digits)
            value.setAlignment(Qt.AlignRight)
            value.setStyleSheet(f"font-family: '{self._mono}', monospace; color: #FFD700;")
            form.addRow(QLabel(f"{reg.name}:"), value)
            self._values[reg.name] = value
            self._digits[reg.name] = digits
        return box

    # @intent:responsibility 現在のレジスタ値をラベルに反映します。
    def update_registers(self) -> None:
        if self._cpu is None:
            return
        for name, value in self._cpu.get_register_map().items():
            label = self._values.get(name)
            if label is not None:
                label.setText(f"0x{value:0{self._digits[name]}X}")

    def register_text(self, name: str) -> str:
        return self._values[name].text()
