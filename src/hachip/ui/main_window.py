# hachip/ui/main_window.py
"""
メインウィンドウの実装。
画面、レジスタ表示、実行制御ツールバーを保持し、一定間隔で1サイクルずつCPUを駆動します。
"""
import logging
from typing import Dict, Set

from PySide6.QtWidgets import QMainWindow, QDockWidget, QToolBar
from PySide6.QtGui import QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from hachip.config.builder import System
from hachip.config.models import SystemConfig
from hachip.core.errors import EmulationError
from hachip.debugger.debugger import Debugger, StopReason
from hachip.loader.loader import RomLoader
from .screen_view import ScreenView
from .register_view import RegisterView

logger = logging.getLogger(__name__)


# @intent:utility_function Qtのキー値（列挙型または整数）を整数コードに正規化します。
def _key_code(key) -> int:
    return key.value if hasattr(key, "value") else int(key)


# @intent:utility_function Qt.Keyのメンバー名（"Key_Space"など）を小文字化した名前で引ける索引を作ります。
def _qt_key_index() -> Dict[str, Qt.Key]:
    return {name.lower(): member for name, member in Qt.Key.__members__.items()}


# @intent:responsibility 設定のキー名（"1", "Q", "Space"など）をQtのキーコードに変換した対応表を作ります。
# @intent:pre-condition キー名の大文字・小文字は区別しません（"SPACE"も"Key_Space"に対応します）。
def build_qt_keymap(keymap: Dict[str, int]) -> Dict[int, int]:
    qt_keys = _qt_key_index()
    qt_keymap = {}
    for name, index in keymap.items():
        qt_key = qt_keys.get(f"key_{name}".lower())
        if qt_key is None:
            logger.warning("Unknown host key name in keymap: %s", name)
            continue
        qt_keymap[_key_code(qt_key)] = index
    return qt_keymap


# @intent:responsibility アプリケーションのメインウィンドウを定義し、実行ループを管理します。
class MainWindow(QMainWindow):
    def __init__(self, system: System, config: SystemConfig, parent=None):
        super().__init__(parent)
        self.setWindowTitle("hachip")

        self._system = system
        self._config = config
        self._qt_keymap = build_qt_keymap(config.keymap)
        self._held_keys: Set[int] = set()
        self.debugger = Debugger(system.cpu, fault_policy=config.fault_policy)

        self.screen_view = ScreenView(
            system.display,
            scale=config.display.scale,
            foreground=config.display.foreground,
            background=config.display.background,
        )
        self.setCentralWidget(self.screen_view)

        self._create_status_inspector()
        self._create_toolbar()

        self.timer = QTimer(self)
        self.timer.setInterval(config.timing.cycle_interval_ms)
        self.timer.timeout.connect(self._tick)

        self._update_ui_state(False)
        self.statusBar().showMessage("Ready")

    def _create_status_inspector(self):
        status_dock = QDockWidget("Registers", self)
        status_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self.register_view = RegisterView()
        self.register_view.set_cpu(self._system.cpu)
        status_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, status_dock)

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        toolbar.setFocusPolicy(Qt.NoFocus)
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.pause_action = QAction("Pause", self)
        self.pause_action.triggered.connect(self.pause)
        toolbar.addAction(self.pause_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self.step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self.reset)
        toolbar.addAction(self.reset_action)

    def _update_ui_state(self, is_running: bool):
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.pause_action.setEnabled(is_running)

    @Slot()
    def start(self):
        self._update_ui_state(True)
        self.statusBar().showMessage("Running")
        self.setFocus()
        self.timer.start()

    @Slot()
    def pause(self):
        self.timer.stop()
        self._update_ui_state(False)
        self.statusBar().showMessage("Paused")

    @Slot()
    def step(self):
        self._run_cycles(1)
        self._refresh_views()

    # @intent:responsibility CPUをリセットし、ロード済みのROMを再ロードします。
    @Slot()
    def reset(self):
        self.pause()
        rom = self._config.rom
        if rom:
            try:
                RomLoader().load_rom(rom, self._system.cpu)
            except (OSError, ValueError) as e:
                logger.error("Reset failed: %s", e)
                self.statusBar().showMessage(f"Reset failed: {e}")
                return
        else:
            self._system.cpu.reset()
        self._refresh_views()
        self.statusBar().showMessage("Reset")

    # @intent:responsibility タイマーの1ティック: キー状態を更新してから1サイクル実行します。
    @Slot()
    def _tick(self):
        self._run_cycles(1)
        self._refresh_views()

    def _run_cycles(self, count: int) -> None:
        self._system.keypad.set_pressed(self.pressed_keys())
        try:
            reason = self.debugger.run(max_steps=count)
        except EmulationError as e:
            logger.error("Emulation stopped: %s", e)
            self._halt(f"Error: {e}")
            return

        if reason == StopReason.FAULT:
            self._halt(f"Halted: {self.debugger.get_last_fault()}")
        elif reason == StopReason.BREAKPOINT:
            self._halt(f"Breakpoint at {self._system.cpu.get_state().pc:#05x}")

    def _halt(self, message: str) -> None:
        self.timer.stop()
        self._update_ui_state(False)
        self.statusBar().showMessage(message)

    def _refresh_views(self):
        self.screen_view.refresh()
        self.register_view.update_registers()

    # @intent:responsibility 現在押されているホストキーを論理キー番号の集合に変換します。
    def pressed_keys(self) -> Set[int]:
        return {self._qt_keymap[k] for k in self._held_keys if k in self._qt_keymap}

    def keyPressEvent(self, event: QKeyEvent):
        if event.isAutoRepeat():
            return
        self._held_keys.add(_key_code(event.key()))

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat():
            return
        self._held_keys.discard(_key_code(event.key()))

    def closeEvent(self, event: QCloseEvent):
        self.timer.stop()
        self.debugger.stop()
        event.accept()
