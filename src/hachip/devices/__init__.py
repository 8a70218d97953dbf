"""
CPUに接続される周辺装置（出力サーフェスとキー状態）のパッケージ。
"""
from hachip.devices.display import Display, FrameBuffer, WIDTH, HEIGHT
from hachip.devices.keypad import KeyState, Keypad, KEY_COUNT
