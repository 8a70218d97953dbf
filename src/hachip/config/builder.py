# hachip/config/builder.py
"""
システム構成に基づいて、Bus、メモリ、周辺装置、CPUを生成・接続します。
"""
from typing import Callable, NamedTuple, Optional

from hachip.transport.bus import Bus, RAM
from hachip.devices.display import FrameBuffer
from hachip.devices.keypad import Keypad
from hachip.arch.chip8.cpu import Chip8Cpu
from hachip.arch.chip8.state import MEMORY_SIZE
from hachip.loader.loader import RomLoader
from .models import SystemConfig


class System(NamedTuple):
    cpu: Chip8Cpu
    bus: Bus
    display: FrameBuffer
    keypad: Keypad


# @intent:responsibility 4KBのRAM、フレームバッファ、キーパッドを持つCHIP-8システムを組み立てます。
class SystemBuilder:
    def build_system(self, config: SystemConfig,
                     random_source: Optional[Callable[[], int]] = None) -> System:
        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))
        display = FrameBuffer()
        keypad = Keypad()
        cpu = Chip8Cpu(bus, display, keypad, random_source=random_source)
        cpu.reset()

        if config.rom:
            RomLoader().load_rom(config.rom, cpu)

        return System(cpu=cpu, bus=bus, display=display, keypad=keypad)
