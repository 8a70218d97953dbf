# tests/config/test_config.py
"""
hachip.configパッケージ（構成の読み込みとシステム構築）の単体テスト。
"""
import pytest

from hachip.config.loader import ConfigLoader
from hachip.config.builder import SystemBuilder
from hachip.config.models import SystemConfig, FaultPolicy, DEFAULT_KEYMAP
from hachip.arch.chip8.cpu import Chip8Cpu

# @intent:test_suite YAML構成の解析・検証と、構成からのシステム構築を検証します。

class TestConfigLoader:
    def test_defaults_from_empty_document(self):
        config = ConfigLoader().load_from_string("")
        assert config.rom is None
        assert config.display.scale == 10
        assert config.display.foreground == "#FFFFFF"
        assert config.timing.cycle_interval_ms == 8
        assert config.fault_policy == FaultPolicy.HALT
        assert config.keymap == DEFAULT_KEYMAP

    def test_full_document(self):
        config = ConfigLoader().load_from_string("""
rom: games/pong.ch8
display:
  scale: 0x0C
  foreground: "#33ff66"
  background: "#101010"
timing:
  cycle_interval_ms: 2
fault_policy: Continue
keymap:
  x: 0
  up: 5
""")
        assert config.rom == "games/pong.ch8"
        assert config.display.scale == 12
        assert config.display.foreground == "#33FF66"
        assert config.timing.cycle_interval_ms == 2
        assert config.fault_policy == FaultPolicy.CONTINUE
        assert config.keymap == {"X": 0, "UP": 5}

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "hachip.yaml"
        path.write_text("display:\n  scale: 4\n", encoding="utf-8")
        assert ConfigLoader().load_from_file(str(path)).display.scale == 4

    # @intent:test_case_invalid 不正な値はValueErrorとして報告されることを検証します。
    @pytest.mark.parametrize("text", [
        "display:\n  scale: 0\n",
        "display:\n  scale: true\n",
        "display:\n  foreground: white\n",
        "timing:\n  cycle_interval_ms: -1\n",
        "fault_policy: explode\n",
        "keymap:\n  Q: 16\n",
        "keymap: [1, 2]\n",
        "rom: 123\n",
        "rom:\n  - a.ch8\n",
        "- just\n- a list\n",
    ])
    def test_invalid_documents(self, text):
        with pytest.raises(ValueError):
            ConfigLoader().load_from_string(text)

    def test_default_keymap_is_not_shared(self):
        config = SystemConfig()
        config.keymap["Q"] = 0
        assert DEFAULT_KEYMAP["Q"] == 0x4


class TestSystemBuilder:
    def test_build_without_rom(self):
        system = SystemBuilder().build_system(SystemConfig())
        assert isinstance(system.cpu, Chip8Cpu)
        assert system.cpu.bus is system.bus
        assert system.cpu.display is system.display
        assert system.cpu.keypad is system.keypad
        # フォントが配置済み
        assert system.bus.peek(0x000) == 0xF0
        assert system.bus.is_mapped(0xFFF)
        assert not system.bus.is_mapped(0x1000)

    def test_build_with_rom_and_random_source(self, tmp_path):
        rom = tmp_path / "rnd.ch8"
        rom.write_bytes(bytes([0xC0, 0xFF]))
        system = SystemBuilder().build_system(SystemConfig(rom=str(rom)), random_source=lambda: 0x3C)
        system.cpu.run_cycle()
        assert system.cpu.get_state().v[0] == 0x3C
