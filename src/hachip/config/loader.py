# hachip/config/loader.py
"""
YAML形式のシステム構成ファイルを読み込み、SystemConfigに変換します。
"""
import re
from typing import Any, Dict

import yaml

from hachip.devices.keypad import KEY_COUNT
from .models import SystemConfig, DisplayConfig, TimingConfig, FaultPolicy, DEFAULT_KEYMAP

_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return self.parse(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self.parse(yaml.safe_load(text) or {})

    # @intent:responsibility 辞書形式の構成を検証しながらSystemConfigに変換します。
    # @intent:post-condition 不正な値はValueErrorとします。
    def parse(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError("Config root must be a mapping.")

        display_data = data.get("display", {}) or {}
        display = DisplayConfig(
            scale=self._parse_int(display_data.get("scale", 10)),
            foreground=self._parse_color(display_data.get("foreground", "#FFFFFF")),
            background=self._parse_color(display_data.get("background", "#000000")),
        )
        if display.scale <= 0:
            raise ValueError(f"display.scale must be positive: {display.scale}")

        timing_data = data.get("timing", {}) or {}
        timing = TimingConfig(
            cycle_interval_ms=self._parse_int(timing_data.get("cycle_interval_ms", 8)),
        )
        if timing.cycle_interval_ms < 0:
            raise ValueError(f"timing.cycle_interval_ms must not be negative: {timing.cycle_interval_ms}")

        policy_value = str(data.get("fault_policy", FaultPolicy.HALT.value)).lower()
        try:
            fault_policy = FaultPolicy(policy_value)
        except ValueError:
            raise ValueError(f"Unknown fault_policy: {policy_value}") from None

        keymap = dict(DEFAULT_KEYMAP)
        if "keymap" in data:
            keymap = self._parse_keymap(data["keymap"])

        rom = data.get("rom")
        if rom is not None and not isinstance(rom, str):
            raise ValueError(f"rom must be a file path string: {rom!r}")

        return SystemConfig(
            rom=rom,
            display=display,
            timing=timing,
            fault_policy=fault_policy,
            keymap=keymap,
        )

    def _parse_keymap(self, value: Any) -> Dict[str, int]:
        if not isinstance(value, dict):
            raise ValueError("keymap must be a mapping of key name to key index.")
        keymap = {}
        for name, index in value.items():
            index = self._parse_int(index)
            if not 0 <= index < KEY_COUNT:
                raise ValueError(f"keymap entry {name!r} -> {index} is out of range 0..{KEY_COUNT - 1}.")
            keymap[str(name).upper()] = index
        return keymap

    def _parse_color(self, value: Any) -> str:
        if not isinstance(value, str) or not _COLOR_PATTERN.match(value):
            raise ValueError(f"Invalid color (expected #RRGGBB): {value}")
        return value.upper()

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
