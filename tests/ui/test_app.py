# tests/ui/test_app.py
"""
コマンドライン引数の解釈と構成の上書きを検証するテスト。
"""
import pytest

from hachip.config.models import FaultPolicy
from hachip.ui.app import build_parser, resolve_config


class TestCommandLine:
    def test_defaults(self):
        config = resolve_config(build_parser().parse_args(["pong.ch8"]))
        assert config.rom == "pong.ch8"
        assert config.display.scale == 10
        assert config.fault_policy == FaultPolicy.HALT

    # @intent:test_case_override コマンドライン引数が構成ファイルの値より優先されることを検証します。
    def test_options_override_config_file(self, tmp_path):
        path = tmp_path / "hachip.yaml"
        path.write_text("rom: a.ch8\ndisplay:\n  scale: 3\ntiming:\n  cycle_interval_ms: 5\n", encoding="utf-8")
        args = build_parser().parse_args(
            ["b.ch8", "--config", str(path), "--scale", "6", "--continue-on-fault"]
        )
        config = resolve_config(args)
        assert config.rom == "b.ch8"
        assert config.display.scale == 6
        assert config.timing.cycle_interval_ms == 5
        assert config.fault_policy == FaultPolicy.CONTINUE

    def test_rom_from_config_file(self, tmp_path):
        path = tmp_path / "hachip.yaml"
        path.write_text("rom: a.ch8\n", encoding="utf-8")
        config = resolve_config(build_parser().parse_args(["--config", str(path)]))
        assert config.rom == "a.ch8"

    def test_invalid_scale(self):
        with pytest.raises(ValueError):
            resolve_config(build_parser().parse_args(["x.ch8", "--scale", "0"]))

    def test_missing_rom_exits(self):
        from hachip.ui.app import main
        with pytest.raises(SystemExit):
            main([])
