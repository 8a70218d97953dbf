# hachip/ui/app.py
"""
アプリケーションのエントリポイント。
コマンドライン引数と構成ファイルを解釈し、システムを組み立ててメインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from hachip.config.loader import ConfigLoader
from hachip.config.models import SystemConfig, FaultPolicy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hachip", description="CHIP-8 emulator")
    parser.add_argument("rom", nargs="?", help="ROM image to load at 0x200")
    parser.add_argument("--config", help="YAML system config file")
    parser.add_argument("--scale", type=int, help="pixel scale factor (default 10)")
    parser.add_argument("--interval", type=int, help="milliseconds between cycles (default 8)")
    parser.add_argument("--continue-on-fault", action="store_true",
                        help="keep running after an unknown opcode instead of halting")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


# @intent:responsibility 構成ファイルを読み込み、コマンドライン引数の値で上書きします。
def resolve_config(args: argparse.Namespace) -> SystemConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.rom:
        config.rom = args.rom
    if args.scale is not None:
        if args.scale <= 0:
            raise ValueError(f"--scale must be positive: {args.scale}")
        config.display.scale = args.scale
    if args.interval is not None:
        if args.interval < 0:
            raise ValueError(f"--interval must not be negative: {args.interval}")
        config.timing.cycle_interval_ms = args.interval
    if args.continue_on_fault:
        config.fault_policy = FaultPolicy.CONTINUE
    return config


# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        parser.error(str(e))
    if not config.rom:
        parser.error("no ROM specified (pass a ROM path or set 'rom' in the config)")

    from PySide6.QtWidgets import QApplication
    from hachip.config.builder import SystemBuilder
    from .main_window import MainWindow

    try:
        system = SystemBuilder().build_system(config)
    except (OSError, ValueError) as e:
        parser.error(f"Problem initiating cpu: {e}")

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(system, config)
    main_win.show()
    main_win.start()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
