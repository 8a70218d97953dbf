# hachip/loader/loader.py
"""
ROMローダーモジュール。
ヘッダを持たない生のバイナリイメージを読み込み、CPUのメモリ0x200以降に配置します。
"""
import logging
from pathlib import Path
from typing import Union

from hachip.arch.chip8.cpu import Chip8Cpu
from hachip.arch.chip8.state import MAX_PROGRAM_SIZE

logger = logging.getLogger(__name__)


class RomLoader:
    """
    CHIP-8のROMファイルを読み込んでCPUにロードするローダー。
    """
    # @intent:responsibility ファイルからイメージを読み込んで検証します。
    # @intent:post-condition 空のイメージ、または0xE00バイトを超えるイメージはValueErrorとします。
    def read_rom(self, file_path: Union[str, Path]) -> bytes:
        data = Path(file_path).read_bytes()
        logger.info("%s is %d bytes in size", file_path, len(data))
        if not data:
            raise ValueError(f"ROM image {file_path} is empty.")
        if len(data) > MAX_PROGRAM_SIZE:
            raise ValueError(
                f"ROM image {file_path} is {len(data)} bytes; the maximum is {MAX_PROGRAM_SIZE} bytes."
            )
        return data

    # @intent:responsibility CPUをリセットしてからイメージをロードします。
    # @intent:return ロードしたバイト数。
    def load_rom(self, file_path: Union[str, Path], cpu: Chip8Cpu) -> int:
        data = self.read_rom(file_path)
        cpu.reset()
        cpu.load(data)
        return len(data)
