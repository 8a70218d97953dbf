# hachip/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上の命令ワードをニーモニックに変換します。
Instruction Layerのデコードロジックを再利用し、バスアクセスログを汚さないようにpeekで読み込みます。
"""
from typing import List, Tuple

from hachip.transport.bus import Bus
from hachip.arch.chip8.instructions import decode_opcode


# @intent:responsibility 指定されたメモリ範囲を2バイト単位で逆アセンブルします。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        # メモリ境界チェック
        if not (bus.is_mapped(current_addr) and bus.is_mapped(current_addr + 1)):
            break

        opcode = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        operation = decode_opcode(opcode)
        result.append((current_addr, operation.opcode_hex, operation.text()))
        current_addr += operation.length

    return result
