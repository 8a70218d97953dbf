# hachip/core/errors.py
"""
エミュレーション中に発生するエラーの階層を定義します。

未定義オペコードは「回復可能な結果」としてSnapshotに格納されて返され、
それ以外（乱数源の失敗、スタック・メモリ範囲外アクセス、範囲外のキー番号）は例外として送出されます。
"""


# @intent:responsibility エミュレータ固有の全てのエラーの基底クラスです。
class EmulationError(Exception):
    pass


# @intent:responsibility 未定義の命令ワードを表します。どのワードがどのアドレスにあったかを保持します。
class UnknownOpcodeError(EmulationError):
    def __init__(self, opcode: int, address: int):
        super().__init__(f"Unknown opcode {opcode:04X} at {address:#05x}")
        self.opcode = opcode
        self.address = address


# @intent:responsibility Cxkk命令で使用する乱数源が利用できなかったことを表します。
class RandomSourceError(EmulationError):
    pass


# @intent:responsibility CALL/RETによるスタックのオーバーフロー・アンダーフローを表します。
class StackError(EmulationError):
    pass


# @intent:responsibility PC、I、命令のメモリウィンドウがメモリ範囲外を指したことを表します。
class MemoryAccessError(EmulationError):
    def __init__(self, address: int, length: int = 1):
        super().__init__(f"Memory access {address:#06x}+{length} out of bounds")
        self.address = address
        self.length = length


# @intent:responsibility Ex9E/ExA1のVxが0x0〜0xFの範囲外のキー番号を指したことを表します。
class KeyIndexError(EmulationError):
    def __init__(self, key: int, address: int):
        super().__init__(f"Key index {key:#04x} out of range at {address:#05x}")
        self.key = key
        self.address = address
