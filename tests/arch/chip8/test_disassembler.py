# tests/arch/chip8/test_disassembler.py
"""
hachip.arch.chip8.disassemblerモジュールの単体テスト。
"""
from hachip.arch.chip8.disassembler import disassemble


class TestDisassembler:
    def test_disassemble_program(self, machine):
        machine.cpu.load(bytes([0x00, 0xE0, 0xA2, 0x2A, 0xD0, 0x15, 0x12, 0x00, 0x01, 0x23]))
        result = disassemble(machine.bus, 0x200, 10)
        assert result == [
            (0x200, "00E0", "CLS"),
            (0x202, "A22A", "LD I, $22A"),
            (0x204, "D015", "DRW V0, V1, 5"),
            (0x206, "1200", "JP $200"),
            (0x208, "0123", "UNKNOWN $0123"),
        ]

    # @intent:test_case_no_log 逆アセンブルがバスアクセスログに残らないことを検証します。
    def test_disassemble_does_not_log(self, machine):
        machine.bus.get_and_clear_activity_log()
        disassemble(machine.bus, 0x200, 4)
        assert machine.bus.get_and_clear_activity_log() == []

    def test_disassemble_stops_at_memory_end(self, machine):
        result = machine.cpu.disassemble(0xFFC, 8)
        assert [addr for addr, _, _ in result] == [0xFFC, 0xFFE]

    def test_operand_formats(self, machine):
        machine.cpu.load(bytes([0xF3, 0x33, 0x8A, 0xB4, 0xB1, 0x23, 0xF5, 0x0A]))
        texts = [text for _, _, text in machine.cpu.disassemble(0x200, 8)]
        assert texts == ["LD B, V3", "ADD VA, VB", "JP V0, $123", "LD V5, K"]
