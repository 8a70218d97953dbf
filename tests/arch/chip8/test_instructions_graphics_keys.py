# tests/arch/chip8/test_instructions_graphics_keys.py
"""
画面命令とキー入力命令のテスト。
"""
import pytest
from unittest.mock import MagicMock

from hachip.core.errors import MemoryAccessError, KeyIndexError
from hachip.transport.bus import Bus, RAM
from hachip.devices.display import Display
from hachip.devices.keypad import KeyState
from hachip.arch.chip8.cpu import Chip8Cpu
from hachip.arch.chip8.state import VF

# @intent:test_suite CLS, DRW, SKP/SKNP, Fx0Aの振る舞いを検証します。

class TestGraphics:
    def test_cls(self, machine, run):
        machine.display.set_pixel(1, 1, 1)
        run(0x00E0)
        assert machine.display.lit_count() == 0
        assert machine.cpu.get_state().pc == 0x202

    # @intent:test_case_collision_sequence 同じ原点への3回の描画で衝突結果がfalse, false, trueとなることを検証します。
    def test_drw_collision_sequence(self, machine):
        cpu, bus = machine.cpu, machine.bus
        bus.load(0x300, 0b00110000)
        bus.load(0x301, 0b00000011)
        bus.load(0x302, 0b00000001)
        # I=0x300; DRW; I=0x301; DRW; I=0x302; DRW
        cpu.load(bytes([0xA3, 0x00, 0xD0, 0x11, 0xA3, 0x01, 0xD0, 0x11, 0xA3, 0x02, 0xD0, 0x11]))
        state = cpu.get_state()

        results = []
        for _ in range(3):
            cpu.step()
            cpu.step()
            results.append(state.v[VF])
        assert results == [0, 0, 1]

    def test_drw_uses_register_coordinates(self, machine, run):
        state = machine.cpu.get_state()
        state.v[2], state.v[3] = 60, 30
        state.i = 0x000  # フォントの"0"
        run(0xD235)
        assert machine.display.get_pixel(60, 30)
        assert machine.display.get_pixel(63, 30)
        assert machine.display.get_pixel(60, 0)  # 縦方向の折り返し
        assert state.v[VF] == 0

    def test_drw_window_out_of_range(self, machine, run):
        machine.cpu.get_state().i = 0xFFE
        with pytest.raises(MemoryAccessError):
            run(0xD005)
        assert machine.display.lit_count() == 0


class TestKeys:
    @pytest.mark.parametrize("pressed, expected_pc", [({0x7}, 0x204), (set(), 0x202), ({0x6}, 0x202)])
    def test_skp(self, machine, run, pressed, expected_pc):
        machine.keypad.set_pressed(pressed)
        machine.cpu.get_state().v[1] = 0x7
        run(0xE19E)
        assert machine.cpu.get_state().pc == expected_pc

    @pytest.mark.parametrize("pressed, expected_pc", [({0x7}, 0x202), (set(), 0x204)])
    def test_sknp(self, machine, run, pressed, expected_pc):
        machine.keypad.set_pressed(pressed)
        machine.cpu.get_state().v[1] = 0x7
        run(0xE1A1)
        assert machine.cpu.get_state().pc == expected_pc

    # @intent:test_case_key_index_range Vxが0xFを超えるとKeyIndexErrorとなり、PCが動かないことを検証します。
    @pytest.mark.parametrize("opcode", [0xE19E, 0xE1A1])
    def test_key_index_out_of_range(self, machine, run, opcode):
        machine.cpu.get_state().v[1] = 0x20
        with pytest.raises(KeyIndexError) as excinfo:
            run(opcode)
        assert excinfo.value.key == 0x20
        assert excinfo.value.address == 0x200
        assert machine.cpu.get_state().pc == 0x200

    def test_wait_key_without_press_still_advances(self, machine, run):
        state = machine.cpu.get_state()
        state.v[4] = 0x33
        run(0xF40A)
        assert state.v[4] == 0x33
        assert state.pc == 0x202

    def test_wait_key_single_press(self, machine, run):
        machine.keypad.set_pressed({0xB})
        run(0xF40A)
        state = machine.cpu.get_state()
        assert state.v[4] == 0xB
        assert state.pc == 0x204

    # @intent:test_case_multi_key 2つのキーが押されている場合、キーごとにPCが進み、最後に見つかったキーが残ることを検証します。
    def test_wait_key_multiple_presses(self, machine, run):
        machine.keypad.set_pressed({0x2, 0x9})
        run(0xF40A)
        state = machine.cpu.get_state()
        assert state.v[4] == 0x9
        assert state.pc == 0x206


class TestInjectedPeripherals:
    # @intent:test_case_mock_display 画面とキー状態は注入されたオブジェクトを通じてのみ操作されることを検証します。
    def test_drw_delegates_to_display(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        display = MagicMock(spec=Display)
        display.draw.return_value = True
        keypad = MagicMock(spec=KeyState)
        keypad.is_down.return_value = False
        cpu = Chip8Cpu(bus, display, keypad)
        cpu.reset()
        display.clear.assert_called_once()

        cpu.get_state().v[1], cpu.get_state().v[2] = 3, 4
        cpu.load(bytes([0xD1, 0x22, 0xE1, 0x9E]))
        cpu.step()
        display.draw.assert_called_once_with(3, 4, [0xF0, 0x90])
        assert cpu.get_state().v[VF] == 1

        cpu.step()
        keypad.is_down.assert_called_once_with(3)
        assert cpu.get_state().pc == 0x204
