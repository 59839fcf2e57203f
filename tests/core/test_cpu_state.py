# tests/core/test_cpu_state.py
"""
rogue_byte.core.stateおよびrogue_byte.core.playerモジュールの単体テスト。
"""
from rogue_byte.common.types import GridPos
from rogue_byte.core.player import GridLocation, Player, RegisterLocation, effective
from rogue_byte.core.state import CpuState, RegisterId

class TestCpuState:
    # @intent:test_case_init 初期レジスタ値 (data=0, page=0, compare=0xFF) を検証します。
    def test_initial_registers(self):
        state = CpuState()
        assert state.pc == 0
        assert state.data == 0x00
        assert state.page == 0x00
        assert state.compare == 0xFF
        assert [r.name for r in state.registers] == ["data", "page", "compare"]

    def test_setters_mask_to_byte(self):
        state = CpuState()
        state.data = 0x1AB
        state.set_register(RegisterId.COMPARE, -1)
        assert state.data == 0xAB
        assert state.compare == 0xFF

    # @intent:test_case_boundary PCが0xFFFFで飽和することを検証します。
    def test_advance_pc_saturates(self):
        state = CpuState(pc=0xFFFE)
        state.advance_pc()
        assert state.pc == 0xFFFF
        state.advance_pc()
        assert state.pc == 0xFFFF

    # @intent:test_case_effective プレイヤーのいるレジスタのみマスクが重なることを検証します。
    def test_effective_register(self):
        state = CpuState()
        state.page = 42
        assert state.get_effective(RegisterId.PAGE, RegisterLocation(1), 0x40) == 42 | 0x40
        assert state.get_effective(RegisterId.PAGE, RegisterLocation(0), 0x40) == 42
        assert state.get_effective(RegisterId.PAGE, GridLocation(GridPos(1, 0)), 0x40) == 42
        assert state.page == 42

class TestPlayer:
    def test_mask_and_location(self):
        player = Player(GridLocation(GridPos(3, 4)), 42)
        assert player.mask == 0x40
        assert player.in_grid
        assert player.at_cell(42, (3, 4))
        assert not player.at_cell(7, (3, 4))
        player.location = RegisterLocation(RegisterId.DATA)
        assert player.at_register(0)
        assert not player.in_grid

    def test_custom_offset(self):
        assert Player(GridLocation(GridPos(0, 0)), 1, offset=0).mask == 0x01

    def test_effective(self):
        assert effective(0x05, True, 0x40) == 0x45
        assert effective(0x45, True, 0x40) == 0x45
        assert effective(0x05, False, 0x40) == 0x05
