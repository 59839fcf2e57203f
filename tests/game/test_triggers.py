# tests/game/test_triggers.py
"""
トリガー発火のシナリオテスト。
"""
import pytest

from rogue_byte.common.types import Action, GridPos
from rogue_byte.config.models import GameRules
from rogue_byte.core.page import EndOfLevel, Message, SetProgramCounter, Trigger
from rogue_byte.game.state import GameState
from rogue_byte.memory.bytegrid import ByteGrid

# @intent:test_suite 移動成功時のトリガー発火と、一度きり/繰り返しの違いを検証します。

def make_state(rules=None):
    grid = ByteGrid()
    grid[0, 0] = ord("@")
    state = GameState.from_grid(grid, rules)
    page = state.current_page()
    page.add_trigger(Trigger(GridPos(1, 0), SetProgramCounter(0x1010)))
    page.add_trigger(Trigger(GridPos(2, 0), SetProgramCounter(0x2020), one_time=False))
    return state

class TestTriggerScenario:
    # @intent:test_case_one_time 一度きりのトリガーは再訪問で発火しないことを検証します。
    def test_one_time_trigger(self):
        state = make_state()
        snapshot = state.make_move(Action.RIGHT)
        assert snapshot.trigger == SetProgramCounter(0x1010)
        assert snapshot.pc == 0x1010

        state.make_move(Action.LEFT)
        state.cpu_state.pc = 0x0000
        snapshot = state.make_move(Action.RIGHT)
        assert snapshot.trigger is None
        assert state.cpu_state.pc == 0x0000

    # @intent:test_case_repeat 繰り返しトリガーは訪問のたびに発火することを検証します。
    def test_repeatable_trigger(self):
        state = make_state()
        state.make_move(Action.RIGHT)
        assert state.make_move(Action.RIGHT).trigger == SetProgramCounter(0x2020)
        state.make_move(Action.LEFT)
        state.cpu_state.pc = 0x0000
        assert state.make_move(Action.RIGHT).trigger == SetProgramCounter(0x2020)
        assert state.cpu_state.pc == 0x2020

    def test_failed_move_does_not_fire(self):
        state = make_state()
        state.current_page().memory[1, 0] = ord("A")
        snapshot = state.make_move(Action.RIGHT)
        assert not snapshot.moved
        assert snapshot.trigger is None
        assert state.current_page().trigger_at((1, 0)).is_active()

    # @intent:test_case_reset ルールで指定された場合、トリガーでレジスタが初期化されることを検証します。
    def test_reset_registers_on_trigger(self):
        state = make_state(GameRules(reset_registers_on_trigger=True))
        state.cpu_state.data = 5
        state.cpu_state.compare = 0
        state.make_move(Action.RIGHT)
        assert state.cpu_state.data == 0
        assert state.cpu_state.compare == 0xFF

    def test_registers_kept_by_default(self):
        state = make_state()
        state.cpu_state.data = 5
        state.make_move(Action.RIGHT)
        assert state.cpu_state.data == 5

class TestLevelEnd:
    @pytest.mark.parametrize("effect", [EndOfLevel(), Message("WIN")])
    def test_end_of_level(self, effect):
        state = make_state()
        state.current_page().add_trigger(Trigger(GridPos(0, 1), effect))
        snapshot = state.make_move(Action.DOWN)
        assert snapshot.end_of_level
        assert state.end_of_level

    def test_message(self):
        state = make_state()
        state.current_page().add_trigger(Trigger(GridPos(0, 1), Message("hello")))
        snapshot = state.make_move(Action.DOWN)
        assert snapshot.trigger == Message("hello")
        assert state.messages == ["hello"]
        assert not state.end_of_level
