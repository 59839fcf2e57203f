# rogue_byte/game/state.py
"""
Game Layer (ゲーム状態)

ページテーブル、CPU、プレイヤー位置、ルールを所有し、
1回の入力を「移動 -> トリガー発火 -> 条件付きの1命令実行」という状態遷移に変換します。
描画側は実効値などの読み出し専用の問い合わせAPIのみを使用します。
"""
import logging
from typing import Dict, List, Optional, Tuple

from rogue_byte.common.types import Action, GridPos
from rogue_byte.config.models import DEFAULT_PAGE, GameRules, RotationRule
from rogue_byte.core import disassembler
from rogue_byte.core.cpu import Cpu
from rogue_byte.core.page import EndOfLevel, Message, Page, PageTable, SetProgramCounter, TriggerEffect
from rogue_byte.core.player import GridLocation, Player, PlayerLocation, RegisterLocation, effective
from rogue_byte.core.snapshot import Operation, Snapshot
from rogue_byte.core.state import CpuState, RegisterId
from rogue_byte.game.movement import step
from rogue_byte.memory.bits import Bits256
from rogue_byte.memory.bytegrid import ByteGrid
from rogue_byte.transport.bus import Bus

logger = logging.getLogger(__name__)

# @intent:constant レベルのグリッド内でプレイヤーの初期位置を示すバイト。
PLAYER_VALUE = ord("@")
# @intent:constant レベル終了も意味するメッセージ。
WIN_MESSAGE = "WIN"

# @intent:responsibility ゲーム1レベル分の状態を所有し、入力ごとの状態遷移を計算します。
class GameState:
    """
    プレイヤーは常にグリッドのセルかレジスタのどちらか一方に位置します。
    CPUはプレイヤーのアクティブページとCPUのページレジスタ（実効値）が一致している
    場合のみ、1入力につき最大1命令を実行します。
    """
    # @intent:responsibility ページ、ルール、初期位置からゲーム状態を構築します。
    def __init__(self, pages: Optional[Dict[int, Page]] = None, rules: Optional[GameRules] = None,
                 start_page: int = DEFAULT_PAGE, start: GridPos = GridPos(0, 0)):
        self.rules = rules if rules is not None else GameRules()
        self.pages = PageTable(pages)
        self.player = Player(GridLocation(GridPos(*start)), start_page & 0xFF, self.rules.player_offset)
        self.cpus: List[Cpu] = [Cpu()]
        self.cpu.get_state().page = start_page
        self.visited_pages = Bits256()
        self.visited_pages.set(self.player.page)
        self.end_of_level = False
        self.page_instruction_executed = False
        self.messages: List[str] = []
        self._bus = Bus(self.pages, self.player, self._handle_page_instruction)

    # @intent:responsibility 単一のグリッドからレベルを構築します。'@' の位置をプレイヤーの初期位置とし、そのセルは0にします。
    @classmethod
    def from_grid(cls, grid: ByteGrid, rules: Optional[GameRules] = None,
                  page_id: int = DEFAULT_PAGE) -> "GameState":
        start = grid.find(PLAYER_VALUE) or GridPos(0, 0)
        page = Page.from_grid(grid)
        page.memory[start] = 0
        return cls({page_id: page}, rules, page_id, start)

    @classmethod
    def new_empty(cls, rules: Optional[GameRules] = None) -> "GameState":
        return cls.from_grid(ByteGrid(), rules)

    # --- 問い合わせAPI（描画用、副作用なし） ---

    @property
    def cpu(self) -> Cpu:
        return self.cpus[0]

    @property
    def cpu_state(self) -> CpuState:
        return self.cpu.get_state()

    @property
    def location(self) -> PlayerLocation:
        return self.player.location

    @property
    def player_mask(self) -> int:
        return self.player.mask

    @property
    def active_page(self) -> int:
        return self.player.page

    # @intent:responsibility CPUのページレジスタの実効値を返します。
    @property
    def cpu_page(self) -> int:
        return self.cpu.effective_page(self.player.location, self.player.mask)

    # @intent:responsibility プレイヤーとプログラムが同じページにいるか（CPUが進行できるか）を返します。
    @property
    def in_sync(self) -> bool:
        return self.player.page == self.cpu_page

    def accessible(self, value: int) -> bool:
        return (value & self.player.mask) == 0

    # @intent:responsibility プレイヤーのアクティブページを返します。未知のIDならヌルページ。
    def current_page(self) -> Page:
        return self.pages.get(self.player.page)

    def page(self, page_id: int) -> Page:
        return self.pages.get(page_id)

    # @intent:responsibility セルの実効値を返します。プレイヤーがそのページのそのセルにいればマスクを重ねます。
    def effective_value(self, page: Page, position: GridPos) -> int:
        here = (self.player.in_grid
                and self.location.pos == tuple(position)
                and page is self.current_page())
        return effective(page.memory[tuple(position)], here, self.player.mask)

    def effective_register(self, index: int) -> int:
        return self.cpu_state.get_effective(index, self.player.location, self.player.mask)

    def _inspection_bus(self, page_id: int) -> Bus:
        bus = Bus(self.pages, self.player)
        bus.select_page(page_id)
        return bus

    # @intent:responsibility 指定ページの指定アドレスの命令をデコードします（副作用なし）。
    def read_instruction(self, pc: int, page_id: int) -> Operation:
        return disassembler.read_instruction(self._inspection_bus(page_id), pc)

    # @intent:responsibility CPUのページ上で、PCを含む連続した命令の範囲を返します（副作用なし）。
    def instruction_range(self, pc: int) -> Optional[Tuple[int, int]]:
        return disassembler.instruction_range(self._inspection_bus(self.cpu_page), pc)

    # --- 状態遷移 ---

    # @intent:responsibility 1回の入力を処理し、その結果をSnapshotとして返します。
    # @intent:flow 移動(またはページ回転) -> トリガー -> 同期していれば1命令実行
    def make_move(self, action: Action) -> Snapshot:
        trigger: Optional[TriggerEffect] = None
        operation: Optional[Operation] = None
        bus_activity = []

        if not action.is_move:
            moved = self._rotate_page()
        elif self.player.in_grid:
            moved = self._move_in_grid(action)
            if moved:
                trigger = self._fire_trigger()
        else:
            moved = self._move_in_register(action)

        if self.in_sync:
            self._bus.select_page(self.cpu_page)
            operation = self.cpu.step(self._bus)
            bus_activity = self._bus.get_and_clear_activity_log()

        logger.debug("%s moved=%s player=%s page=%d pc=%#06x", action.value, moved,
                     self.player.location, self.player.page, self.cpu_state.pc)
        return Snapshot(
            action=action,
            moved=moved,
            player=self.player.location,
            active_page=self.player.page,
            pc=self.cpu_state.pc,
            trigger=trigger,
            operation=operation,
            bus_activity=bus_activity,
            end_of_level=self.end_of_level,
        )

    # @intent:responsibility グリッド上での移動。移動先の実効値がアクセス可能な場合のみ位置を更新します。
    def _move_in_grid(self, direction: Action) -> bool:
        target = step(self.location.pos, direction, self.rules.wrap_mode)
        if not self.accessible(self.effective_value(self.current_page(), target)):
            return False
        self.player.location = GridLocation(target)
        return True

    # @intent:responsibility レジスタ上での移動。上下のみ、折り返しなし、保護されたレジスタには入れません。
    # @intent:post-condition 成功時、アクティブページはページレジスタの実効値になります。
    def _move_in_register(self, direction: Action) -> bool:
        if direction not in (Action.UP, Action.DOWN):
            return False
        index = self.location.index + (-1 if direction is Action.UP else 1)
        if not 0 <= index < len(self.cpu_state.registers):
            return False
        if self.cpu_state.get_register(index).protected:
            return False
        if not self.accessible(self.effective_register(index)):
            return False
        self.player.location = RegisterLocation(index)
        self._enter_page(self.effective_register(RegisterId.PAGE))
        return True

    # @intent:responsibility アクティブページを次の訪問済みページ (1..255) へ回転させます。
    def _rotate_page(self) -> bool:
        if not self.player.in_grid:
            return False
        rule = self.rules.page_rotation
        if rule is RotationRule.NEVER:
            return False
        if rule is RotationRule.AFTER_PAGE_INSTRUCTION and not self.page_instruction_executed:
            return False
        candidate = self.player.page
        for _ in range(255):
            candidate = candidate % 255 + 1
            if candidate in self.visited_pages:
                if candidate == self.player.page:
                    return False
                self.player.page = candidate
                return True
        return False

    # @intent:responsibility 現在位置のトリガーを発火させ、その効果を適用します。
    def _fire_trigger(self) -> Optional[TriggerEffect]:
        trigger = self.current_page().trigger_at(self.location.pos)
        if trigger is None or not trigger.is_active():
            return None
        trigger.triggered = True
        effect = trigger.effect
        logger.info("Trigger at %s fired: %s", trigger.position, effect)

        if isinstance(effect, SetProgramCounter):
            state = self.cpu_state
            if self.rules.reset_registers_on_trigger:
                state.data = 0x00
                state.compare = 0xFF
            state.pc = effect.address
        elif isinstance(effect, EndOfLevel):
            self.end_of_level = True
        elif isinstance(effect, Message):
            logger.info("Message: %s", effect.text)
            self.messages.append(effect.text)
            if effect.text == WIN_MESSAGE:
                self.end_of_level = True
        return effect

    def _enter_page(self, page_id: int) -> None:
        self.player.page = page_id & 0xFF
        self.visited_pages.set(self.player.page)

    # @intent:responsibility ページ切替命令のハンドラ。ルールで禁止されている場合は何もしません。
    def _handle_page_instruction(self, page_id: int) -> bool:
        if not self.rules.page_switching:
            return False
        self._enter_page(page_id)
        self.page_instruction_executed = True
        return True
