# rogue_byte/core/page.py
"""
Core Layer (ページとトリガー)

ページは1枚のバイトグリッドと、位置をキーとするトリガー表を所有します。
ゲームはページIDからページへの対応表を持ち、未知のIDには合成の「ヌルページ」を返します。
"""
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Union

from rogue_byte.common.types import GRID_SIZE, GridPos, join_address
from rogue_byte.memory.bytegrid import ByteGrid, NullByteGrid

# @intent:constant グリッド内のトリガーレコード領域（行範囲）。
TRIGGER_TABLE_FIRST_ROW = 0x24

# @intent:data_structure プログラムカウンタを指定アドレスへ移動させる効果。
@dataclass(frozen=True)
class SetProgramCounter:
    address: int

# @intent:data_structure レベル終了を示す効果。
@dataclass(frozen=True)
class EndOfLevel:
    pass

# @intent:data_structure メッセージを表示する効果。"WIN" はレベル終了も意味します。
@dataclass(frozen=True)
class Message:
    text: str

TriggerEffect = Union[SetProgramCounter, EndOfLevel, Message]

# @intent:responsibility プレイヤーが特定の位置に到達したときの副作用を定義します。
@dataclass
class Trigger:
    """
    one_time のトリガーは一度だけ発火し、それ以外は訪問のたびに発火します。
    """
    position: GridPos
    effect: TriggerEffect
    one_time: bool = True
    triggered: bool = False

    @property
    def key(self) -> int:
        return join_address(*self.position)

    def is_active(self) -> bool:
        return not (self.one_time and self.triggered)

# @intent:responsibility 1枚のグリッドとそのトリガー表を所有します。
class Page:
    def __init__(self, grid: Optional[ByteGrid] = None):
        self.memory: ByteGrid = grid if grid is not None else ByteGrid()
        self.triggers: Dict[int, Trigger] = {}

    # @intent:responsibility グリッド内のトリガーレコードを読み取り、ページを生成します。
    # @intent:rationale 行 0x24-0xFF の各行の先頭4バイト (trigger_x, trigger_y, target_x, target_y) がレコード。
    #                  トリガー位置が (0, 0) のレコードで走査を終了します。
    #                  x または y の一方だけが0の位置 (例: (0, 5)) も有効なトリガー位置として登録します。
    @classmethod
    def from_grid(cls, grid: ByteGrid) -> "Page":
        page = cls(grid)
        for row in range(TRIGGER_TABLE_FIRST_ROW, GRID_SIZE):
            px, py, tx, ty = (grid[column, row] for column in range(4))
            if px == 0 and py == 0:
                break
            page.add_trigger(Trigger(GridPos(px, py), SetProgramCounter(join_address(tx, ty))))
        return page

    def add_trigger(self, trigger: Trigger) -> None:
        self.triggers[trigger.key] = trigger

    # @intent:responsibility 位置に対応するトリガーを返します。無ければNone（エラーではありません）。
    def trigger_at(self, position: Union[GridPos, int]) -> Optional[Trigger]:
        key = position if isinstance(position, int) else join_address(*position)
        return self.triggers.get(key)

    @property
    def is_null(self) -> bool:
        return isinstance(self.memory, NullByteGrid)

# @intent:responsibility ページIDからページへの対応表。未知のIDにはヌルページを返します。
class PageTable:
    def __init__(self, pages: Optional[Dict[int, Page]] = None):
        self._pages: Dict[int, Page] = dict(pages) if pages else {}
        self._null_page = Page(NullByteGrid())

    def __contains__(self, page_id: int) -> bool:
        return page_id in self._pages

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._pages))

    def __len__(self) -> int:
        return len(self._pages)

    def __setitem__(self, page_id: int, page: Page) -> None:
        self._pages[page_id & 0xFF] = page

    def get(self, page_id: int) -> Page:
        return self._pages.get(page_id, self._null_page)
