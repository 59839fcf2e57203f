# rogue_byte/core/player.py
"""
Core Layer (プレイヤー位置)

プレイヤーはデータを所有せず、グリッド上のセルまたはレジスタを指す「位置参照」です。
その位置の実効値 (effective value) にマーカービットを重ねることで可視化されます。
"""
from dataclasses import dataclass
from typing import Union

from rogue_byte.common.types import GridPos

# @intent:constant プレイヤーマーカービットの既定位置（0x40, '@' と同じビット）。
DEFAULT_PLAYER_OFFSET = 6

# @intent:data_structure プレイヤーがグリッド上のセルにいることを表します。
@dataclass(frozen=True)
class GridLocation:
    pos: GridPos

# @intent:data_structure プレイヤーがCPUレジスタにいることを表します。
@dataclass(frozen=True)
class RegisterLocation:
    index: int

PlayerLocation = Union[GridLocation, RegisterLocation]

# @intent:utility_function 実効値の規則。格納値を変更せず、プレイヤーがいる場合のみマスクを重ねます。
def effective(stored: int, player_here: bool, mask: int) -> int:
    return stored | mask if player_here else stored

# @intent:responsibility プレイヤーの現在位置とアクティブページを保持します。
@dataclass
class Player:
    """
    location はセルかレジスタのどちらか一方のみ。
    page はプレイヤーが見ているページID（グリッド上にいるときはそのセルが属するページ）。
    """
    location: PlayerLocation
    page: int
    offset: int = DEFAULT_PLAYER_OFFSET

    @property
    def mask(self) -> int:
        return 1 << self.offset

    @property
    def in_grid(self) -> bool:
        return isinstance(self.location, GridLocation)

    # @intent:responsibility 指定ページの指定セルにプレイヤーがいるかを判定します。
    def at_cell(self, page_id: int, pos: GridPos) -> bool:
        return self.page == page_id and self.location == GridLocation(GridPos(*pos))

    def at_register(self, index: int) -> bool:
        return self.location == RegisterLocation(index)
