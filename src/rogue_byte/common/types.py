"""
共通の型定義を提供するモジュール。
グリッド座標と16ビット線形アドレスの相互変換など、プロジェクト全体で使用される
汎用的な型と関数を定義します。
"""
from enum import Enum
from typing import NamedTuple

# @intent:constant グリッドの一辺のセル数。バイト値で全座標を表現できる大きさ。
GRID_SIZE = 256
GRID_MAX = GRID_SIZE - 1
ADDRESS_MAX = 0xFFFF

# @intent:data_structure グリッド上のセル座標 (x, y)。
class GridPos(NamedTuple):
    x: int
    y: int

# @intent:utility_function 座標を16ビット線形アドレス (上位=x, 下位=y) に詰めます。
def join_address(x: int, y: int) -> int:
    return ((x & 0xFF) << 8) | (y & 0xFF)

# @intent:utility_function 16ビット線形アドレスを座標に分解します。
def split_address(address: int) -> GridPos:
    address &= ADDRESS_MAX
    return GridPos(address >> 8, address & 0xFF)

# @intent:data_structure 1回の入力に対応するプレイヤーの操作。
class Action(Enum):
    UP = "UP"
    LEFT = "LEFT"
    DOWN = "DOWN"
    RIGHT = "RIGHT"
    ROTATE_PAGE = "ROTATE_PAGE"

    @property
    def is_move(self) -> bool:
        return self is not Action.ROTATE_PAGE
