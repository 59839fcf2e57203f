# rogue_byte/core/instructions/base.py
"""
命令実装用の共通ユーティリティ。
"""
from rogue_byte.common.types import GRID_SIZE, join_address, split_address
from rogue_byte.transport.bus import Bus

# @intent:utility_function 命令と同じ行の右側 offset 列目のオペランドバイトを読み込みます。
# @intent:rationale PCは列方向 (y) に進むため、オペランドは同じ行 (x+1, x+2) に並びます。
#                  グリッドの右端を超えた読み出しは0とします。
def read_row_operand(bus: Bus, pc: int, offset: int) -> int:
    x, y = split_address(pc)
    if x + offset >= GRID_SIZE:
        return 0
    return bus.read(join_address(x + offset, y))

# @intent:utility_function 2バイトのオペランドを読み込み、(上位, 下位) のリストで返します。
def read_address_operand(bus: Bus, pc: int) -> list:
    return [read_row_operand(bus, pc, 1), read_row_operand(bus, pc, 2)]
