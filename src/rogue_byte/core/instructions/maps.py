# rogue_byte/core/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from . import control
from . import data

# @intent:map オペコード（整数）からデコード関数へのマッピングテーブル。
DECODE_MAP = {
    # Control
    ord("j"): control.decode_jump,
    ord("e"): control.decode_jump_equal,
    ord("l"): control.decode_jump_less,
    ord("g"): control.decode_jump_greater,
    ord("p"): control.decode_page,

    # Data
    ord("s"): data.decode_swap,
    ord("c"): data.decode_compare,
    ord("a"): data.decode_add,
}

# @intent:map オペコード（整数）から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    ord("j"): control.execute_jump,
    ord("e"): control.execute_jump_equal,
    ord("l"): control.execute_jump_less,
    ord("g"): control.execute_jump_greater,
    ord("p"): control.execute_page,

    # Data
    ord("s"): data.execute_swap,
    ord("c"): data.execute_compare,
    ord("a"): data.execute_add,
}
