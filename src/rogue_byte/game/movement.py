# rogue_byte/game/movement.py
"""
移動規則

グリッド上の座標に移動方向を適用し、折り返しモードに応じた移動先候補を計算します。
移動可否（アクセス可能性）の判定はGameStateの責務です。
"""
from rogue_byte.common.types import Action, GRID_MAX, GridPos, join_address, split_address
from rogue_byte.config.models import WrapMode

# @intent:constant 線形アドレスでの移動量（16ビットの折り返し加算）。
_LINEAR_DELTA = {
    Action.UP: 0xFFFF,
    Action.LEFT: 0xFF00,
    Action.DOWN: 0x0001,
    Action.RIGHT: 0x0100,
}

_AXIS_DELTA = {
    Action.UP: (0, -1),
    Action.LEFT: (-1, 0),
    Action.DOWN: (0, 1),
    Action.RIGHT: (1, 0),
}

# @intent:responsibility 移動先の候補座標を計算します。
# @intent:post-condition BLOCKで範囲外となる場合は元の座標を返します。
def step(p0: GridPos, direction: Action, mode: WrapMode) -> GridPos:
    if mode is WrapMode.WRAP_GRID:
        joined = join_address(p0.x, p0.y)
        return split_address((joined + _LINEAR_DELTA[direction]) & 0xFFFF)

    dx, dy = _AXIS_DELTA[direction]
    tx, ty = p0.x + dx, p0.y + dy
    if 0 <= tx <= GRID_MAX and 0 <= ty <= GRID_MAX:
        return GridPos(tx, ty)
    if mode is WrapMode.WRAP_LINE:
        return GridPos(tx & 0xFF, ty & 0xFF)
    return GridPos(p0.x, p0.y)
