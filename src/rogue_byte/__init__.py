"""
rogue_byte: プレイヤーがメモリグリッド内の1ビットとして動き回るパズルゲームのシミュレーションコア。
"""
from rogue_byte.common.types import Action, GridPos
from rogue_byte.game.state import GameState
from rogue_byte.memory.bytegrid import ByteGrid, ByteGridDiff

__all__ = ["Action", "ByteGrid", "ByteGridDiff", "GameState", "GridPos"]
