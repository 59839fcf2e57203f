from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

DEFAULT_PAGE = 42

class WrapMode(Enum):
    BLOCK = "BLOCK"
    WRAP_LINE = "WRAP_LINE"  # 各軸を独立に折り返す
    WRAP_GRID = "WRAP_GRID"  # 16ビット線形アドレスとして折り返す

class RotationRule(Enum):
    ALWAYS = "ALWAYS"
    NEVER = "NEVER"
    AFTER_PAGE_INSTRUCTION = "AFTER_PAGE_INSTRUCTION"

@dataclass
class TriggerConfig:
    position: Tuple[int, int]
    effect: str = "set_pc"  # "set_pc", "end_of_level", "message"
    address: int = 0x0000
    text: str = ""
    one_time: bool = True

@dataclass
class GameRules:
    wrap_mode: WrapMode = WrapMode.BLOCK
    page_rotation: RotationRule = RotationRule.ALWAYS
    page_switching: bool = True
    reset_registers_on_trigger: bool = False
    player_offset: int = 6
    triggers: Dict[int, List[TriggerConfig]] = field(default_factory=dict)

@dataclass
class LevelConfig:
    start_page: int = DEFAULT_PAGE
    encoding: str = "437"
    pages: Dict[int, str] = field(default_factory=dict)
    rules: GameRules = field(default_factory=GameRules)
