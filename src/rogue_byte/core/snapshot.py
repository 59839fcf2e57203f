# rogue_byte/core/snapshot.py
"""
実行結果の不変スナップショット

デコードされた命令 (Operation) と、1回の入力で発生した状態遷移 (Snapshot) を
記録する不変のデータ構造を定義します。UIへの情報提供とテストでの検証に用います。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from rogue_byte.common.types import Action
from rogue_byte.core.page import TriggerEffect
from rogue_byte.core.player import PlayerLocation
from rogue_byte.transport.bus import BusAccess

# @intent:responsibility 命令の種類を定義します。NONEは「ここに命令はない」ことを表します。
class InstructionKind(Enum):
    JUMP = "j"
    SWAP = "s"
    COMPARE = "c"
    JUMP_EQUAL = "e"
    JUMP_LESS = "l"
    JUMP_GREATER = "g"
    ADD = "a"
    PAGE = "p"
    NONE = ""

# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（オペコード、ニーモニック、オペランド）を記録するデータクラス。
    length は同じ行に並ぶ命令バイト数（オペコード + オペランド）で、表示用です。
    """
    opcode_hex: str # 例: "6A"
    mnemonic: str # 例: "JMP"
    kind: InstructionKind = InstructionKind.NONE
    operands: List[str] = field(default_factory=list) # 例: ["$1010"]
    operand_bytes: List[int] = field(default_factory=list) # 生のオペランドバイト
    length: int = 1

    @property
    def opcode(self) -> int:
        return int(self.opcode_hex, 16)

    # @intent:accessor 2バイトのオペランドを16ビットアドレス (上位=x, 下位=y) として解釈します。
    @property
    def address(self) -> int:
        return (self.operand_bytes[0] << 8) | self.operand_bytes[1]

    @property
    def value(self) -> int:
        return self.operand_bytes[0]

    @property
    def is_none(self) -> bool:
        return self.kind is InstructionKind.NONE

# @intent:responsibility 1回の入力に対するゲーム状態の遷移結果を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    action: Action
    moved: bool
    player: PlayerLocation
    active_page: int
    pc: int
    trigger: Optional[TriggerEffect] = None
    operation: Optional[Operation] = None
    bus_activity: List[BusAccess] = field(default_factory=list)
    end_of_level: bool = False

    # @intent:rationale Snapshotは不変であるべきという原則に従い、frozen=Trueを設定。
    #                  リストなどのミュータブルなフィールドはdefault_factoryを使用します。
