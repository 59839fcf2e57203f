# rogue_byte/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUのレジスタ群とプログラムカウンタを保持するデータ構造を定義します。
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

from rogue_byte.common.types import ADDRESS_MAX
from rogue_byte.core.player import PlayerLocation, RegisterLocation, effective

# @intent:constant よく使われるレジスタのインデックス。
class RegisterId(IntEnum):
    DATA = 0
    PAGE = 1
    COMPARE = 2

# @intent:data_structure 名前付きの8ビットレジスタ。protectedなレジスタにはプレイヤーが入れません。
@dataclass
class Register:
    value: int = 0x00
    protected: bool = False
    name: str = ""

def _default_registers() -> List[Register]:
    return [
        Register(0x00, False, "data"),
        Register(0x00, False, "page"),
        Register(0xFF, False, "compare"),
    ]

# @intent:responsibility CPUのレジスタ状態を保持します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    プログラムカウンタはアドレス空間全体を指すため、バイトレジスタの列とは別に16ビット値として持ちます。
    """
    pc: int = 0x0000
    registers: List[Register] = field(default_factory=_default_registers)

    # @intent:accessor よく使うレジスタの格納値へのアクセスをプロパティで提供します。
    @property
    def data(self) -> int:
        return self.registers[RegisterId.DATA].value

    @data.setter
    def data(self, value: int) -> None:
        self.registers[RegisterId.DATA].value = value & 0xFF

    @property
    def page(self) -> int:
        return self.registers[RegisterId.PAGE].value

    @page.setter
    def page(self, value: int) -> None:
        self.registers[RegisterId.PAGE].value = value & 0xFF

    @property
    def compare(self) -> int:
        return self.registers[RegisterId.COMPARE].value

    @compare.setter
    def compare(self, value: int) -> None:
        self.registers[RegisterId.COMPARE].value = value & 0xFF

    def get_register(self, index: int) -> Register:
        return self.registers[index]

    def set_register(self, index: int, value: int) -> None:
        self.registers[index].value = value & 0xFF

    # @intent:responsibility レジスタの実効値を返します。プレイヤーがそのレジスタにいる場合のみマスクを重ねます。
    def get_effective(self, index: int, player_location: PlayerLocation, player_mask: int) -> int:
        here = player_location == RegisterLocation(index)
        return effective(self.registers[index].value, here, player_mask)

    # @intent:responsibility PCを1進めます。0xFFFFで飽和し、折り返しません。
    def advance_pc(self) -> None:
        self.pc = min(self.pc + 1, ADDRESS_MAX)
