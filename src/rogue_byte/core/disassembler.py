# rogue_byte/core/disassembler.py
"""
Disassembler

グリッド上のバイトを命令として解析し、表示用の情報に変換します。
Instruction Layerのデコードロジックを再利用しますが、バスアクセスログを汚さないように
PeekBusラッパーを使用します。副作用はありません。
"""
from typing import List, Optional, Tuple

from rogue_byte.common.types import ADDRESS_MAX, GRID_MAX, join_address, split_address
from rogue_byte.core.instructions import decode_opcode
from rogue_byte.core.snapshot import Operation
from rogue_byte.transport.bus import Bus

# @intent:utility_class バスへのアクセスをPeek（ログなし読み込み）に変換するラッパーです。
class PeekBus:
    """
    Busのラッパー。readメソッドをpeek（ログなし読み込み）にリダイレクトします。
    デコーダがバスアクセスログを生成するのを防ぐために使用します。
    """
    def __init__(self, bus: Bus):
        self._bus = bus

    def read(self, address: int) -> int:
        return self._bus.peek(address)

# @intent:responsibility 指定アドレスの命令をデコードします。
def read_instruction(bus: Bus, pc: int) -> Operation:
    peek_bus = PeekBus(bus)
    return decode_opcode(peek_bus.read(pc), peek_bus, pc)

# @intent:responsibility PCを含む、同じ列で連続した命令の範囲を返します。
# @intent:return (先頭アドレス, 末尾アドレス)。PCの位置が命令でなければNone。
def instruction_range(bus: Bus, pc: int) -> Optional[Tuple[int, int]]:
    pc &= ADDRESS_MAX
    if read_instruction(bus, pc).is_none:
        return None
    x, y = split_address(pc)
    first = last = y
    while first > 0 and not read_instruction(bus, join_address(x, first - 1)).is_none:
        first -= 1
    while last < GRID_MAX and not read_instruction(bus, join_address(x, last + 1)).is_none:
        last += 1
    return join_address(x, first), join_address(x, last)

# @intent:responsibility 指定された範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    PCの進行方向（同じ列を下へ）に沿って逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    for address in range(start_addr, min(start_addr + length, ADDRESS_MAX + 1)):
        operation = read_instruction(bus, address)

        hex_bytes = operation.opcode_hex
        for b in operation.operand_bytes:
            hex_bytes += f" {b:02X}"

        mnemonic_str = operation.mnemonic
        if operation.operands:
            mnemonic_str += " " + ", ".join(operation.operands)

        result.append((address, hex_bytes, mnemonic_str))
    return result
