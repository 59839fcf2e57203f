# rogue_byte/core/instructions/__init__.py
"""
命令セット実装パッケージ。
"""
from rogue_byte.core.snapshot import Operation
from rogue_byte.core.state import CpuState
from rogue_byte.transport.bus import Bus
from .control import decode_none
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility オペコードをデコードします。
def decode_opcode(opcode: int, bus: Bus, pc: int) -> Operation:
    """
    オペコードをデコードし、Operationオブジェクトを返します。
    未定義のバイトは NONE 命令（何もせず、PCも進めない）になります。
    """
    decoder = DECODE_MAP.get(opcode)
    if decoder:
        return decoder(opcode, bus, pc)
    return decode_none(opcode, bus, pc)

# @intent:responsibility デコードされた命令を実行します。
def execute_instruction(operation: Operation, state: CpuState, bus: Bus) -> None:
    executor = EXECUTE_MAP.get(operation.opcode)
    if executor:
        executor(state, bus, operation)
