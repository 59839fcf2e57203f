# rogue_byte/core/instructions/control.py
"""
制御命令（ジャンプ、条件ジャンプ、ページ切替）の実装。
"""
from rogue_byte.core.snapshot import InstructionKind, Operation
from rogue_byte.core.state import CpuState, RegisterId
from rogue_byte.transport.bus import Bus
from .base import read_address_operand, read_row_operand

# @intent:utility_function アドレスオペランドを持つ命令のOperationを生成します。
def _decode_jump_like(opcode: int, bus: Bus, pc: int, kind: InstructionKind, mnemonic: str) -> Operation:
    b1, b2 = read_address_operand(bus, pc)
    return Operation(f"{opcode:02X}", mnemonic, kind, [f"${(b1 << 8) | b2:04X}"], [b1, b2], 3)

# @intent:utility_function Compareレジスタの実効値を返します。プレイヤーがCompareにいればマスクが重なります。
def _effective_compare(state: CpuState, bus: Bus) -> int:
    return state.get_effective(RegisterId.COMPARE, bus.player.location, bus.player.mask)

# --- JMP ---
# @intent:responsibility JMP (j) 命令をデコードします。
def decode_jump(opcode: int, bus: Bus, pc: int) -> Operation:
    return _decode_jump_like(opcode, bus, pc, InstructionKind.JUMP, "JMP")

def execute_jump(state: CpuState, bus: Bus, op: Operation) -> None:
    state.pc = op.address

# --- JEQ ---
# @intent:responsibility JEQ (e) 命令をデコードします。
def decode_jump_equal(opcode: int, bus: Bus, pc: int) -> Operation:
    return _decode_jump_like(opcode, bus, pc, InstructionKind.JUMP_EQUAL, "JEQ")

# @intent:responsibility Compareレジスタが0（等しい）の場合に分岐します。
def execute_jump_equal(state: CpuState, bus: Bus, op: Operation) -> None:
    if _effective_compare(state, bus) == 0:
        state.pc = op.address

# --- JLT ---
# @intent:responsibility JLT (l) 命令をデコードします。
def decode_jump_less(opcode: int, bus: Bus, pc: int) -> Operation:
    return _decode_jump_like(opcode, bus, pc, InstructionKind.JUMP_LESS, "JLT")

# @intent:responsibility Compareレジスタが1より大きい場合に分岐します。
# @intent:rationale 「小さい」は0xFFで符号化されるため、数値比較 > 1 で判定します。この結合は変更しないこと。
def execute_jump_less(state: CpuState, bus: Bus, op: Operation) -> None:
    if _effective_compare(state, bus) > 1:
        state.pc = op.address

# --- JGT ---
# @intent:responsibility JGT (g) 命令をデコードします。
def decode_jump_greater(opcode: int, bus: Bus, pc: int) -> Operation:
    return _decode_jump_like(opcode, bus, pc, InstructionKind.JUMP_GREATER, "JGT")

def execute_jump_greater(state: CpuState, bus: Bus, op: Operation) -> None:
    if _effective_compare(state, bus) == 1:
        state.pc = op.address

# --- PAGE ---
# @intent:responsibility PAGE (p) 命令をデコードします。
def decode_page(opcode: int, bus: Bus, pc: int) -> Operation:
    val = read_row_operand(bus, pc, 1)
    return Operation(f"{opcode:02X}", "PAGE", InstructionKind.PAGE, [f"#${val:02X}"], [val], 2)

# @intent:responsibility ルールで許可されている場合、ページレジスタを書き換えます。
def execute_page(state: CpuState, bus: Bus, op: Operation) -> None:
    if bus.switch_page(op.value):
        state.page = op.value
        bus.select_page(op.value)

# --- NONE ---
# @intent:responsibility 命令ではないバイトをデコードします。PCは進みません。
def decode_none(opcode: int, bus: Bus, pc: int) -> Operation:
    return Operation(f"{opcode:02X}", "NONE", InstructionKind.NONE, [], [], 1)
