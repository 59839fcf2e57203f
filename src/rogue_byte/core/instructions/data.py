# rogue_byte/core/instructions/data.py
"""
データ命令（スワップ、比較、加算）の実装。
"""
from rogue_byte.common.types import split_address
from rogue_byte.core.player import GridLocation, RegisterLocation
from rogue_byte.core.snapshot import InstructionKind, Operation
from rogue_byte.core.state import CpuState, RegisterId
from rogue_byte.transport.bus import Bus
from .base import read_address_operand, read_row_operand

# --- SWAP ---
# @intent:responsibility SWAP (s) 命令をデコードします。
def decode_swap(opcode: int, bus: Bus, pc: int) -> Operation:
    b1, b2 = read_address_operand(bus, pc)
    return Operation(f"{opcode:02X}", "SWAP", InstructionKind.SWAP, [f"${(b1 << 8) | b2:04X}"], [b1, b2], 3)

# @intent:responsibility Dataレジスタとメモリの格納値を交換し、必要に応じてプレイヤーを移動させます。
# @intent:rationale プレイヤーは格納値ではなく位置参照なので、交換されたセル/レジスタに追従させます。
def execute_swap(state: CpuState, bus: Bus, op: Operation) -> None:
    address = op.address
    pos = split_address(address)
    stored = bus.read_stored(address)
    bus.write(address, state.data)
    state.data = stored

    player = bus.player
    if player.at_cell(bus.page_id, pos):
        player.location = RegisterLocation(RegisterId.DATA)
    elif player.at_register(RegisterId.DATA):
        player.location = GridLocation(pos)
        player.page = bus.page_id

# --- CMP ---
# @intent:responsibility CMP (c) 命令をデコードします。
def decode_compare(opcode: int, bus: Bus, pc: int) -> Operation:
    val = read_row_operand(bus, pc, 1)
    return Operation(f"{opcode:02X}", "CMP", InstructionKind.COMPARE, [f"#${val:02X}"], [val], 2)

# @intent:responsibility Dataレジスタの実効値と即値を比較し、Compareレジスタに 0 / 1 / 0xFF を設定します。
def execute_compare(state: CpuState, bus: Bus, op: Operation) -> None:
    data = state.get_effective(RegisterId.DATA, bus.player.location, bus.player.mask)
    if data == op.value:
        state.compare = 0x00
    elif data > op.value:
        state.compare = 0x01
    else:
        state.compare = 0xFF

# --- ADD ---
# @intent:responsibility ADD (a) 命令をデコードします。
def decode_add(opcode: int, bus: Bus, pc: int) -> Operation:
    val = read_row_operand(bus, pc, 1)
    return Operation(f"{opcode:02X}", "ADD", InstructionKind.ADD, [f"#${val:02X}"], [val], 2)

def execute_add(state: CpuState, bus: Bus, op: Operation) -> None:
    state.data = (state.data + op.value) & 0xFF
