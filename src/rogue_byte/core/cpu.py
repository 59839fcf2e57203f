# rogue_byte/core/cpu.py
"""
Core Layer (CPU)

このモジュールは、CPUの状態管理と命令サイクル（フェッチ→デコード→PC更新→実行）の
駆動を提供します。具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from rogue_byte.core.instructions import decode_opcode, execute_instruction
from rogue_byte.core.player import PlayerLocation
from rogue_byte.core.snapshot import Operation
from rogue_byte.core.state import CpuState, RegisterId
from rogue_byte.transport.bus import Bus

# @intent:responsibility CPUの状態を保持し、1命令サイクルを実行します。
class Cpu:
    """
    レジスタ群と16ビットのプログラムカウンタを持つ小さなCPU。
    メモリへのアクセスは全てBusを介して行われます。
    """
    def __init__(self):
        self._state: CpuState = self._create_initial_state()
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    def _create_initial_state(self) -> CpuState:
        return CpuState()

    def get_state(self) -> CpuState:
        return self._state

    # @intent:responsibility ページレジスタの実効値（プレイヤーのマーカービットを含む）を返します。
    def effective_page(self, player_location: PlayerLocation, player_mask: int) -> int:
        return self._state.get_effective(RegisterId.PAGE, player_location, player_mask)

    # @intent:responsibility 現在のPCからオペコードをフェッチします（実効値として読み出し）。
    def _fetch(self, bus: Bus) -> int:
        return bus.read(self._state.pc)

    def _decode(self, opcode: int, bus: Bus) -> Operation:
        return decode_opcode(opcode, bus, self._state.pc)

    # @intent:responsibility 命令実行前にPCを更新します。
    # @intent:rationale NONE以外の命令はPCを1進めてから実行されます。NONEは「ここに命令はない」ためPCを据え置きます。
    def _update_pc(self, operation: Operation) -> None:
        if not operation.is_none:
            self._state.advance_pc()

    def _execute(self, operation: Operation, bus: Bus) -> None:
        execute_instruction(operation, self._state, bus)

    # @intent:responsibility CPUを1命令サイクル進め、実行したOperationを返します。
    # @intent:pre-condition bus は事前にCPUのページを選択している必要があります。
    def step(self, bus: Bus) -> Operation:
        """
        フェッチ -> デコード -> PC更新 -> 実行 の順序で1命令を処理します。
        """
        bus.get_and_clear_activity_log()
        opcode = self._fetch(bus)
        operation = self._decode(opcode, bus)
        self._update_pc(operation)
        self._execute(operation, bus)
        return operation
