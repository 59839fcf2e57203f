# tests/core/test_snapshot.py
"""
rogue_byte.core.snapshotモジュールの単体テスト。
"""
import dataclasses
import pytest

from rogue_byte.common.types import Action, GridPos
from rogue_byte.core.player import GridLocation
from rogue_byte.core.snapshot import InstructionKind, Operation, Snapshot

# @intent:test_suite OperationとSnapshotの不変性と派生プロパティを検証します。

class TestOperation:
    def test_properties(self):
        op = Operation("73", "SWAP", InstructionKind.SWAP, ["$0A0B"], [0x0A, 0x0B], 3)
        assert op.opcode == ord("s")
        assert op.address == 0x0A0B
        assert op.value == 0x0A
        assert not op.is_none

    def test_defaults(self):
        op = Operation("00", "NONE")
        assert op.is_none
        assert op.operands == []
        assert op.length == 1

    # @intent:test_case_immutable Operationが不変であることを検証します。
    def test_frozen(self):
        op = Operation("6A", "JMP")
        with pytest.raises(dataclasses.FrozenInstanceError):
            op.mnemonic = "X"

class TestSnapshot:
    # @intent:test_case_immutable Snapshotが不変であり、ミュータブルな既定値が共有されないことを検証します。
    def test_frozen_snapshot(self):
        first = Snapshot(Action.UP, False, GridLocation(GridPos(0, 0)), 42, 0)
        second = Snapshot(Action.DOWN, True, GridLocation(GridPos(0, 1)), 42, 0)
        assert first.bus_activity is not second.bus_activity
        assert first.trigger is None and not first.end_of_level
        with pytest.raises(dataclasses.FrozenInstanceError):
            first.pc = 1
