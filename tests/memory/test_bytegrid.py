# tests/memory/test_bytegrid.py
"""
rogue_byte.memory.bytegridモジュールの単体テスト。
"""
import io
import logging
import random
import pytest

from rogue_byte.common.types import GridPos
from rogue_byte.memory.bytegrid import (
    ByteGrid, ByteGridDiff, DiffFormatError, DiffHunk, GridFormatError, NullByteGrid,
)
from rogue_byte.memory.encoding import Encoding

# @intent:test_suite バイトグリッドのアクセス、テキスト入出力、差分の生成と適用を検証します。

@pytest.fixture
def cp437():
    return Encoding.cp437()

class TestByteGridAccess:
    # @intent:test_case_init 新しいグリッドは全セルが0であることを検証します。
    def test_new_grid_is_zero(self):
        grid = ByteGrid()
        assert grid[0, 0] == 0
        assert grid[255, 255] == 0
        assert grid.to_bytes() == bytes(65536)

    # @intent:test_case_addressing 座標と線形アドレス (x << 8) | y が同じセルを指すことを検証します。
    def test_position_and_address_are_equivalent(self):
        grid = ByteGrid()
        grid[1, 2] = 5
        assert grid[0x0102] == 5
        grid[0xAB12] = 7
        assert grid[0xAB, 0x12] == 7

    # @intent:test_case_abnormal 範囲外のアクセスと8ビットを超える値がエラーになることを検証します。
    def test_out_of_range(self):
        grid = ByteGrid()
        with pytest.raises(IndexError):
            grid[256, 0]
        with pytest.raises(IndexError):
            grid[0x10000]
        with pytest.raises(ValueError):
            grid[0, 0] = 256

    def test_wrong_data_size(self):
        with pytest.raises(ValueError):
            ByteGrid(bytes(10))

    # @intent:test_case_copy コピーが元のグリッドと独立していることを検証します。
    def test_copy_is_independent(self):
        grid = ByteGrid()
        grid[3, 3] = 1
        clone = grid.copy()
        assert clone == grid
        clone[3, 3] = 2
        assert grid[3, 3] == 1
        assert clone != grid

    def test_row_and_find(self):
        grid = ByteGrid()
        grid[2, 7] = ord("@")
        grid[5, 3] = ord("@")
        assert grid.row(3)[5] == ord("@")
        # 行優先の走査順
        assert grid.find(ord("@")) == GridPos(5, 3)
        assert grid.find(ord("#")) is None

    # @intent:test_case_null ヌルグリッドへの書き込みが無視されることを検証します。
    def test_null_grid_ignores_writes(self):
        grid = NullByteGrid()
        grid[1, 1] = 9
        grid.patch(ByteGridDiff([DiffHunk(0, b"\x01\x02")]))
        assert grid[1, 1] == 0
        assert grid[0] == 0

class TestByteGridText:
    # @intent:test_case_from_raw 改行で行が進み、短い行の残りは0になることを検証します。
    def test_from_raw(self):
        grid = ByteGrid.from_raw(b"aa\nbbb")
        assert grid[0, 0] == ord("a")
        assert grid[1, 0] == ord("a")
        assert grid[2, 0] == 0
        assert grid[0, 1] == ord("b")
        assert grid[2, 1] == ord("b")
        assert grid[3, 1] == 0
        assert grid[0, 2] == 0

    def test_from_lines(self, cp437):
        grid = ByteGrid.from_lines(["ab\n", "\n", "c\n"], cp437)
        assert grid[0, 0] == ord("a")
        assert grid[1, 0] == ord("b")
        assert grid[0, 1] == 0
        assert grid[0, 2] == ord("c")

    # @intent:test_case_abnormal 行末の余分な文字は警告のみで切り捨てられることを検証します。
    def test_trailing_characters_are_warned(self, cp437, caplog):
        with caplog.at_level(logging.WARNING, logger="rogue_byte.memory.bytegrid"):
            grid = ByteGrid.from_lines(["a" * 300], cp437)
        assert grid.row(0) == b"a" * 256
        assert "Trailing characters" in caplog.text

    def test_unknown_character(self, cp437):
        with pytest.raises(GridFormatError):
            ByteGrid.from_lines(["a一"], cp437)

    def test_content_past_last_row(self, cp437):
        lines = ["\n"] * 256 + ["\n"]
        ByteGrid.from_lines(lines, cp437)
        with pytest.raises(GridFormatError):
            ByteGrid.from_lines(["\n"] * 256 + ["x\n"], cp437)

    # @intent:test_case_io 保存したグリッドを読み込むと同じ内容になることを検証します。
    def test_save_and_load(self, cp437, tmp_path):
        grid = ByteGrid()
        grid[3, 4] = ord("x")
        grid[255, 255] = 0xFF
        grid[0, 10] = 0x01
        path = tmp_path / "grid.txt"
        with open(path, "wb") as f:
            grid.save(f, cp437)
        text = path.read_text(encoding="utf-8")
        assert len(text.splitlines()) == 256
        assert ByteGrid.load(str(path), cp437) == grid

    def test_short_write(self, cp437):
        class ShortWriter(io.RawIOBase):
            def writable(self):
                return True

            def write(self, b):
                return len(b) - 1

        with pytest.raises(OSError):
            ByteGrid().save(ShortWriter(), cp437)

class TestByteGridDiff:
    def test_equal_grids_have_empty_diff(self):
        assert len(ByteGrid().diff(ByteGrid())) == 0
        assert ByteGrid().diff(ByteGrid()).serialize() == b""

    # @intent:test_case_merge 間隔3以内の変更が1つのハンクにまとめられることを検証します。
    def test_hunks_merge_within_gap(self):
        before, after = ByteGrid(), ByteGrid()
        after[10] = 1
        after[14] = 2
        diff = before.diff(after)
        assert diff.hunks == [DiffHunk(10, b"\x01\x00\x00\x00\x02")]

    def test_hunks_split_beyond_gap(self):
        before, after = ByteGrid(), ByteGrid()
        after[10] = 1
        after[15] = 2
        diff = before.diff(after)
        assert diff.hunks == [DiffHunk(10, b"\x01"), DiffHunk(15, b"\x02")]

    # @intent:test_case_round_trip パッチ適用後にafterと一致し、二重適用しても変わらないことを検証します。
    def test_patch_round_trip_and_idempotence(self):
        before, after = ByteGrid(), ByteGrid()
        before[0, 0] = 1
        after[1, 0] = 2
        after[0xFFFF] = 3
        diff = before.diff(after)
        before.patch(diff)
        assert before == after
        before.patch(diff)
        assert before == after

    # @intent:test_case_serialize 256バイトを超えるハンクがフラグメントに分割されることを検証します。
    def test_serialize_fragments(self):
        data = bytes(range(1, 256)) + bytes(range(1, 46))
        diff = ByteGridDiff([DiffHunk(0x1234, data)])
        raw = diff.serialize()
        assert raw[:3] == bytes([0x34, 0x12, 255])
        second = 3 + 256
        assert raw[second:second + 3] == bytes([0x34, 0x13, len(data) - 256 - 1])
        assert len(raw) == 3 + 256 + 3 + (len(data) - 256)

        restored = ByteGridDiff.deserialize(raw)
        assert [h.start for h in restored.hunks] == [0x1234, 0x1334]
        grid_a, grid_b = ByteGrid(), ByteGrid()
        grid_a.patch(diff)
        grid_b.patch(restored)
        assert grid_a == grid_b

    def test_deserialize_round_trip(self):
        before, after = ByteGrid(), ByteGrid()
        after[5, 5] = ord("s")
        after[200, 3] = ord("j")
        diff = before.diff(after)
        assert ByteGridDiff.deserialize(diff.serialize()) == diff

    # @intent:test_case_round_trip ランダムな変更に対し、直列化を経た差分でもafterが復元されることを検証します。
    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_serialized_patch_restores_after(self, seed):
        rng = random.Random(seed)
        before, after = ByteGrid(), ByteGrid()
        for _ in range(500):
            before[rng.randrange(0x10000)] = rng.randrange(256)
        for address in range(rng.randrange(0x10000 - 600), 0x10000, 7):
            after[address] = rng.randrange(256)
        restored = ByteGridDiff.deserialize(before.diff(after).serialize())
        before.patch(restored)
        assert before == after

    # @intent:test_case_abnormal 途切れたペイロードや余りのバイトがDiffFormatErrorになることを検証します。
    def test_deserialize_errors(self):
        with pytest.raises(DiffFormatError):
            ByteGridDiff.deserialize(b"\x00\x00\x05\x01")
        with pytest.raises(DiffFormatError):
            ByteGridDiff.deserialize(b"\x00\x00\x00\x01\xAA\xBB")
        assert len(ByteGridDiff.deserialize(b"")) == 0

    # @intent:test_case_boundary アドレス空間の末尾を超えるデータが切り詰められることを検証します。
    def test_patch_truncates_at_end_of_grid(self):
        grid = ByteGrid()
        grid.patch(ByteGridDiff([DiffHunk(0xFFFE, b"\x01\x02\x03")]))
        assert grid[0xFFFE] == 1
        assert grid[0xFFFF] == 2
        assert grid[0] == 0
