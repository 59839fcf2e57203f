# rogue_byte/memory/bytegrid.py
"""
Memory Layer (バイトグリッド)

256x256のバイト行列を保持し、座標 (x, y) と16ビット線形アドレスの両方で
読み書きできるようにします。テキスト形式での入出力と、バイナリ差分(diff/patch)の
生成・適用も本モジュールの責務です。
"""
import logging
from typing import BinaryIO, Iterable, List, NamedTuple, Optional, Tuple, Union

from rogue_byte.common.types import ADDRESS_MAX, GRID_SIZE, GridPos, join_address
from rogue_byte.memory.encoding import CharsetError, Encoding

logger = logging.getLogger(__name__)

# @intent:constant 差分ハンクを延長する際に許容する未変更バイトの最大間隔。
HUNK_MERGE_GAP = 3
# @intent:constant シリアライズ時の1フラグメントの最大長（長さフィールドは len-1 の1バイト）。
FRAGMENT_MAX = 256

GridKey = Union[int, Tuple[int, int]]

# @intent:responsibility グリッドのテキスト表現が不正であることを表す例外です。
class GridFormatError(ValueError):
    pass

# @intent:responsibility 差分のバイナリ表現が不正であることを表す例外です。
class DiffFormatError(ValueError):
    pass

# @intent:data_structure 連続した変更バイト列（開始アドレスと新しい値）。
class DiffHunk(NamedTuple):
    start: int
    data: bytes

# @intent:responsibility バイトグリッド間の差分（位置保存型のランレングス差分）を保持します。
class ByteGridDiff:
    """
    アドレス昇順に並んだハンクの列。削除や移動は表現せず、
    「アドレスにこの値を書く」という操作のみを表します。
    """
    def __init__(self, hunks: Optional[List[DiffHunk]] = None):
        self.hunks: List[DiffHunk] = list(hunks) if hunks else []

    def __len__(self) -> int:
        return len(self.hunks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ByteGridDiff):
            return NotImplemented
        return self.hunks == other.hunks

    def __repr__(self) -> str:
        return f"ByteGridDiff({len(self.hunks)} hunks)"

    # @intent:responsibility 差分をバイナリ形式に変換します。
    # @intent:rationale 長さフィールドが1バイトのため、各ハンクは最大256バイトのフラグメントに分割されます。
    def serialize(self) -> bytes:
        """
        各フラグメントを [addr_lo][addr_hi][len-1][data...] の形式で連結します。
        ヘッダやフッタはありません。
        """
        result = bytearray()
        for hunk in self.hunks:
            position = hunk.start
            for offset in range(0, len(hunk.data), FRAGMENT_MAX):
                fragment = hunk.data[offset:offset + FRAGMENT_MAX]
                result.append(position & 0xFF)
                result.append((position >> 8) & 0xFF)
                result.append(len(fragment) - 1)
                result.extend(fragment)
                position += len(fragment)
        return bytes(result)

    # @intent:responsibility バイナリ形式から差分を復元します。
    # @intent:post-condition ペイロードが途切れている、または1-3バイトの余りがある場合はDiffFormatErrorを送出します。
    @classmethod
    def deserialize(cls, data: bytes) -> "ByteGridDiff":
        result = cls()
        pos = 0
        while len(data) - pos >= 4:
            start = data[pos] | (data[pos + 1] << 8)
            length = data[pos + 2] + 1
            pos += 3
            if pos + length > len(data):
                raise DiffFormatError(
                    f"Hunk at offset {pos - 3} declares {length} bytes but only {len(data) - pos} remain."
                )
            result.hunks.append(DiffHunk(start, bytes(data[pos:pos + length])))
            pos += length
        if len(data) - pos > 0:
            raise DiffFormatError(f"{len(data) - pos} trailing bytes do not form a complete hunk.")
        return result

# @intent:responsibility 256x256のバイト行列を保持し、座標と線形アドレスでのアクセスを提供します。
class ByteGrid:
    """
    65536バイトのグリッド。内部では線形アドレス順 ((x << 8) | y) に格納するため、
    同じ列 (x) のセルが連続して並びます。
    """
    # @intent:responsibility 全セル0、または与えられた65536バイトで初期化します。
    def __init__(self, data: Optional[bytes] = None):
        if data is None:
            self._data = bytearray(GRID_SIZE * GRID_SIZE)
        else:
            if len(data) != GRID_SIZE * GRID_SIZE:
                raise ValueError(f"Grid data must be {GRID_SIZE * GRID_SIZE} bytes, got {len(data)}.")
            self._data = bytearray(data)

    @staticmethod
    def _address(key: GridKey) -> int:
        if isinstance(key, tuple):
            x, y = key
            if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
                raise IndexError(f"Position ({x}, {y}) out of bounds for the grid.")
            return join_address(x, y)
        if not 0 <= key <= ADDRESS_MAX:
            raise IndexError(f"Address {key} out of bounds for the grid.")
        return key

    def __getitem__(self, key: GridKey) -> int:
        return self._data[self._address(key)]

    def __setitem__(self, key: GridKey, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Data {value} is not an 8-bit value.")
        self._write(self._address(key), bytes((value,)))

    # @intent:responsibility 連続したアドレスへの書き込みを行う唯一の経路です。
    def _write(self, address: int, data: bytes) -> None:
        self._data[address:address + len(data)] = data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ByteGrid):
            return NotImplemented
        return self._data == other._data

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nonzero={sum(1 for b in self._data if b)})"

    def copy(self) -> "ByteGrid":
        return ByteGrid(self.to_bytes())

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    # @intent:responsibility 1行 (固定y, x=0..255) のバイト列を返します。
    def row(self, y: int) -> bytes:
        return bytes(self._data[y::GRID_SIZE])

    def set_row(self, y: int, data: bytes) -> None:
        data = bytes(data[:GRID_SIZE])
        for x, value in enumerate(data):
            self._write(join_address(x, y), bytes((value,)))

    # @intent:responsibility 指定値を持つ最初のセル（行優先の走査順）を探します。
    def find(self, value: int) -> Optional[GridPos]:
        for y in range(GRID_SIZE):
            x = self.row(y).find(bytes((value,)))
            if x != -1:
                return GridPos(x, y)
        return None

    # @intent:responsibility 生のバイト列からグリッドを生成します。改行で次の行へ進み、範囲外は破棄します。
    @classmethod
    def from_raw(cls, data: bytes) -> "ByteGrid":
        result = cls()
        x = y = 0
        for value in data:
            if value == ord("\n"):
                x = 0
                y += 1
            else:
                if x < GRID_SIZE and y < GRID_SIZE:
                    result[x, y] = value
                x += 1
        return result

    # @intent:responsibility テキスト行の列を文字セットでデコードしてグリッドを生成します。
    # @intent:post-condition 行末の余分な文字は警告ログのみ。未知の文字や257行目以降の内容はGridFormatError。
    @classmethod
    def from_lines(cls, lines: Iterable[str], encoding: Encoding) -> "ByteGrid":
        result = cls()
        for index, line in enumerate(lines):
            line = line.rstrip("\r\n")
            if index >= GRID_SIZE:
                if line:
                    raise GridFormatError(f"Line {index + 1} is past the last grid row.")
                continue
            try:
                decoded, tail = encoding.decode_line(line, GRID_SIZE)
            except CharsetError as e:
                raise GridFormatError(f"Line {index + 1}: {e}") from e
            if tail:
                logger.warning("Trailing characters on line %d", index + 1)
            result.set_row(index, decoded)
        return result

    @classmethod
    def load(cls, path: str, encoding: Encoding) -> "ByteGrid":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_lines(f, encoding)

    # @intent:responsibility グリッドを256行のテキストとして書き出します。
    # @intent:post-condition 書き込みが途中で終わった場合はOSErrorを送出します。
    def save(self, out: BinaryIO, encoding: Encoding) -> None:
        for y in range(GRID_SIZE):
            line = (encoding.encode(self.row(y)) + "\n").encode("utf-8")
            written = out.write(line)
            if written is not None and written != len(line):
                raise OSError(f"Short write on line {y + 1}: {written} of {len(line)} bytes.")

    # @intent:responsibility 自身(before)から other(after) への差分を生成します。
    # @intent:rationale 全アドレスを昇順に1回だけ走査し、間隔3以内の変更は同じハンクにまとめます。
    def diff(self, other: "ByteGrid") -> ByteGridDiff:
        before, after = self._data, other._data
        runs: List[List] = []
        for address in range(GRID_SIZE * GRID_SIZE):
            if before[address] == after[address]:
                continue
            if runs:
                start, data = runs[-1]
                end = start + len(data)
                if address - end <= HUNK_MERGE_GAP:
                    data.extend(after[end:address + 1])
                    continue
            runs.append([address, bytearray(after[address:address + 1])])
        return ByteGridDiff([DiffHunk(start, bytes(data)) for start, data in runs])

    # @intent:responsibility 差分を順番に適用します。
    # @intent:rationale 0xFFFFを超えるデータは切り詰めて書き込みます（エラーにはしません）。
    def patch(self, diff: ByteGridDiff) -> None:
        for hunk in diff.hunks:
            length = min(len(hunk.data), ADDRESS_MAX + 1 - hunk.start)
            if length > 0:
                self._write(hunk.start, hunk.data[:length])

# @intent:responsibility 存在しないページ用の、常に0を返し書き込みを無視するグリッドです。
class NullByteGrid(ByteGrid):
    """
    未知のページIDに対して返される合成グリッド。
    書き込みは全て無視されるため、読み出しは常に0になります。
    """
    def _write(self, address: int, data: bytes) -> None:
        # Intentional: writes to the null page are discarded.
        pass
