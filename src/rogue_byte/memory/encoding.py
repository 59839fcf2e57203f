# rogue_byte/memory/encoding.py
"""
文字セット（バイト <-> 文字 対応表）

グリッドをテキストとして読み書きする際に、各バイトを1文字として表現するための
256エントリの対応表を提供します。
"""
import os
from typing import Dict, List, Sequence, Tuple

# @intent:constant CP437で制御文字として扱われる 0x01-0x1F の表示用グリフ。
_CP437_LOW_GLYPHS = "☺☻♥♦♣♠•◘○◙♂♀♪♫☼►◄↕‼¶§▬↨↑↓→←∟↔▲▼"

# @intent:responsibility 文字セット表の不正を表す例外です。
class CharsetError(ValueError):
    pass

# @intent:responsibility バイト値と表示文字の双方向対応を保持します。
class Encoding:
    """
    256エントリの文字セット表。
    byte_to_char は全バイトに対して1文字を持ち、char_to_byte は最初に現れた
    バイト値を優先する（同じ文字が複数のバイトに割り当てられた場合）。
    """
    BUILTIN = ("437",)

    def __init__(self, byte_to_char: Sequence[str]):
        if len(byte_to_char) != 256:
            raise CharsetError(f"Incorrect table size {len(byte_to_char)} expected 256")
        self.byte_to_char: List[str] = list(byte_to_char)
        self.char_to_byte: Dict[str, int] = {}
        for value, char in enumerate(self.byte_to_char):
            self.char_to_byte.setdefault(char, value)

    # @intent:responsibility 組み込みのCP437表を生成します。
    @classmethod
    def cp437(cls) -> "Encoding":
        table = list(bytes(range(256)).decode("cp437"))
        table[0] = " "
        table[1:0x20] = list(_CP437_LOW_GLYPHS)
        table[0x7F] = "⌂"
        return cls(table)

    # @intent:responsibility 256行の文字セットファイルを読み込みます。
    # @intent:pre-condition 各行の先頭文字がその行番号のバイトに対応します。空行は空白とみなします。
    @classmethod
    def load(cls, path: str) -> "Encoding":
        """
        文字セットファイルを読み込みます。行数が256に満たない場合はCharsetErrorを送出します。
        ファイルが開けない場合のOSErrorはそのまま呼び出し元へ伝播します。
        """
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()

        table = ["?"] * 256
        index = 0
        done = False
        for char in text:
            if index >= 256:
                break
            if char == "\n":
                if not done:
                    # エディタが行末の空白を削除するため、空行は空白として扱う
                    table[index] = " "
                done = False
                index += 1
            elif not done:
                done = True
                table[index] = char

        if index != 256:
            raise CharsetError(f"Incorrect height {index} expected 256")
        return cls(table)

    # @intent:responsibility 組み込み名またはファイルパスから文字セットを解決します。
    # @intent:rationale 文字セットの探索ディレクトリは呼び出し元が明示的に渡します。
    @classmethod
    def get(cls, name: str, search_dir: str = "") -> "Encoding":
        if name in cls.BUILTIN:
            return cls.cp437()
        path = os.path.join(search_dir, name) if search_dir else name
        return cls.load(path)

    # @intent:responsibility 1行の文字列をバイト列へ変換します。
    # @intent:return (先頭widthバイト, 変換されなかった残りの文字列)
    def decode_line(self, line: str, width: int = 256) -> Tuple[bytes, str]:
        result = bytearray()
        for column, char in enumerate(line[:width]):
            value = self.char_to_byte.get(char)
            if value is None:
                raise CharsetError(f"Character {char!r} at column {column + 1} is not in the charset")
            result.append(value)
        return bytes(result), line[width:]

    def encode(self, data: bytes) -> str:
        return "".join(self.byte_to_char[b] for b in data)
