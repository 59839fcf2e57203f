# rogue_byte/memory/bits.py
"""
256ビットの集合。バイト値 0-255 のメンバーシップを保持します（訪問済みページの記録に使用）。
"""
from typing import Iterator

BITS_IN_WORD = 8

# @intent:responsibility バイト値をインデックスとする固定長のビット集合を提供します。
class Bits256:
    WORD_COUNT = 256 // BITS_IN_WORD
    BIT_COUNT = WORD_COUNT * BITS_IN_WORD

    def __init__(self):
        self._words = bytearray(self.WORD_COUNT)

    def set(self, index: int, value: bool = True) -> None:
        word = (index & 0xFF) // BITS_IN_WORD
        bit = 1 << (index % BITS_IN_WORD)
        if value:
            self._words[word] |= bit
        else:
            self._words[word] &= ~bit & 0xFF

    def get(self, index: int) -> bool:
        word = (index & 0xFF) // BITS_IN_WORD
        return (self._words[word] >> (index % BITS_IN_WORD)) & 1 == 1

    def clear(self) -> None:
        for i in range(self.WORD_COUNT):
            self._words[i] = 0

    def copy(self) -> "Bits256":
        result = Bits256()
        result._words[:] = self._words
        return result

    def __contains__(self, index: int) -> bool:
        return self.get(index)

    def __iter__(self) -> Iterator[int]:
        return (i for i in range(self.BIT_COUNT) if self.get(i))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bits256):
            return NotImplemented
        return self._words == other._words

    __hash__ = None

    def __repr__(self) -> str:
        return f"Bits256({list(self)})"
