# tests/memory/test_bits.py
"""
rogue_byte.memory.bitsモジュールの単体テスト。
"""
from rogue_byte.memory.bits import Bits256

class TestBits256:
    # @intent:test_case_basic 設定、コピー、クリアが期待通りに動作することを検証します。
    def test_set_copy_clear(self):
        bits = Bits256()
        for index in (0, 255, 7, 8):
            bits.set(index)
        assert bits.get(0) and bits.get(255) and bits.get(7) and bits.get(8)
        assert not bits.get(1)

        clone = bits.copy()
        assert clone == bits
        bits.clear()
        assert bits == Bits256()
        assert 255 in clone

    def test_unset_and_iterate(self):
        bits = Bits256()
        bits.set(42)
        bits.set(9)
        bits.set(9, False)
        assert list(bits) == [42]
        assert 9 not in bits
