# tests/transport/test_memory.py
"""
chip8_tracer.transport.memoryモジュールの単体テスト。
"""
import pytest

from chip8_tracer.common.errors import AddressOutOfRange, RomTooLarge
from chip8_tracer.transport.glyphs import GLYPH_BASE, GLYPH_SET
from chip8_tracer.transport.memory import (
    Memory, BusAccess, BusAccessType, MEMORY_SIZE, PROGRAM_START, PROGRAM_LIMIT,
)

# @intent:test_suite 4KBメモリの読み書き、境界チェック、グリフとROMの配置を検証します。

class TestMemory:
    """
    Memoryの単体テスト。
    """
    @pytest.fixture
    def memory(self):
        return Memory()

    # @intent:test_case_init グリフセットが0x050から配置され、それ以外はゼロ初期化されることを検証します。
    def test_glyphs_loaded_at_construction(self, memory):
        assert memory.get_size() == MEMORY_SIZE
        for offset, byte in enumerate(GLYPH_SET):
            assert memory.peek(GLYPH_BASE + offset) == byte
        assert memory.peek(GLYPH_BASE - 1) == 0x00
        assert memory.peek(GLYPH_BASE + len(GLYPH_SET)) == 0x00
        assert memory.peek(PROGRAM_START) == 0x00

    # @intent:test_case_glyphs グリフ'0'と'F'のビットパターンが標準フォントと一致することを検証します。
    def test_glyph_patterns(self, memory):
        assert [memory.peek(GLYPH_BASE + i) for i in range(5)] == [0xF0, 0x90, 0x90, 0x90, 0xF0]
        assert [memory.peek(GLYPH_BASE + 75 + i) for i in range(5)] == [0xF0, 0x80, 0xF0, 0x80, 0x80]
        assert len(GLYPH_SET) == 80

    # @intent:test_case_rw 読み書きが正しく行われ、アクセスログに記録されることを検証します。
    def test_read_write_logged(self, memory):
        memory.write_byte(0x300, 0xAB)
        assert memory.read_byte(0x300) == 0xAB
        log = memory.get_and_clear_activity_log()
        assert log == [
            BusAccess(0x300, 0xAB, BusAccessType.WRITE, previous_data=0x00),
            BusAccess(0x300, 0xAB, BusAccessType.READ),
        ]
        assert memory.get_and_clear_activity_log() == []

    # @intent:test_case_peek peekとloadはログを記録しないことを検証します。
    def test_peek_and_load_do_not_log(self, memory):
        memory.load(0x400, 0x42)
        assert memory.peek(0x400) == 0x42
        assert memory.get_and_clear_activity_log() == []

    # @intent:test_case_oob 範囲外アドレスへのアクセスでAddressOutOfRangeが発生することを検証します。
    def test_out_of_range(self, memory):
        with pytest.raises(AddressOutOfRange) as excinfo:
            memory.read_byte(0x1000)
        assert excinfo.value.address == 0x1000
        with pytest.raises(AddressOutOfRange):
            memory.write_byte(0x1000, 0x00)
        with pytest.raises(AddressOutOfRange):
            memory.read_byte(-1)
        # 既存のIndexErrorハンドラでも捕捉できる
        with pytest.raises(IndexError):
            memory.peek(0x2000)

    # @intent:test_case_data 8bitを超える値の書き込みでValueErrorが発生することを検証します。
    def test_write_invalid_data(self, memory):
        with pytest.raises(ValueError, match="Data 256 is not an 8-bit value."):
            memory.write_byte(0x200, 0x100)

    # @intent:test_case_range 領域チェックが末尾アドレスまで検証することを確認します。
    def test_check_range(self, memory):
        memory.check_range(0xFFD, 3)
        memory.check_range(0xFFF, 0)
        with pytest.raises(AddressOutOfRange) as excinfo:
            memory.check_range(0xFFE, 3)
        assert excinfo.value.address == 0x1000

    # @intent:test_case_rom ROMが0x200から配置されることを検証します。
    def test_load_program(self, memory):
        memory.load_program(bytes([0x12, 0x34, 0x56]))
        assert [memory.peek(PROGRAM_START + i) for i in range(3)] == [0x12, 0x34, 0x56]

    # @intent:test_case_rom 再ロード時に以前のROMの残骸が残らないことを検証します。
    def test_reload_clears_program_area(self, memory):
        memory.load_program(bytes([0xFF] * 8))
        memory.load_program(bytes([0x01]))
        assert memory.peek(PROGRAM_START) == 0x01
        assert memory.peek(PROGRAM_START + 1) == 0x00
        assert memory.peek(GLYPH_BASE) == 0xF0

    # @intent:test_case_rom 最大サイズのROMは受理され、1バイト超過でRomTooLargeとなりメモリは変更されないことを検証します。
    def test_rom_size_limit(self, memory):
        memory.load_program(bytes([0x11]) * PROGRAM_LIMIT)
        assert memory.peek(0xFFF) == 0x11

        memory.load_program(bytes([0x22]))
        with pytest.raises(RomTooLarge) as excinfo:
            memory.load_program(bytes(PROGRAM_LIMIT + 1))
        assert excinfo.value.size == PROGRAM_LIMIT + 1
        assert excinfo.value.limit == PROGRAM_LIMIT
        assert memory.peek(PROGRAM_START) == 0x22
