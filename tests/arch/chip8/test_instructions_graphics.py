import unittest
from chip8_tracer.transport.memory import Memory
from chip8_tracer.transport.glyphs import GLYPH_BASE
from chip8_tracer.arch.chip8.cpu import Chip8Cpu

class TestChip8GraphicsInstructions(unittest.TestCase):
    def setUp(self):
        self.memory = Memory()
        self.cpu = Chip8Cpu(self.memory)
        self.cpu.reset()
        self.state = self.cpu.get_state()
        self.fb = self.cpu.framebuffer

    def _execute(self, word):
        self.memory.load(self.state.pc, word >> 8)
        self.memory.load(self.state.pc + 1, word & 0xFF)
        return self.cpu.step()

    def test_draw_glyph(self):
        # グリフ'0' (F0 90 90 90 F0) を (0, 0) に描画
        self.state.i = GLYPH_BASE
        self._execute(0xD015)
        self.assertEqual(self.state.vf, 0)
        self.assertTrue(self.fb.is_dirty())
        self.assertEqual([int(self.fb.get_pixel(0, c)) for c in range(8)], [1, 1, 1, 1, 0, 0, 0, 0])
        self.assertEqual([int(self.fb.get_pixel(1, c)) for c in range(8)], [1, 0, 0, 1, 0, 0, 0, 0])

    def test_draw_twice_erases_with_collision(self):
        self.state.i = GLYPH_BASE
        self._execute(0xD015)
        self._execute(0xD015)
        self.assertEqual(self.state.vf, 1)
        self.assertFalse(any(any(row) for row in self.fb.snapshot()))

    def test_draw_wraps_horizontally(self):
        self.memory.load(0x300, 0xFF)
        self.state.i = 0x300
        self.state.v[0x1] = 63
        self.state.v[0x2] = 0
        self._execute(0xD121)
        self.assertTrue(self.fb.get_pixel(0, 63))
        for col in range(7):
            self.assertTrue(self.fb.get_pixel(0, col))
        self.assertFalse(self.fb.get_pixel(0, 7))

    def test_draw_wraps_vertically(self):
        self.memory.load(0x300, 0x80)
        self.memory.load(0x301, 0x80)
        self.state.i = 0x300
        self.state.v[0x1] = 0
        self.state.v[0x2] = 31
        self._execute(0xD122)
        self.assertTrue(self.fb.get_pixel(31, 0))
        self.assertTrue(self.fb.get_pixel(0, 0))

    def test_draw_zero_rows_marks_dirty(self):
        self.state.vf = 1
        self._execute(0xD010)
        self.assertEqual(self.state.vf, 0)
        self.assertTrue(self.fb.is_dirty())

    def test_cls(self):
        self.state.i = GLYPH_BASE
        self._execute(0xD015)
        self.fb.clear_dirty()
        self._execute(0x00E0)
        self.assertTrue(self.fb.is_dirty())
        self.assertFalse(any(any(row) for row in self.fb.snapshot()))
        # 2回目のCLSも同じ結果
        self._execute(0x00E0)
        self.assertTrue(self.fb.is_dirty())
        self.assertEqual(self.state.pc, 0x206)
