import unittest
from chip8_tracer.common.errors import AddressOutOfRange
from chip8_tracer.transport.memory import Memory, BusAccessType
from chip8_tracer.transport.glyphs import GLYPH_BASE
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.keypad import Keypad

class TestChip8LoadInstructions(unittest.TestCase):
    def setUp(self):
        self.memory = Memory()
        self.cpu = Chip8Cpu(self.memory)
        self.cpu.reset()
        self.state = self.cpu.get_state()

    def _execute(self, word, keypad=None):
        self.memory.load(self.state.pc, word >> 8)
        self.memory.load(self.state.pc + 1, word & 0xFF)
        return self.cpu.step(keypad)

    def test_ld_imm(self):
        # LD Vx, byte: 全レジスタと代表的な即値
        for x in range(16):
            for nn in (0x00, 0x42, 0x7F, 0x80, 0xFF):
                pc = self.state.pc
                self._execute(0x6000 | (x << 8) | nn)
                self.assertEqual(self.state.v[x], nn)
                self.assertEqual(self.state.pc, pc + 2)

    def test_ld_i(self):
        self._execute(0xA123)
        self.assertEqual(self.state.i, 0x123)

    def test_timers(self):
        self.state.v[0x2] = 30
        self._execute(0xF215) # LD DT, V2
        self._execute(0xF218) # LD ST, V2
        self.assertEqual(self.state.timers.delay, 30)
        self.assertEqual(self.state.timers.sound, 30)
        self.assertTrue(self.cpu.tone_active)

        self.cpu.tick_timers()
        self._execute(0xF307) # LD V3, DT
        self.assertEqual(self.state.v[0x3], 29)

    def test_ld_vx_k_waits_for_key(self):
        self._execute(0xF40A, Keypad())
        self.assertEqual(self.state.pc, 0x200) # キー入力待ち
        self._execute(0xF40A, Keypad())
        self.assertEqual(self.state.pc, 0x200)

        self._execute(0xF40A, Keypad.from_pressed([0x9, 0x6]))
        self.assertEqual(self.state.v[0x4], 0x6)
        self.assertEqual(self.state.pc, 0x202)

    def test_add_i(self):
        self.state.i = 0xFFFE
        self.state.v[0x1] = 0x03
        self.state.vf = 0x7
        self._execute(0xF11E)
        self.assertEqual(self.state.i, 0x0001)
        self.assertEqual(self.state.vf, 0x7)

    def test_ld_f(self):
        self.state.v[0x0] = 0xA
        self._execute(0xF029)
        self.assertEqual(self.state.i, GLYPH_BASE + 50)
        self.assertEqual(self.memory.peek(self.state.i), 0xF0)

    def test_ld_b(self):
        self.state.v[0x7] = 234
        self.state.i = 0x300
        snapshot = self._execute(0xF733)
        self.assertEqual([self.memory.peek(0x300 + n) for n in range(3)], [2, 3, 4])
        writes = [a for a in snapshot.bus_activity if a.access_type == BusAccessType.WRITE]
        self.assertEqual([a.address for a in writes], [0x300, 0x301, 0x302])

    def test_ld_b_out_of_range_writes_nothing(self):
        self.state.v[0x7] = 234
        self.state.i = 0xFFE
        self.memory.load(0xFFE, 0x55)
        with self.assertRaises(AddressOutOfRange):
            self._execute(0xF733)
        self.assertEqual(self.memory.peek(0xFFE), 0x55)
        self.assertEqual(self.state.pc, 0x200)

    def test_dump_and_restore_registers(self):
        self.state.v[0:5] = [0x10, 0x20, 0x30, 0x40, 0x50]
        self.state.i = 0x400
        # LD [I], V4
        self._execute(0xF455)
        self.assertEqual([self.memory.peek(0x400 + n) for n in range(5)], [0x10, 0x20, 0x30, 0x40, 0x50])
        self.assertEqual(self.state.i, 0x400)

        self.state.v[0:5] = [0] * 5
        # LD V4, [I]
        self._execute(0xF465)
        self.assertEqual(self.state.v[0:5], [0x10, 0x20, 0x30, 0x40, 0x50])
        self.assertEqual(self.state.i, 0x405)

    def test_ld_vx_mem_out_of_range_changes_nothing(self):
        self.state.i = 0xFFE
        self.state.v[0:3] = [1, 2, 3]
        with self.assertRaises(AddressOutOfRange):
            self._execute(0xF265)
        self.assertEqual(self.state.v[0:3], [1, 2, 3])
        self.assertEqual(self.state.i, 0xFFE)

    def test_ld_mem_vx_out_of_range_writes_nothing(self):
        self.state.i = 0xFFF
        self.state.v[0:2] = [0xAA, 0xBB]
        with self.assertRaises(AddressOutOfRange):
            self._execute(0xF155)
        self.assertEqual(self.memory.peek(0xFFF), 0x00)
