import unittest
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.instructions import decode_opcode

class TestChip8AluInstructions(unittest.TestCase):
    def setUp(self):
        self.memory = Memory()
        self.cpu = Chip8Cpu(self.memory, random_byte=lambda: 0xA7)
        self.cpu.reset()
        self.state = self.cpu.get_state()

    def _execute(self, word):
        self.memory.load(self.state.pc, word >> 8)
        self.memory.load(self.state.pc + 1, word & 0xFF)
        return self.cpu.step()

    def test_add_imm_wraps_without_flag(self):
        self.state.v[0x2] = 0xF0
        self.state.vf = 0x5
        # ADD V2, #$20
        self._execute(0x7220)
        self.assertEqual(self.state.v[0x2], 0x10)
        self.assertEqual(self.state.vf, 0x5) # VFは変化しない
        self.assertEqual(self.state.pc, 0x202)

    def test_ld_reg(self):
        self.state.v[0x4] = 0x99
        self._execute(0x8340)
        self.assertEqual(self.state.v[0x3], 0x99)

    def test_bitwise(self):
        self.state.v[0x0] = 0b1100
        self.state.v[0x1] = 0b1010
        self._execute(0x8011) # OR
        self.assertEqual(self.state.v[0x0], 0b1110)

        self.state.v[0x0] = 0b1100
        self._execute(0x8012) # AND
        self.assertEqual(self.state.v[0x0], 0b1000)

        self.state.v[0x0] = 0b1100
        self._execute(0x8013) # XOR
        self.assertEqual(self.state.v[0x0], 0b0110)
        self.assertEqual(self.state.pc, 0x206)

    def test_add_reg_carry(self):
        self.state.v[0x1] = 0xFF
        self.state.v[0x2] = 0x01
        # ADD V1, V2 -> 0x100
        self._execute(0x8124)
        self.assertEqual(self.state.v[0x1], 0x00)
        self.assertEqual(self.state.vf, 1)

    def test_add_reg_no_carry(self):
        self.state.v[0x1] = 0x10
        self.state.v[0x2] = 0x20
        self.state.vf = 1
        self._execute(0x8124)
        self.assertEqual(self.state.v[0x1], 0x30)
        self.assertEqual(self.state.vf, 0)

    def test_add_reg_small(self):
        self.state.v[0x1] = 0x01
        self.state.v[0x2] = 0x01
        self._execute(0x8124)
        self.assertEqual(self.state.v[0x1], 0x02)
        self.assertEqual(self.state.vf, 0)
        self.assertEqual(self.state.pc, 0x202)

    def test_sub_small_values(self):
        self.state.v[0x1] = 0x05
        self.state.v[0x2] = 0x03
        self._execute(0x8125)
        self.assertEqual(self.state.v[0x1], 0x02)
        self.assertEqual(self.state.vf, 1)

        self.state.v[0x1] = 0x03
        self.state.v[0x2] = 0x05
        self._execute(0x8125)
        self.assertEqual(self.state.v[0x1], 0xFE)
        self.assertEqual(self.state.vf, 0)

    def test_sub_borrow(self):
        self.state.v[0x1] = 0x05
        self.state.v[0x2] = 0x10
        # SUB V1, V2 -> 0xF5, borrow
        self._execute(0x8125)
        self.assertEqual(self.state.v[0x1], 0xF5)
        self.assertEqual(self.state.vf, 0)

    def test_sub_no_borrow(self):
        self.state.v[0x1] = 0x10
        self.state.v[0x2] = 0x05
        self._execute(0x8125)
        self.assertEqual(self.state.v[0x1], 0x0B)
        self.assertEqual(self.state.vf, 1)

    def test_sub_equal_operands_sets_borrow(self):
        self.state.v[0x1] = 0x42
        self.state.v[0x2] = 0x42
        self._execute(0x8125)
        self.assertEqual(self.state.v[0x1], 0x00)
        self.assertEqual(self.state.vf, 0) # VX > VY ではない

    def test_subn(self):
        self.state.v[0x1] = 0x05
        self.state.v[0x2] = 0x10
        # SUBN V1, V2 -> V2 - V1
        self._execute(0x8127)
        self.assertEqual(self.state.v[0x1], 0x0B)
        self.assertEqual(self.state.vf, 1)

        self.state.v[0x1] = 0x10
        self.state.v[0x2] = 0x05
        self._execute(0x8127)
        self.assertEqual(self.state.v[0x1], 0xF5)
        self.assertEqual(self.state.vf, 0)

    def test_shr(self):
        self.state.v[0x3] = 0b00000101
        self.state.v[0x4] = 0xFF
        self._execute(0x8346)
        self.assertEqual(self.state.v[0x3], 0b00000010)
        self.assertEqual(self.state.vf, 1)
        self.assertEqual(self.state.v[0x4], 0xFF) # VYは参照しない

    def test_shl(self):
        self.state.v[0x3] = 0b10000001
        self._execute(0x830E)
        self.assertEqual(self.state.v[0x3], 0b00000010)
        self.assertEqual(self.state.vf, 1)

        self.state.v[0x3] = 0b01000000
        self._execute(0x830E)
        self.assertEqual(self.state.v[0x3], 0b10000000)
        self.assertEqual(self.state.vf, 0)

    def test_flag_wins_when_target_is_vf(self):
        self.state.vf = 0xFF
        self.state.v[0x1] = 0x01
        # ADD VF, V1 -> 結果0x00の後にキャリー1が書き込まれる
        self._execute(0x8F14)
        self.assertEqual(self.state.vf, 1)

    def test_rnd_masks_injected_byte(self):
        # RND V5, #$0F (乱数源は0xA7を返す)
        self._execute(0xC50F)
        self.assertEqual(self.state.v[0x5], 0x07)
        self.assertEqual(self.state.pc, 0x202)

    def test_decode_mnemonics(self):
        self.assertEqual(decode_opcode(0x7A05).mnemonic, "ADD")
        self.assertEqual(decode_opcode(0x7A05).operands, ["VA", "#$05"])
        self.assertEqual(decode_opcode(0x8127).mnemonic, "SUBN")
        self.assertEqual(decode_opcode(0x8127).operands, ["V1", "V2"])
        self.assertEqual(decode_opcode(0x8128).mnemonic, "UNKNOWN")
