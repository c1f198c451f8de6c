# src/chip8_tracer/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

フラグを出力する命令(8XY4-8XYE)は、結果をVXに書き込んだ後にVFを書き込みます。
そのため X = F の場合、VFにはフラグ値が残ります。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import (
    Peripherals, make_operation, field_x, field_y, field_nn,
    fmt_reg, fmt_byte, next_instruction,
)

# @intent:utility_function レジスタ間演算(8XYn)の共通デコーダを生成します。
def _decode_reg_pair(mnemonic: str):
    def decode(opcode: int) -> Operation:
        x, y = field_x(opcode), field_y(opcode)
        return make_operation(opcode, mnemonic, [fmt_reg(x), fmt_reg(y)], [x, y])
    return decode

# @intent:utility_function 演算結果とフラグをVX, VFの順に書き込み、PCを進めます。
def _store_with_flag(state: Chip8CpuState, x: int, result: int, flag: int) -> None:
    state.v[x] = result & 0xFF
    state.vf = flag
    next_instruction(state)

# --- ADD Vx, byte (7XNN) ---
def decode_add_imm(opcode: int) -> Operation:
    x, nn = field_x(opcode), field_nn(opcode)
    return make_operation(opcode, "ADD", [fmt_reg(x), fmt_byte(nn)], [x, nn])

# @intent:responsibility VXにNNを加算します。8ビットでラップし、VFは変更しません。
def execute_add_imm(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, nn = op.operand_bytes
    state.v[x] = (state.v[x] + nn) & 0xFF
    next_instruction(state)

# --- LD Vx, Vy (8XY0) ---
decode_ld_reg = _decode_reg_pair("LD")

def execute_ld_reg(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y = op.operand_bytes
    state.v[x] = state.v[y]
    next_instruction(state)

# --- OR / AND / XOR (8XY1 - 8XY3) ---
decode_or = _decode_reg_pair("OR")
decode_and = _decode_reg_pair("AND")
decode_xor = _decode_reg_pair("XOR")

def execute_or(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y = op.operand_bytes
    state.v[x] = state.v[x] | state.v[y]
    next_instruction(state)

def execute_and(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y = op.operand_bytes
    state.v[x] = state.v[x] & state.v[y]
    next_instruction(state)

def execute_xor(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y = op.operand_bytes
    state.v[x] = state.v[x] ^ state.v[y]
    next_instruction(state)

# --- ADD Vx, Vy (8XY4) ---
decode_add_reg = _decode_reg_pair("ADD")

# @intent:responsibility VX = VX + VY。255を超えた場合VF=1（キャリー）。
def execute_add_reg(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y = op.operand_bytes
    total = state.v[x] + state.v[y]
    _store_with_flag(state, x, total, 1 if total > 0xFF else 0)

# --- SUB Vx, Vy (8XY5) ---
decode_sub = _decode_reg_pair("SUB")

# @intent:responsibility VX = VX - VY。VX > VY の場合VF=1（ボローなし）。
def execute_sub(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y = op.operand_bytes
    vx, vy = state.v[x], state.v[y]
    _store_with_flag(state, x, vx - vy, 1 if vx > vy else 0)

# --- SHR Vx (8XY6) ---
decode_shr = _decode_reg_pair("SHR")

# @intent:responsibility VXを1ビット右シフトします。VFはシフト前の最下位ビット。VYは参照しません。
def execute_shr(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x = op.operand_bytes[0]
    vx = state.v[x]
    _store_with_flag(state, x, vx >> 1, vx & 0x01)

# --- SUBN Vx, Vy (8XY7) ---
decode_subn = _decode_reg_pair("SUBN")

# @intent:responsibility VX = VY - VX。VY >= VX の場合VF=1（ボローなし）。
def execute_subn(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y = op.operand_bytes
    vx, vy = state.v[x], state.v[y]
    _store_with_flag(state, x, vy - vx, 1 if vy >= vx else 0)

# --- SHL Vx (8XYE) ---
decode_shl = _decode_reg_pair("SHL")

# @intent:responsibility VXを1ビット左シフトします。VFはシフト前の最上位ビット。
def execute_shl(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x = op.operand_bytes[0]
    vx = state.v[x]
    _store_with_flag(state, x, vx << 1, (vx >> 7) & 0x01)

# --- RND Vx, byte (CXNN) ---
def decode_rnd(opcode: int) -> Operation:
    x, nn = field_x(opcode), field_nn(opcode)
    return make_operation(opcode, "RND", [fmt_reg(x), fmt_byte(nn)], [x, nn])

# @intent:responsibility 注入された乱数源から1バイトを取得し、NNでマスクしてVXに格納します。
def execute_rnd(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, nn = op.operand_bytes
    state.v[x] = (io.random_byte() & 0xFF) & nn
    next_instruction(state)
