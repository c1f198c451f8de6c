# src/chip8_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import (
    Peripherals, make_operation, field_x, field_y, field_nn, field_nnn,
    fmt_reg, fmt_byte, fmt_addr, skip_if,
)

# --- RET (00EE) ---
# @intent:responsibility RET命令をデコードします。
def decode_ret(opcode: int) -> Operation:
    return make_operation(opcode, "RET", [], [])

# @intent:responsibility スタックから呼び出し元のアドレスをポップし、CALL命令の次へ戻ります。
def execute_ret(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    # スタックにはCALL命令自身のアドレスが積まれている
    state.pc = (state.stack.pop() + 2) & 0xFFFF

# --- JP addr (1NNN) ---
def decode_jp(opcode: int) -> Operation:
    nnn = field_nnn(opcode)
    return make_operation(opcode, "JP", [fmt_addr(nnn)], [nnn])

# @intent:responsibility PCをNNNに設定します（絶対ジャンプ）。
def execute_jp(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    state.pc = op.operand_bytes[0]

# --- CALL addr (2NNN) ---
def decode_call(opcode: int) -> Operation:
    nnn = field_nnn(opcode)
    return make_operation(opcode, "CALL", [fmt_addr(nnn)], [nnn])

# @intent:responsibility 現在のPCをプッシュし、NNNへジャンプします。
# @intent:pre-condition スタックが満杯の場合、PCは変更されません。
def execute_call(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    state.stack.push(state.pc)
    state.pc = op.operand_bytes[0]

# --- SE Vx, byte (3XNN) ---
def decode_se_imm(opcode: int) -> Operation:
    x, nn = field_x(opcode), field_nn(opcode)
    return make_operation(opcode, "SE", [fmt_reg(x), fmt_byte(nn)], [x, nn])

def execute_se_imm(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, nn = op.operand_bytes
    skip_if(state, state.v[x] == nn)

# --- SNE Vx, byte (4XNN) ---
def decode_sne_imm(opcode: int) -> Operation:
    x, nn = field_x(opcode), field_nn(opcode)
    return make_operation(opcode, "SNE", [fmt_reg(x), fmt_byte(nn)], [x, nn])

def execute_sne_imm(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, nn = op.operand_bytes
    skip_if(state, state.v[x] != nn)

# --- SE Vx, Vy (5XY0) ---
def decode_se_reg(opcode: int) -> Operation:
    x, y = field_x(opcode), field_y(opcode)
    return make_operation(opcode, "SE", [fmt_reg(x), fmt_reg(y)], [x, y])

def execute_se_reg(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y = op.operand_bytes
    skip_if(state, state.v[x] == state.v[y])

# --- SNE Vx, Vy (9XY0) ---
def decode_sne_reg(opcode: int) -> Operation:
    x, y = field_x(opcode), field_y(opcode)
    return make_operation(opcode, "SNE", [fmt_reg(x), fmt_reg(y)], [x, y])

def execute_sne_reg(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y = op.operand_bytes
    skip_if(state, state.v[x] != state.v[y])

# --- JP V0, addr (BNNN) ---
def decode_jp_v0(opcode: int) -> Operation:
    nnn = field_nnn(opcode)
    return make_operation(opcode, "JP", ["V0", fmt_addr(nnn)], [nnn])

# @intent:responsibility PCをNNN + V0に設定します。
def execute_jp_v0(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    state.pc = (op.operand_bytes[0] + state.v[0]) & 0xFFFF

# --- SKP Vx (EX9E) ---
def decode_skp(opcode: int) -> Operation:
    x = field_x(opcode)
    return make_operation(opcode, "SKP", [fmt_reg(x)], [x])

# @intent:responsibility VXが示すキーが押下中であれば次の命令を読み飛ばします。
def execute_skp(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x = op.operand_bytes[0]
    # キー番号はVXの下位4ビット（VX=0x13はキー3を参照する）
    skip_if(state, io.keypad.is_pressed(state.v[x]))

# --- SKNP Vx (EXA1) ---
def decode_sknp(opcode: int) -> Operation:
    x = field_x(opcode)
    return make_operation(opcode, "SKNP", [fmt_reg(x)], [x])

def execute_sknp(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x = op.operand_bytes[0]
    skip_if(state, not io.keypad.is_pressed(state.v[x]))
