# src/chip8_tracer/arch/chip8/instructions/load.py
"""
転送命令（レジスタ、インデックス、タイマー、メモリ）の実装。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.memory import Memory
from chip8_tracer.transport.glyphs import GLYPH_BASE, GLYPH_HEIGHT
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import (
    Peripherals, make_operation, field_x, field_nn, field_nnn,
    fmt_reg, fmt_byte, fmt_addr, next_instruction,
)

# @intent:utility_function FX系（オペランドがXのみ）の共通デコーダを生成します。
def _decode_fx(mnemonic: str, template: str):
    def decode(opcode: int) -> Operation:
        x = field_x(opcode)
        operands = [part.format(reg=fmt_reg(x)) for part in template.split(",")]
        return make_operation(opcode, mnemonic, operands, [x])
    return decode

# --- LD Vx, byte (6XNN) ---
def decode_ld_imm(opcode: int) -> Operation:
    x, nn = field_x(opcode), field_nn(opcode)
    return make_operation(opcode, "LD", [fmt_reg(x), fmt_byte(nn)], [x, nn])

def execute_ld_imm(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, nn = op.operand_bytes
    state.v[x] = nn
    next_instruction(state)

# --- LD I, addr (ANNN) ---
def decode_ld_i(opcode: int) -> Operation:
    nnn = field_nnn(opcode)
    return make_operation(opcode, "LD", ["I", fmt_addr(nnn)], [nnn])

def execute_ld_i(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    state.i = op.operand_bytes[0]
    next_instruction(state)

# --- LD Vx, DT (FX07) ---
decode_ld_vx_dt = _decode_fx("LD", "{reg},DT")

def execute_ld_vx_dt(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    state.v[op.operand_bytes[0]] = state.timers.delay & 0xFF
    next_instruction(state)

# --- LD Vx, K (FX0A) ---
decode_ld_vx_k = _decode_fx("LD", "{reg},K")

# @intent:responsibility 押下中の最小番号のキーをVXに格納します。
# @intent:rationale 押下キーが無い場合はPCを進めず、次のstep()で同じ命令を再実行します（ブロックしないポーリング）。
def execute_ld_vx_k(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    key = io.keypad.first_pressed()
    if key is None:
        return
    state.v[op.operand_bytes[0]] = key
    next_instruction(state)

# --- LD DT, Vx (FX15) ---
decode_ld_dt_vx = _decode_fx("LD", "DT,{reg}")

def execute_ld_dt_vx(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    state.timers.delay = state.v[op.operand_bytes[0]]
    next_instruction(state)

# --- LD ST, Vx (FX18) ---
decode_ld_st_vx = _decode_fx("LD", "ST,{reg}")

def execute_ld_st_vx(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    state.timers.sound = state.v[op.operand_bytes[0]]
    next_instruction(state)

# --- ADD I, Vx (FX1E) ---
decode_add_i = _decode_fx("ADD", "I,{reg}")

# @intent:responsibility I += VX。16ビットでラップし、VFは変更しません。
def execute_add_i(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    state.i = (state.i + state.v[op.operand_bytes[0]]) & 0xFFFF
    next_instruction(state)

# --- LD F, Vx (FX29) ---
decode_ld_f = _decode_fx("LD", "F,{reg}")

# @intent:responsibility VXの値に対応するグリフのアドレスをIに設定します。
def execute_ld_f(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    state.i = (GLYPH_BASE + state.v[op.operand_bytes[0]] * GLYPH_HEIGHT) & 0xFFFF
    next_instruction(state)

# --- LD B, Vx (FX33) ---
decode_ld_b = _decode_fx("LD", "B,{reg}")

# @intent:responsibility VXを10進3桁（百・十・一の位）に分解し、I, I+1, I+2に格納します。
# @intent:pre-condition I..I+2が範囲外の場合、メモリを一切変更せずに送出します。
def execute_ld_b(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    value = state.v[op.operand_bytes[0]]
    bus.check_range(state.i, 3)
    bus.write_byte(state.i, value // 100)
    bus.write_byte(state.i + 1, (value // 10) % 10)
    bus.write_byte(state.i + 2, value % 10)
    next_instruction(state)

# --- LD [I], Vx (FX55) ---
decode_ld_mem_vx = _decode_fx("LD", "[I],{reg}")

# @intent:responsibility V0..VXをI以降のメモリに格納します。Iは変更しません。
def execute_ld_mem_vx(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x = op.operand_bytes[0]
    bus.check_range(state.i, x + 1)
    for offset in range(x + 1):
        bus.write_byte(state.i + offset, state.v[offset])
    next_instruction(state)

# --- LD Vx, [I] (FX65) ---
decode_ld_vx_mem = _decode_fx("LD", "{reg},[I]")

# @intent:responsibility I以降のメモリをV0..VXに読み込み、その後 I = I + X + 1 とします。
def execute_ld_vx_mem(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x = op.operand_bytes[0]
    # 全て読み終えてからレジスタへ反映する
    values = [bus.read_byte(state.i + offset) for offset in range(x + 1)]
    state.v[:x + 1] = values
    state.i = (state.i + x + 1) & 0xFFFF
    next_instruction(state)
