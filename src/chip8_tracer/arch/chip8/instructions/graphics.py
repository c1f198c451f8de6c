# src/chip8_tracer/arch/chip8/instructions/graphics.py
"""
画面消去とスプライト描画命令の実装。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.display import WIDTH, HEIGHT
from .base import (
    Peripherals, make_operation, field_x, field_y, field_n,
    fmt_reg, next_instruction,
)

SPRITE_WIDTH = 8

# --- CLS (00E0) ---
def decode_cls(opcode: int) -> Operation:
    return make_operation(opcode, "CLS", [], [])

def execute_cls(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    io.framebuffer.clear()
    next_instruction(state)

# --- DRW Vx, Vy, nibble (DXYN) ---
def decode_drw(opcode: int) -> Operation:
    x, y, n = field_x(opcode), field_y(opcode), field_n(opcode)
    return make_operation(opcode, "DRW", [fmt_reg(x), fmt_reg(y), str(n)], [x, y, n])

# @intent:responsibility Iから読んだNバイトのスプライトを(VX, VY)にXOR描画します。
# @intent:post-condition 1つでも点灯ピクセルが消えた場合VF=1、それ以外はVF=0。画面端はラップアラウンドします。
def execute_drw(state: Chip8CpuState, bus: Memory, op: Operation, io: Peripherals) -> None:
    x, y, height = op.operand_bytes
    origin_x, origin_y = state.v[x], state.v[y]

    # フレームバッファを変更する前にスプライトを全て読み込む
    bus.check_range(state.i, height)
    sprite = [bus.read_byte(state.i + row) for row in range(height)]

    collision = 0
    for row, bits in enumerate(sprite):
        for col in range(SPRITE_WIDTH):
            if bits & (0x80 >> col):
                target_row = (origin_y + row) % HEIGHT
                target_col = (origin_x + col) % WIDTH
                if io.framebuffer.xor_pixel(target_row, target_col):
                    collision = 1

    state.vf = collision
    io.framebuffer.mark_dirty()
    next_instruction(state)
