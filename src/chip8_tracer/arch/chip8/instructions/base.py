# src/chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
from typing import Callable, List, NamedTuple

from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.display import Framebuffer
from chip8_tracer.arch.chip8.keypad import Keypad

# @intent:data_structure 命令実行に必要な、レジスタとメモリ以外の周辺装置をまとめます。
class Peripherals(NamedTuple):
    framebuffer: Framebuffer
    keypad: Keypad
    random_byte: Callable[[], int]

# @intent:utility_function メモリから16ビット命令ワードをビッグエンディアン形式で読み込みます。
def read_word(bus: Memory, addr: int) -> int:
    """Big-endian 16-bit read."""
    return (bus.read_byte(addr) << 8) | bus.read_byte((addr + 1) & 0xFFFF)

# @intent:utility_function 命令ワードから、デコード/実行テーブルを引くためのキーを求めます。
# @intent:rationale ファミリーごとにサブオペコードの位置が異なるため、それ以外のビット（オペランド）をマスクします。
def opcode_key(word: int) -> int:
    family = word & 0xF000
    if family == 0x0000:
        return word
    if family in (0x5000, 0x8000, 0x9000):
        return word & 0xF00F
    if family in (0xE000, 0xF000):
        return word & 0xF0FF
    return family

# --- オペランドフィールドの抽出 ---
def field_x(word: int) -> int:
    return (word >> 8) & 0xF

def field_y(word: int) -> int:
    return (word >> 4) & 0xF

def field_n(word: int) -> int:
    return word & 0xF

def field_nn(word: int) -> int:
    return word & 0xFF

def field_nnn(word: int) -> int:
    return word & 0xFFF

# @intent:utility_function 共通書式でOperationを生成します。
def make_operation(word: int, mnemonic: str, operands: List[str], values: List[int]) -> Operation:
    return Operation(f"{word:04X}", mnemonic, operands, values, 1, 2, word)

# --- 書式付きオペランド ---
def fmt_reg(index: int) -> str:
    return f"V{index:X}"

def fmt_byte(value: int) -> str:
    return f"#${value:02X}"

def fmt_addr(value: int) -> str:
    return f"${value:03X}"

# @intent:utility_function PCを次の命令へ進めます。
def next_instruction(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & 0xFFFF

# @intent:utility_function 次の命令を読み飛ばします（PC += 4）。
def skip_next_instruction(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 4) & 0xFFFF

# @intent:utility_function 条件に応じてスキップまたは次の命令へ進みます。
def skip_if(state: Chip8CpuState, condition: bool) -> None:
    if condition:
        skip_next_instruction(state)
    else:
        next_instruction(state)
