# src/chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用しますが、アクセスログを汚さないように
peek（ログなし読み込み）のみを使用します。
"""
from typing import List, Tuple

from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを逆アセンブルします。
    length はバイト数です。命令は2バイト単位で解釈されます。

    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = min(start_addr + length, bus.get_size())

    # 末尾に1バイトだけ残る場合は命令として解釈しない
    while current_addr + 1 < end_addr:
        word = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        operation = decode_opcode(word)

        if operation.mnemonic == "UNKNOWN":
            # 命令として解釈できないワード（スプライトデータなど）
            mnemonic_str = f"DW #{word:04X}"
        else:
            mnemonic_str = operation.mnemonic
            if operation.operands:
                mnemonic_str += " " + ", ".join(operation.operands)

        result.append((current_addr, operation.opcode_hex, mnemonic_str))
        current_addr += operation.length

    return result
