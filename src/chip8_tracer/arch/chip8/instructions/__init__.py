# src/chip8_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from chip8_tracer.common.errors import UnsupportedOpcode
from chip8_tracer.transport.memory import Memory
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Peripherals, opcode_key
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility CHIP-8の命令ワードをデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    命令ワードをデコードし、Operationオブジェクトを返します。
    未定義の命令ワードはニーモニック"UNKNOWN"のOperationとして返され、実行時にエラーとなります。
    """
    decoder = DECODE_MAP.get(opcode_key(opcode))
    if decoder:
        return decoder(opcode)
    return Operation(opcode_hex=f"{opcode:04X}", mnemonic="UNKNOWN", operands=[f"#${opcode:04X}"], cycle_count=1, length=2, opcode=opcode)

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:post-condition 未定義の命令の場合、状態を変更せずにUnsupportedOpcodeを送出します。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Memory, io: Peripherals) -> None:
    word = operation.opcode
    executor = EXECUTE_MAP.get(opcode_key(word))
    if executor is None:
        raise UnsupportedOpcode(word, state.pc)
    executor(state, bus, operation, io)
