# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 インタプリタコアの中心モジュール。
"""
import logging
import random
from typing import Callable, Dict, List, Optional, Tuple

from chip8_tracer.common.errors import AddressOutOfRange
from chip8_tracer.core.snapshot import Operation, Snapshot
from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.state import Chip8CpuState, REGISTER_COUNT
from chip8_tracer.arch.chip8.display import Framebuffer
from chip8_tracer.arch.chip8.keypad import Keypad
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction
from chip8_tracer.arch.chip8.instructions.base import Peripherals, read_word
from chip8_tracer.arch.chip8 import disassembler

logger = logging.getLogger(__name__)

RandomSource = Callable[[], int]

# @intent:utility_function 乱数源が注入されなかった場合の既定の乱数源を生成します。
def default_random_source(seed: Optional[int] = None) -> RandomSource:
    rng = random.Random(seed)
    return lambda: rng.randrange(256)

# @intent:responsibility CHIP-8の具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 仮想マシンをエミュレートするクラス。

    メモリ、レジスタ、スタック、タイマー、フレームバッファを所有します。
    キーパッドはホストが所有し、step()ごとに不変のスナップショットとして渡されます。
    タイマーはstep()では減算されず、ホストが固定レートでtick_timers()を呼び出します。
    """
    # @intent:responsibility Chip8Cpuを初期化します。
    # @intent:pre-condition random_byteは0-255の整数を返す呼び出し可能オブジェクトである必要があります。
    def __init__(self, bus: Memory, random_byte: Optional[RandomSource] = None):
        self._framebuffer = Framebuffer()
        self._keypad = Keypad()
        self._random_byte = random_byte or default_random_source()
        super().__init__(bus)

    # @intent:responsibility CHIP-8の初期状態（PC=0x200, その他は0）を生成します。
    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility レジスタ、スタック、タイマー、フレームバッファを初期化します。メモリは保持されます。
    def reset(self) -> None:
        super().reset()
        self._framebuffer.reset()
        logger.debug("CHIP-8 core reset, PC=%#05x.", self._state.pc)

    # @intent:responsibility ROMイメージをロードし、実行可能な初期状態に戻します。
    # @intent:post-condition RomTooLargeの場合、メモリと状態は変更されません。
    def load_program(self, rom: bytes) -> None:
        self._bus.load_program(rom)
        self.reset()

    # @intent:responsibility 次回以降のstep()で参照するキーパッドのスナップショットを設定します。
    def set_keypad(self, keypad: Keypad) -> None:
        self._keypad = keypad

    def get_keypad(self) -> Keypad:
        return self._keypad

    @property
    def framebuffer(self) -> Framebuffer:
        return self._framebuffer

    @property
    def memory(self) -> Memory:
        return self._bus

    # @intent:responsibility サウンドタイマーが非ゼロの間、ホストにトーン再生を要求します。
    @property
    def tone_active(self) -> bool:
        return self._state.timers.tone_active

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1ずつ減算します（60Hz相当でホストが呼び出す）。
    def tick_timers(self) -> None:
        self._state.timers.tick()

    # @intent:responsibility 1命令を実行します。keypadが与えられた場合、そのスナップショットを使用します。
    def step(self, keypad: Optional[Keypad] = None) -> Snapshot:
        """
        1命令のフェッチ・デコード・実行を行い、Snapshotを返します。
        エラー（UnsupportedOpcode, StackOverflow など）は状態を変更せずに送出されます。
        """
        if keypad is not None:
            self._keypad = keypad
        return super().step()

    # @intent:responsibility PCとPC+1から命令ワードをビッグエンディアンでフェッチします。
    def _fetch(self) -> int:
        return read_word(self._bus, self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        io = Peripherals(self._framebuffer, self._keypad, self._random_byte)
        execute_instruction(operation, self._state, self._bus, io)

    # @intent:responsibility 現在の命令を実行せずに読み飛ばします（ホストのエラー回復用）。
    # @intent:pre-condition can_skip_instruction()がTrueであること。満たさない場合はPCを変更せずにAddressOutOfRangeを送出します。
    def skip_instruction(self) -> None:
        if not self.can_skip_instruction():
            raise AddressOutOfRange(self._state.pc + 2, self._bus.get_size())
        self._state.pc += 2

    # @intent:responsibility 次の命令ワード（PC+2, PC+3）がアドレス空間内でフェッチ可能かを返します。
    def can_skip_instruction(self) -> bool:
        return self._state.pc + 3 < self._bus.get_size()

    # @intent:responsibility ホスト表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.timers.delay, "ST": s.timers.sound
        })
        return registers

    # @intent:responsibility レジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [
                RegisterInfo(f"V{index:X}", 8) for index in range(REGISTER_COUNT)
            ]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility フラグ出力(VF)とトーン要求の状態を提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        return {"VF": self._state.vf != 0, "TONE": self.tone_active}

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
