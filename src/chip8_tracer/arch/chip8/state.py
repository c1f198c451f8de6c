# src/chip8_tracer/arch/chip8/state.py
"""
CHIP-8 固有の状態定義。

レジスタファイル（V0-VF, I, PC）、コールスタック、2つのカウントダウンタイマーを保持します。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_tracer.core.state import CpuState
from chip8_tracer.common.errors import StackOverflow, StackUnderflow

# @intent:constant レジスタ数、スタック深さ、フラグレジスタの番号。
REGISTER_COUNT = 16
STACK_DEPTH = 16
VF = 0xF

# @intent:responsibility 固定深さの戻りアドレススタックを保持します。
@dataclass
class CallStack:
    """
    16段の戻りアドレススタック。pointerは次の空きスロットを指します（0-16）。
    """
    entries: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    pointer: int = 0

    # @intent:pre-condition pointer < 16。満杯の場合は何も変更せずにStackOverflowを送出します。
    def push(self, address: int) -> None:
        if self.pointer >= STACK_DEPTH:
            raise StackOverflow(address, STACK_DEPTH)
        self.entries[self.pointer] = address & 0xFFFF
        self.pointer += 1

    # @intent:pre-condition pointer > 0。空の場合は何も変更せずにStackUnderflowを送出します。
    def pop(self) -> int:
        if self.pointer == 0:
            raise StackUnderflow()
        self.pointer -= 1
        return self.entries[self.pointer]

    def __len__(self) -> int:
        return self.pointer

# @intent:responsibility 遅延タイマーとサウンドタイマーを保持します。
# @intent:rationale 減算は命令実行とは独立した固定レート（60Hz相当）で行われるため、tick()はホストから呼ばれます。
@dataclass
class Timers:
    delay: int = 0
    sound: int = 0

    def tick(self) -> None:
        """両タイマーを1ずつ減算します。0で飽和し、負にはなりません。"""
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    # サウンドタイマーが非ゼロの間はトーンを鳴らす
    @property
    def tone_active(self) -> bool:
        return self.sound > 0

# @intent:responsibility CHIP-8 CPUの全ての状態（V0-VF, I, PC, スタック, タイマー）を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8のレジスタ状態を保持するデータクラス。
    VFは加算・減算・シフト・描画命令のフラグ出力として上書きされます。
    """
    pc: int = 0x200
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x000
    stack: CallStack = field(default_factory=CallStack)
    timers: Timers = field(default_factory=Timers)

    # @intent:accessor フラグレジスタ(VF)への読み書きを提供します。
    @property
    def vf(self) -> int:
        return self.v[VF]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[VF] = value & 0xFF

    @property
    def sp(self) -> int:
        return self.stack.pointer
