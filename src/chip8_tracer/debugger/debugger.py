# chip8_tracer/debugger/debugger.py
"""
デバッガモジュール。

コアエンジンの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。
コアが送出したエラーに対する回復方針（停止またはスキップ）もこの層で適用します。
"""
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, List, Optional

from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.core.snapshot import Snapshot, BusAccessType
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.keypad import Keypad

logger = logging.getLogger(__name__)

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility コアが送出したエラーに対するホスト側の回復方針。
class ErrorPolicy(Enum):
    HALT = "halt"  # 実行を停止し、エラーを保持する
    SKIP = "skip"  # ログに記録し、問題の命令を読み飛ばして継続する

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    register_name は Chip8Cpu.get_register_map() のキー（"V0", "I", "DT" など）です。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True                  # 有効/無効状態

# @intent:responsibility コアエンジンの実行制御、ブレークポイント管理、エラー方針の適用を行います。
class Debugger:
    """
    CPUの実行を制御し、ブレークポイントの管理を行うクラス。
    run_frame() はホストの60Hzループ1回分（命令をsteps_per_frame回実行し、タイマーを1回減算）に相当します。
    """
    def __init__(self, cpu: Chip8Cpu, on_error: ErrorPolicy = ErrorPolicy.HALT,
                 steps_per_frame: int = 10, history_limit: int = 1000):
        if steps_per_frame <= 0:
            raise ValueError("steps_per_frame must be a positive integer.")
        self._cpu = cpu
        self._on_error = on_error
        self._steps_per_frame = steps_per_frame
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._halted: bool = False
        self._last_error: Optional[Chip8Error] = None
        self._previous_registers: Dict[str, int] = self._cpu.get_register_map()
        self._last_snapshot: Optional[Snapshot] = None
        # @intent:responsibility 直近の実行履歴を保持します。
        self._history: Deque[Snapshot] = deque(maxlen=history_limit)

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    @property
    def last_error(self) -> Optional[Chip8Error]:
        return self._last_error

    def is_halted(self) -> bool:
        return self._halted

    # @intent:responsibility エラーによる停止状態を解除します。
    def resume(self) -> None:
        self._halted = False
        self._last_error = None

    def stop(self) -> None:
        self._running = False

    def _is_pc_breakpoint(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    def _check_other_breakpoints(self, snapshot: Snapshot, registers: Dict[str, int]) -> bool:
        """
        Snapshotに基づいてPC_MATCH以外のブレークポイントをチェックします。
        """
        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.READ and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.WRITE and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name in registers and registers[bp.register_name] == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                name = bp.register_name
                if name in registers and name in self._previous_registers:
                    if registers[name] != self._previous_registers[name]:
                        return True
        return False

    def step_instruction(self, keypad: Optional[Keypad] = None) -> Snapshot:
        """
        CPUを1命令分実行し、その結果のSnapshotを返します。
        コアのエラーはそのまま呼び出し元へ送出されます。
        """
        snapshot = self._cpu.step(keypad)
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    # @intent:responsibility エラー方針を適用しながら1命令実行します。
    # @intent:return 実行されたSnapshot。スキップまたは停止した場合はNone。
    def _guarded_step(self, keypad: Optional[Keypad]) -> Optional[Snapshot]:
        try:
            return self.step_instruction(keypad)
        except Chip8Error as e:
            # 次の命令がフェッチ可能範囲外になる場合（メモリ末尾での失敗を含む）は読み飛ばさずに停止する
            if self._on_error == ErrorPolicy.SKIP and self._cpu.can_skip_instruction():
                logger.warning("Skipping instruction at PC %#05x: %s", self._cpu.get_state().pc, e)
                self._cpu.skip_instruction()
                return None
            logger.error("Halting at PC %#05x: %s", self._cpu.get_state().pc, e)
            self._last_error = e
            self._halted = True
            self._running = False
            return None

    def run(self, max_steps: Optional[int] = None, keypad: Optional[Keypad] = None) -> int:
        """
        CPUの実行を継続します。
        ブレークポイント、stop()、エラーによる停止、または max_steps 到達で戻ります。
        実行した命令数を返します。
        """
        if self._halted:
            return 0
        self._running = True
        executed = 0

        while self._running and (max_steps is None or executed < max_steps):
            current_pc = self._cpu.get_state().pc
            # 開始位置のブレークポイントでは停止しない（ブレークポイントからの再開を可能にする）
            if executed > 0 and self._is_pc_breakpoint(current_pc):
                logger.info("Breakpoint hit at PC: %#05x", current_pc)
                break

            self._previous_registers = self._cpu.get_register_map()
            snapshot = self._guarded_step(keypad)
            executed += 1
            if snapshot is None:
                continue

            if self._check_other_breakpoints(snapshot, self._cpu.get_register_map()):
                logger.info("Breakpoint hit at PC: %#05x", snapshot.state.pc)
                break

        self._running = False
        return executed

    # @intent:responsibility ホストの固定レートループ1回分を実行します。
    # @intent:rationale 命令実行レートとタイマー減算レートを分離するため、タイマーは命令数によらず1回だけ減算します。
    def run_frame(self, keypad: Optional[Keypad] = None) -> bool:
        """
        steps_per_frame 個の命令を実行した後、タイマーを1回減算します。
        停止中の場合は何もしません。フレームバッファのダーティフラグを返します。
        """
        if self._halted:
            return self._cpu.framebuffer.is_dirty()

        for _ in range(self._steps_per_frame):
            self._guarded_step(keypad)
            if self._halted:
                return self._cpu.framebuffer.is_dirty()

        self._cpu.tick_timers()
        return self._cpu.framebuffer.is_dirty()
