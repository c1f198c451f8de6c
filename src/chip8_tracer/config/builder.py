import logging
import re
from typing import Tuple

from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.cpu import Chip8Cpu, default_random_source
from chip8_tracer.debugger.debugger import Debugger, ErrorPolicy
from .models import SystemConfig, CpuInitialState

logger = logging.getLogger(__name__)

_V_REGISTER = re.compile(r"^v([0-9a-f])$")

# @intent:responsibility システム構成（Config）に基づいて、Memory、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[Chip8Cpu, Memory]:
        memory = Memory()

        random_byte = None
        if config.machine.random_seed is not None:
            random_byte = default_random_source(config.machine.random_seed)

        cpu = Chip8Cpu(memory, random_byte=random_byte)

        # 初期状態の適用
        self.apply_initial_state(cpu, config.initial_state)

        return cpu, memory

    # @intent:responsibility Configで指定されたエラー方針とフレームサイズでデバッガを生成します。
    def build_debugger(self, cpu: Chip8Cpu, config: SystemConfig) -> Debugger:
        return Debugger(
            cpu,
            on_error=ErrorPolicy(config.machine.on_error),
            steps_per_frame=config.machine.steps_per_frame
        )

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: Chip8Cpu, config_state: CpuInitialState):
        """
        CPUをリセットし、Configから指定された初期値を適用します。
        未知のレジスタ名は警告を出して無視します。
        """
        cpu.reset()
        state = cpu.get_state()

        state.pc = config_state.pc & 0xFFFF
        state.i = config_state.i & 0xFFFF
        for reg_name, value in config_state.registers.items():
            match = _V_REGISTER.match(reg_name.lower())
            if match:
                state.v[int(match.group(1), 16)] = value & 0xFF
            else:
                logger.warning("Unknown register '%s' in initial state, ignored.", reg_name)
