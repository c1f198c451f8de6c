from typing import Optional
from dataclasses import dataclass, field

ERROR_POLICIES = ("halt", "skip")

@dataclass
class MachineConfig:
    cpu_hz: int = 600     # 1秒あたりの命令実行数
    timer_hz: int = 60    # タイマー減算と再描画のレート
    on_error: str = "halt"  # "halt", "skip"
    random_seed: Optional[int] = None

    # 1回のタイマー減算あたりに実行する命令数
    @property
    def steps_per_frame(self) -> int:
        return max(1, self.cpu_hz // self.timer_hz)

@dataclass
class CpuInitialState:
    pc: int = 0x200
    i: int = 0x000
    registers: dict = field(default_factory=dict)  # 例: {"v0": 0x12}

@dataclass
class SystemConfig:
    machine: MachineConfig = field(default_factory=MachineConfig)
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
