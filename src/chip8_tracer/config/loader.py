import yaml
from typing import Dict, Any
from .models import SystemConfig, MachineConfig, CpuInitialState, ERROR_POLICIES

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        # Parse Machine
        machine_data = data.get("machine", {}) or {}
        cpu_hz = self._parse_int(machine_data.get("cpu_hz", 600))
        timer_hz = self._parse_int(machine_data.get("timer_hz", 60))
        if cpu_hz <= 0 or timer_hz <= 0:
            raise ValueError(f"cpu_hz and timer_hz must be positive: cpu_hz={cpu_hz}, timer_hz={timer_hz}")

        on_error = str(machine_data.get("on_error", "halt")).lower()
        if on_error not in ERROR_POLICIES:
            raise ValueError(f"Unknown error policy '{on_error}', expected one of {ERROR_POLICIES}")

        seed = machine_data.get("random_seed")
        machine = MachineConfig(
            cpu_hz=cpu_hz,
            timer_hz=timer_hz,
            on_error=on_error,
            random_seed=self._parse_int(seed) if seed is not None else None
        )

        # Parse Initial State
        initial_state_data = data.get("initial_state", {}) or {}
        registers = {
            str(name).lower(): self._parse_int(value)
            for name, value in (initial_state_data.get("registers", {}) or {}).items()
        }
        initial_state = CpuInitialState(
            pc=self._parse_int(initial_state_data.get("pc", 0x200)),
            i=self._parse_int(initial_state_data.get("i", 0)),
            registers=registers
        )

        return SystemConfig(machine=machine, initial_state=initial_state)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
