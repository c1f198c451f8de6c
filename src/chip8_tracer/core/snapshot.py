# chip8_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、CPUとメモリアクセスの状態を記録した不変のデータ構造を定義します。
ホストへの情報提供と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.memory import BusAccessType, BusAccess


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "8124"
    mnemonic: str # 例: "ADD"
    operands: List[str] = field(default_factory=list) # 例: ["V1", "V2"]
    operand_bytes: List[int] = field(default_factory=list) # デコード済みのオペランド値 (X, Y, N など)
    cycle_count: int = 1 # 命令実行に必要なサイクル数
    length: int = 2 # 命令のバイト長
    opcode: int = 0 # 生の命令ワード（実行テーブルの参照に使用）

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、表示用の命令文字列など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "DRW V0, V1, 5"

# @intent:responsibility ある一時点におけるCPUとメモリアクセスの状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1命令実行後のCPU状態、実行された命令、およびその命令が発生させたメモリアクセスの記録。
    stateは実行直後の状態の複製であり、後続の実行で変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

__all__ = ["BusAccessType", "BusAccess", "Operation", "Metadata", "Snapshot"]
