# chip8_tracer/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（レジスタ群）を保持するデータ構造を定義します。
"""
import copy
from dataclasses import dataclass

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    これは抽象的な基底状態であり、特定のCPUアーキテクチャに応じて拡張されます。
    """
    pc: int = 0x0000  # Program Counter

    # @intent:responsibility 状態の完全な複製を返します。
    # @intent:rationale 派生クラスはリストなどの可変フィールドを持つため、浅いコピーではSnapshotが後続の実行で変化してしまう。
    def clone(self) -> 'CpuState':
        return copy.deepcopy(self)
