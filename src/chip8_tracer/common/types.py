"""
共通の型定義を提供するモジュール。
レジスタの検査・表示用レイアウトなど、複数のレイヤーで使用される型を定義します。
"""
from typing import List, NamedTuple

# @intent:data_structure 単一のレジスタの表示定義。ホスト側が動的にフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "General", "Pointers"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
