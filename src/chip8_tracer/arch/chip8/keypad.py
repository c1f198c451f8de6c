# src/chip8_tracer/arch/chip8/keypad.py
"""
16キー入力デバイスのスナップショット。
"""
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

KEY_COUNT = 16

# @intent:responsibility ホストが所有する16キーの押下状態を、不変のスナップショットとして保持します。
# @intent:rationale 1回のstep()の間に入力が変化しないよう、コアには常に不変の値を渡します。
@dataclass(frozen=True)
class Keypad:
    keys: Tuple[bool, ...] = (False,) * KEY_COUNT

    def __post_init__(self):
        if len(self.keys) != KEY_COUNT:
            raise ValueError(f"Keypad requires exactly {KEY_COUNT} keys, got {len(self.keys)}.")

    # @intent:responsibility 押下中のキー番号の集合からスナップショットを生成します。
    @classmethod
    def from_pressed(cls, pressed: Iterable[int]) -> 'Keypad':
        keys = [False] * KEY_COUNT
        for key in pressed:
            if not 0 <= key < KEY_COUNT:
                raise ValueError(f"Key index {key} is outside 0x0-0xF.")
            keys[key] = True
        return cls(tuple(keys))

    # @intent:responsibility 指定キーの状態だけを変更した新しいスナップショットを返します。
    def with_key(self, key: int, pressed: bool) -> 'Keypad':
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key index {key} is outside 0x0-0xF.")
        keys = list(self.keys)
        keys[key] = pressed
        return replace(self, keys=tuple(keys))

    # レジスタ値は8ビットなので、下位4ビットでキーを選択する
    def is_pressed(self, key: int) -> bool:
        return self.keys[key & 0xF]

    # @intent:responsibility 押下中の最小番号のキーを返します。無ければNone。
    def first_pressed(self) -> Optional[int]:
        for index, pressed in enumerate(self.keys):
            if pressed:
                return index
        return None
