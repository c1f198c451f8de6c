# src/chip8_tracer/arch/chip8/display.py
"""
64x32 モノクロフレームバッファ。
"""
from typing import Tuple

WIDTH = 64
HEIGHT = 32

# @intent:responsibility 1ビットのピクセルグリッドと、再描画要求を示すダーティフラグを保持します。
class Framebuffer:
    """
    行優先(row-major)の64x32ピクセルグリッド。
    座標のラップアラウンドは呼び出し側（描画命令）の責務です。
    """
    def __init__(self):
        self._cells = bytearray(WIDTH * HEIGHT)
        self._dirty = False

    # @intent:responsibility 全ピクセルを消去し、ダーティフラグを立てます。
    def clear(self) -> None:
        self._cells[:] = bytes(WIDTH * HEIGHT)
        self._dirty = True

    # @intent:responsibility 電源投入直後の状態（全消去、ダーティフラグなし）に戻します。
    def reset(self) -> None:
        self._cells[:] = bytes(WIDTH * HEIGHT)
        self._dirty = False

    # @intent:responsibility 指定セルを反転し、反転前の値を返します（衝突検出用）。
    # @intent:pre-condition 0 <= row < 32, 0 <= col < 64。
    def xor_pixel(self, row: int, col: int) -> bool:
        if not (0 <= row < HEIGHT and 0 <= col < WIDTH):
            raise IndexError(f"Pixel ({row}, {col}) outside {WIDTH}x{HEIGHT} framebuffer.")
        index = row * WIDTH + col
        previous = self._cells[index]
        self._cells[index] = previous ^ 1
        return previous == 1

    def get_pixel(self, row: int, col: int) -> bool:
        return self._cells[row * WIDTH + col] == 1

    # @intent:responsibility ダーティフラグを立てます。描画命令の完了時に呼ばれます。
    def mark_dirty(self) -> None:
        self._dirty = True

    def is_dirty(self) -> bool:
        return self._dirty

    # ホストがフレームを消費した後に呼ぶ
    def clear_dirty(self) -> None:
        self._dirty = False

    # @intent:responsibility ホストの描画用に、現在のピクセルグリッドの不変コピーを返します。
    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        """行ごとのタプル（各要素は0または1）を返します。"""
        return tuple(
            tuple(self._cells[row * WIDTH:(row + 1) * WIDTH])
            for row in range(HEIGHT)
        )
