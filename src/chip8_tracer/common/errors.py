"""
エラー分類を定義するモジュール。

コアが検出した異常は全てこの階層の例外として呼び出し元に送出されます。
コア内部でプロセスを終了させたり、例外を握りつぶしたりすることはありません。
回復方針（停止、スキップ、診断表示）はホスト側が決定します。
"""

# @intent:responsibility 全てのCHIP-8コア例外の基底クラスです。
class Chip8Error(Exception):
    """CHIP-8コアが送出する例外の基底クラス。"""


# @intent:responsibility どのデコード規則にも一致しない命令ワードを表します。
class UnsupportedOpcode(Chip8Error):
    def __init__(self, word: int, pc: int):
        self.word = word
        self.pc = pc
        super().__init__(f"Unsupported opcode {word:#06x} at PC {pc:#05x}.")


# @intent:responsibility 満杯のコールスタックへのプッシュを表します。
class StackOverflow(Chip8Error):
    def __init__(self, address: int, depth: int):
        self.address = address
        self.depth = depth
        super().__init__(f"Call stack overflow pushing {address:#05x} (depth {depth}).")


# @intent:responsibility 空のコールスタックからのポップを表します。
class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("Call stack underflow: return with an empty stack.")


# @intent:responsibility 4KBアドレス空間外へのアクセスを表します。
# @intent:rationale 既存の境界チェック（IndexError）を捕捉するコードとの互換性のため、IndexErrorも継承します。
class AddressOutOfRange(Chip8Error, IndexError):
    def __init__(self, address: int, size: int):
        self.address = address
        self.size = size
        super().__init__(f"Address {address:#06x} out of range for memory of size {size:#06x}.")


# @intent:responsibility プログラム領域に収まらないROMイメージを表します。
class RomTooLarge(Chip8Error, ValueError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM of {size} bytes exceeds the {limit}-byte program area.")
