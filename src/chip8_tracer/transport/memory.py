# chip8_tracer/transport/memory.py
"""
Transport Layer (メモリ)

このモジュールは、4KBのフラットなアドレス空間を抽象化し、
読み書きアクセスを記録する責務を負います。
グリフセットとROMイメージの配置もこの層が所有します。
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from chip8_tracer.common.errors import AddressOutOfRange, RomTooLarge
from chip8_tracer.transport.glyphs import GLYPH_BASE, GLYPH_SET

logger = logging.getLogger(__name__)

# @intent:constant アドレス空間のサイズとプログラム領域の先頭アドレス。
MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
PROGRAM_LIMIT = MEMORY_SIZE - PROGRAM_START

# @intent:responsibility メモリアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のメモリアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class BusAccess:
    """
    メモリ上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    書き込みの場合、previous_dataに書き込み前の値を保持します。
    """
    address: int
    data: int # 8bit value
    access_type: BusAccessType
    previous_data: Optional[int] = None

# @intent:responsibility 4KBのアドレス空間を管理し、全てのアクセスを記録するメモリ。
# @intent:rationale 全てのアクセスを記録し、Snapshotに含めることでシステムの観測可能性を高めます。
class Memory:
    """
    4KBのバイトストア。
    0x050-0x09Fに組み込みグリフセット、0x200以降にROMイメージを保持します。
    """
    # @intent:responsibility ゼロ初期化したメモリを確保し、グリフセットを配置します。
    def __init__(self):
        self._memory = bytearray(MEMORY_SIZE)
        self._size = MEMORY_SIZE
        self._bus_activity_log: List[BusAccess] = []
        self.load_glyphs()

    def get_size(self) -> int:
        return self._size

    # @intent:responsibility アドレスが有効範囲内であることを検証します。
    def _check_address(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise AddressOutOfRange(address, self._size)

    # @intent:responsibility 連続する領域全体が有効範囲内であることを、書き込み前に検証します。
    # @intent:rationale 複数バイトを書き込む命令が途中で失敗し、中途半端な状態が残ることを防ぎます。
    def check_range(self, address: int, length: int) -> None:
        """
        address から length バイトの領域がアドレス空間に収まっているか検証します。
        収まっていない場合、最初に範囲外となるアドレスでAddressOutOfRangeを送出します。
        """
        if length <= 0:
            return
        self._check_address(address)
        self._check_address(address + length - 1)

    def _log_access(self, address: int, data: int, access_type: BusAccessType,
                    previous_data: Optional[int] = None) -> None:
        self._bus_activity_log.append(
            BusAccess(address=address, data=data, access_type=access_type, previous_data=previous_data)
        )

    # @intent:responsibility 記録されたアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    # @intent:pre-condition アドレスは0x000-0xFFFの範囲内である必要があります。
    def read_byte(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します。
        アクセスはログに記録されます。
        """
        self._check_address(address)
        data = self._memory[address]
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    # @intent:pre-condition アドレスは有効範囲内であり、データは8bit値である必要があります。
    def write_byte(self, address: int, data: int) -> None:
        self._check_address(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        previous = self._memory[address]
        self._memory[address] = data
        self._log_access(address, data, BusAccessType.WRITE, previous)

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します（ログ記録なし）。
        逆アセンブラやデバッガなどのインスペクタ用。
        """
        self._check_address(address)
        return self._memory[address]

    # @intent:responsibility ログを記録せずにデータを書き込むバックドアです。
    def load(self, address: int, data: int) -> None:
        self._check_address(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    # @intent:responsibility 組み込みグリフセットを0x050に配置します。
    def load_glyphs(self) -> None:
        self._memory[GLYPH_BASE:GLYPH_BASE + len(GLYPH_SET)] = GLYPH_SET

    # @intent:responsibility ROMイメージを0x200から配置します。
    # @intent:pre-condition ROMのサイズは 4096 - 0x200 バイト以下である必要があります。
    # @intent:post-condition 失敗時はメモリを一切変更しません。
    def load_program(self, rom: bytes) -> None:
        """
        ROMイメージをプログラム領域に書き込みます。
        プログラム領域は事前にゼロクリアされ、以前にロードされたROMの残骸は残りません。
        """
        data = bytes(rom)
        if len(data) > PROGRAM_LIMIT:
            raise RomTooLarge(len(data), PROGRAM_LIMIT)
        self._memory[PROGRAM_START:] = bytes(PROGRAM_LIMIT)
        self._memory[PROGRAM_START:PROGRAM_START + len(data)] = data
        logger.debug("Loaded %d-byte program at %#05x.", len(data), PROGRAM_START)
