# rogue_byte/transport/bus.py
"""
Transport Layer (ページバス)

このモジュールは、CPUから見た16ビットのアドレス空間を、CPUのページレジスタが指す
ページのグリッドへ対応付けます。読み出しはプレイヤーのマーカービットを重ねた実効値、
書き込みは格納値に対して行われます。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from rogue_byte.common.types import ADDRESS_MAX, split_address
from rogue_byte.core.page import Page, PageTable
from rogue_byte.core.player import Player, effective

# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のバスアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class BusAccess:
    """
    バス上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int # 8bit value
    access_type: BusAccessType
    page: int = 0

# @intent:responsibility CPUのアドレス空間を選択中のページへディスパッチし、アクセスを記録します。
# @intent:rationale バスの全てのアクセスを記録し、Snapshotに含めることで1ステップの観測可能性を高めます。
class Bus:
    """
    ページテーブルとプレイヤーへの参照を持つ共通バス。
    選択中のページが未登録の場合はヌルページ（読み出し0、書き込み無視）に委譲されます。
    """
    # @intent:responsibility ページテーブル、プレイヤー、ページ切替ハンドラを受け取り初期化します。
    # @intent:pre-condition page_switch_handler は切替を許可した場合にTrueを返す必要があります。
    def __init__(self, pages: PageTable, player: Player,
                 page_switch_handler: Optional[Callable[[int], bool]] = None):
        self._pages = pages
        self.player = player
        self._page_switch_handler = page_switch_handler
        self._page_id = 0
        self._bus_activity_log: List[BusAccess] = []

    @property
    def page_id(self) -> int:
        return self._page_id

    @property
    def page(self) -> Page:
        return self._pages.get(self._page_id)

    # @intent:responsibility 以降のアクセス対象となるページを選択します。
    def select_page(self, page_id: int) -> None:
        self._page_id = page_id & 0xFF

    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address, data, access_type, self._page_id))

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 実効値（プレイヤーがいればマーカービット付き）をログなしで読み出します。
    def peek(self, address: int) -> int:
        address &= ADDRESS_MAX
        pos = split_address(address)
        here = self.player.at_cell(self._page_id, pos)
        return effective(self.page.memory[address], here, self.player.mask)

    # @intent:responsibility 実効値を読み出し、アクセスを記録します。
    def read(self, address: int) -> int:
        data = self.peek(address)
        self._log_access(address & ADDRESS_MAX, data, BusAccessType.READ)
        return data

    # @intent:responsibility マーカービットを含まない格納値を読み出します（スワップ用）。
    def read_stored(self, address: int) -> int:
        address &= ADDRESS_MAX
        data = self.page.memory[address]
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility 格納値を書き込みます。ヌルページへの書き込みは破棄されます。
    def write(self, address: int, data: int) -> None:
        address &= ADDRESS_MAX
        self.page.memory[address] = data & 0xFF
        self._log_access(address, data & 0xFF, BusAccessType.WRITE)

    # @intent:responsibility ページ切替命令の要求をハンドラへ委譲します。
    # @intent:return 切替が許可されたかどうか。ハンドラ未設定の場合は常に許可。
    def switch_page(self, page_id: int) -> bool:
        if self._page_switch_handler is None:
            return True
        return self._page_switch_handler(page_id & 0xFF)
