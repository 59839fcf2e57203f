import logging
import os
from typing import Dict, Optional
from rogue_byte.common.types import GridPos
from rogue_byte.core.page import EndOfLevel, Message, Page, SetProgramCounter, Trigger
from rogue_byte.game.state import PLAYER_VALUE, GameState
from rogue_byte.memory.bytegrid import ByteGrid
from rogue_byte.memory.encoding import Encoding
from .loader import ConfigLoader, LevelFormatError, parse_int
from .models import GameRules, LevelConfig, TriggerConfig

logger = logging.getLogger(__name__)

LEVEL_DOCUMENT = "level.yaml"
PAGE_SUFFIX = ".txt"

# @intent:responsibility レベル定義（単一グリッドファイルまたはフォルダ）から、ページとルールを揃えたGameStateを構築します。
class LevelBuilder:
    def __init__(self, encoding_dir: str = ""):
        # 文字セットファイルの探索ディレクトリは明示的に渡す
        self._encoding_dir = encoding_dir

    def load_level(self, path: str) -> GameState:
        if os.path.isdir(path):
            return self.load_folder(path)
        return self.load_file(path)

    def load_file(self, path: str, rules: Optional[GameRules] = None, encoding: str = "437") -> GameState:
        grid = ByteGrid.load(path, self._resolve_encoding(encoding, os.path.dirname(path)))
        return GameState.from_grid(grid, rules)

    def load_folder(self, folder: str) -> GameState:
        document = os.path.join(folder, LEVEL_DOCUMENT)
        if os.path.exists(document):
            config = ConfigLoader().load_from_file(document)
        else:
            config = LevelConfig()
        return self.build_level(config, folder)

    def build_level(self, config: LevelConfig, folder: str) -> GameState:
        encoding = self._resolve_encoding(config.encoding, folder)
        page_files = config.pages or self._discover_pages(folder)
        if not page_files:
            raise LevelFormatError(f"No page files found in {folder}")
        if config.start_page not in page_files:
            raise LevelFormatError(f"Start page {config.start_page} has no grid file")

        grids: Dict[int, ByteGrid] = {}
        for page_id, file_name in page_files.items():
            grids[page_id] = ByteGrid.load(os.path.join(folder, file_name), encoding)

        start = grids[config.start_page].find(PLAYER_VALUE) or GridPos(0, 0)
        pages = {page_id: Page.from_grid(grid) for page_id, grid in grids.items()}
        pages[config.start_page].memory[start] = 0

        state = GameState(pages, config.rules, config.start_page, start)
        self.apply_triggers(state, config.rules)
        return state

    # @intent:responsibility ルールで定義された追加トリガーを各ページに登録します。
    def apply_triggers(self, state: GameState, rules: GameRules) -> None:
        for page_id, configs in rules.triggers.items():
            if page_id not in state.pages:
                logger.warning("Triggers configured for unknown page %d are ignored", page_id)
                continue
            page = state.page(page_id)
            for trigger_config in configs:
                page.add_trigger(self._make_trigger(trigger_config))

    def _make_trigger(self, config: TriggerConfig) -> Trigger:
        if config.effect == "set_pc":
            effect = SetProgramCounter(config.address)
        elif config.effect == "end_of_level":
            effect = EndOfLevel()
        elif config.effect == "message":
            effect = Message(config.text)
        else:
            raise LevelFormatError(f"Unknown trigger effect '{config.effect}'")
        return Trigger(GridPos(*config.position), effect, one_time=config.one_time)

    def _discover_pages(self, folder: str) -> Dict[int, str]:
        pages = {}
        for name in sorted(os.listdir(folder)):
            stem, ext = os.path.splitext(name)
            if ext != PAGE_SUFFIX:
                continue
            try:
                page_id = parse_int(stem)
            except LevelFormatError:
                logger.debug("Skipping %s: file name is not a page id", name)
                continue
            pages[page_id & 0xFF] = name
        return pages

    def _resolve_encoding(self, name: str, folder: str) -> Encoding:
        if name in Encoding.BUILTIN:
            return Encoding.cp437()
        if os.path.isabs(name):
            return Encoding.load(name)
        return Encoding.get(name, self._encoding_dir or folder)
