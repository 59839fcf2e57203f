import logging
import yaml
from enum import Enum
from typing import Any, Dict, List, Type
from .models import (
    DEFAULT_PAGE, GameRules, LevelConfig, RotationRule, TriggerConfig, WrapMode,
)

logger = logging.getLogger(__name__)

TRIGGER_EFFECTS = ("set_pc", "end_of_level", "message")

class LevelFormatError(ValueError):
    pass

def parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise LevelFormatError(f"Invalid integer format: {value}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        except ValueError:
            pass
    raise LevelFormatError(f"Invalid integer format: {value}")

# @intent:utility_function YAMLの値がマッピングであることを確認します。未指定 (None) は空のマッピング。
def _mapping(value: Any, what: str) -> Dict[Any, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LevelFormatError(f"{what} must be a mapping, got {type(value).__name__}")
    return value

class ConfigLoader:
    def load_from_file(self, path: str) -> LevelConfig:
        with open(path, 'r', encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise LevelFormatError(f"Invalid level document {path}: {e}") from e
        return self.parse(data or {})

    def parse(self, data: Dict[str, Any]) -> LevelConfig:
        data = _mapping(data, "Level document")

        pages = {}
        for page_id, file_name in _mapping(data.get("pages"), "pages").items():
            pages[parse_int(page_id) & 0xFF] = str(file_name)

        return LevelConfig(
            start_page=parse_int(data.get("start_page", DEFAULT_PAGE)) & 0xFF,
            encoding=str(data.get("encoding", "437")),
            pages=pages,
            rules=self.parse_rules(data.get("rules")),
        )

    def parse_rules(self, data: Any) -> GameRules:
        data = _mapping(data, "rules")
        defaults = GameRules()
        offset = parse_int(data.get("player_offset", defaults.player_offset))
        if not 0 <= offset <= 7:
            raise LevelFormatError(f"player_offset must be in 0..7, got {offset}")

        triggers: Dict[int, List[TriggerConfig]] = {}
        for page_id, entries in _mapping(data.get("triggers"), "triggers").items():
            if entries is None:
                entries = []
            if not isinstance(entries, list):
                raise LevelFormatError(f"Triggers for page {page_id} must be a list")
            triggers[parse_int(page_id) & 0xFF] = [self._parse_trigger(entry) for entry in entries]

        return GameRules(
            wrap_mode=self._parse_enum(WrapMode, data.get("wrap_mode"), defaults.wrap_mode),
            page_rotation=self._parse_enum(RotationRule, data.get("page_rotation"), defaults.page_rotation),
            page_switching=bool(data.get("page_switching", defaults.page_switching)),
            reset_registers_on_trigger=bool(
                data.get("reset_registers_on_trigger", defaults.reset_registers_on_trigger)),
            player_offset=offset,
            triggers=triggers,
        )

    def _parse_trigger(self, data: Any) -> TriggerConfig:
        if not isinstance(data, dict):
            raise LevelFormatError(f"Trigger entry must be a mapping, got {data!r}")
        position = data.get("position")
        if not isinstance(position, (list, tuple)) or len(position) != 2:
            raise LevelFormatError(f"Trigger position must be [x, y], got {position!r}")
        effect = str(data.get("effect", "set_pc")).lower()
        if effect not in TRIGGER_EFFECTS:
            raise LevelFormatError(f"Unknown trigger effect '{effect}'")
        return TriggerConfig(
            position=(parse_int(position[0]) & 0xFF, parse_int(position[1]) & 0xFF),
            effect=effect,
            address=parse_int(data.get("address", 0)) & 0xFFFF,
            text=str(data.get("text", "")),
            one_time=bool(data.get("one_time", True)),
        )

    def _parse_enum(self, enum_cls: Type[Enum], value: Any, default: Enum) -> Enum:
        if value is None:
            return default
        try:
            return enum_cls(str(value).upper())
        except ValueError:
            logger.warning("Unknown %s '%s', defaulting to %s", enum_cls.__name__, value, default.value)
            return default
