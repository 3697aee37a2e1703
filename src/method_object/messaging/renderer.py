import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from .bus import Message, MessageStore

LOG_LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
}


def level_value(level: str) -> int:
    # Unknown names behave like INFO.
    return LOG_LEVELS.get(level.upper(), LOG_LEVELS["INFO"])


class LevelFilteredRenderer:
    """Writes one line per message at or above `min_level` to `stream`."""

    def __init__(self, stream: Optional[TextIO] = None, min_level: str = "INFO"):
        self.stream = stream
        self.min_level = level_value(min_level)

    def enabled(self, level: str) -> bool:
        return level_value(level) >= self.min_level

    def render(self, message: Message) -> None:
        if self.enabled(message.level):
            # Resolved late so that pytest's capsys and CliRunner see the output.
            print(self.format(message), file=self.stream or sys.stderr)

    def format(self, message: Message) -> str:
        raise NotImplementedError


def _humanize(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value) or "-"
    return value


class CliRenderer(LevelFilteredRenderer):
    """Human text, from the templates of `store`."""

    def __init__(
        self,
        store: MessageStore,
        stream: Optional[TextIO] = None,
        min_level: str = "INFO",
    ):
        super().__init__(stream, min_level)
        self.store = store

    def format(self, message: Message) -> str:
        fields = {key: _humanize(value) for key, value in message.data.items()}
        return self.store.get(message.msg_id, **fields)


class JsonRenderer(LevelFilteredRenderer):
    """
    One JSON object per line. The definition and call a message belongs to
    are lifted to the top level so records can be grouped per call; values
    that aren't JSON serializable are written as their repr.
    """

    def format(self, message: Message) -> str:
        data = dict(message.data)
        record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": message.level.upper(),
            "message_id": message.msg_id,
            "definition": data.pop("definition_name", None),
            "call_id": data.pop("call_id", None),
            "data": data,
        }
        return json.dumps(record, default=repr)
