"""
User-facing messages.

The runtime never prints. `HumanReadableLogSubscriber` turns runtime events
into messages identified by an id such as `call.started`; the `Messenger`
hands each one to the installed renderer, which either formats it with the
templates of a `MessageStore` or serializes it as is.

Templates live in `locales/<locale>/*.json`, one flat object of
`message id -> str.format template` per file.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"


class MessageStore:
    def __init__(
        self, locale: str = "en", locales_dir: Union[str, Path] = LOCALES_DIR
    ):
        self.locale = locale
        self._templates: Dict[str, str] = {}
        self.load(Path(locales_dir) / locale)

    def load(self, directory: Path) -> int:
        """Merges every template file of `directory`. Returns how many were read."""
        if not directory.is_dir():
            logger.warning(
                "No message templates for locale %r in %s", self.locale, directory
            )
            return 0

        loaded = 0
        for path in sorted(directory.glob("*.json")):
            try:
                self._templates.update(json.loads(path.read_text(encoding="utf-8")))
            except (OSError, ValueError) as e:
                logger.error("Skipping message file %s: %s", path, e)
                continue
            loaded += 1
        return loaded

    def add(self, msg_id: str, template: str) -> None:
        self._templates[msg_id] = template

    def __contains__(self, msg_id: str) -> bool:
        return msg_id in self._templates

    def get(self, msg_id: str, default: str = "", **kwargs: Any) -> str:
        """
        Formats the template of `msg_id`. Unknown ids render as `<msg_id>`
        and a template missing one of its fields renders as a short
        diagnostic, so a bad template never breaks the call being logged.
        """
        template = self._templates.get(msg_id) or default or f"<{msg_id}>"
        try:
            return template.format(**kwargs)
        except KeyError as e:
            return f"<Formatting error for '{msg_id}': missing key {e}>"


@dataclass(frozen=True)
class Message:
    msg_id: str
    level: str
    data: Dict[str, Any] = field(default_factory=dict)


class Renderer(Protocol):
    def render(self, message: Message) -> None: ...


class Messenger:
    """Routes messages to the installed renderer; silent without one."""

    def __init__(self, store: MessageStore, renderer: Optional[Renderer] = None):
        self.store = store
        self.renderer = renderer

    def set_renderer(self, renderer: Optional[Renderer]) -> None:
        self.renderer = renderer

    def emit(self, level: str, msg_id: str, **data: Any) -> None:
        renderer = self.renderer
        if renderer is not None:
            renderer.render(Message(msg_id, level, data))

    def debug(self, msg_id: str, **data: Any) -> None:
        self.emit("debug", msg_id, **data)

    def info(self, msg_id: str, **data: Any) -> None:
        self.emit("info", msg_id, **data)

    def error(self, msg_id: str, **data: Any) -> None:
        self.emit("error", msg_id, **data)


messenger = Messenger(MessageStore())
