"""Themed console output: status indicators, counts and progress bars."""

from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.theme import Theme

INDENT = "  "

THEME = Theme(
    {
        "info": "cyan",
        "success": "bold green",
        "warning": "yellow",
        "error": "bold red",
        "field": "bold",
        "count": "bold magenta",
        "value.new": "green",
        "darktext.dim": "grey50",
    }
)

# label, style
_INDICATORS = {
    "info": ("INFO", "info"),
    "success": ("DONE", "success"),
    "warning": ("WARN", "warning"),
    "error": ("FAIL", "error"),
    "saved": ("SAVED", "success"),
    "parsing": ("READ", "info"),
}

_console: Optional[Console] = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console(theme=THEME, highlight=False)
    return _console


def fmt_count(value) -> str:
    return f"[count]{value}[/count]"


def emit(text: str = "", console: Optional[Console] = None) -> None:
    (console or get_console()).print(text)


class StatusIndicator:
    """Chainable builder for one status line plus indented detail items.

    Example:
        StatusIndicator("warning").add_file("fonts/Inter.ttf").with_explanation(
            "no OS/2 table"
        ).emit(console)
    """

    def __init__(self, kind: str):
        if kind not in _INDICATORS:
            raise ValueError(f"Unknown indicator kind: {kind}")
        self.kind = kind
        self._parts: List[str] = []
        self._items: List[str] = []
        self._explanation: Optional[str] = None

    def add_message(self, message: str) -> "StatusIndicator":
        self._parts.append(message)
        return self

    def add_file(self, path, filename_only: bool = True) -> "StatusIndicator":
        shown = Path(path).name if filename_only else str(path)
        self._parts.append(f"[field]{shown}[/field]")
        return self

    def add_item(self, text: str, indent_level: int = 1) -> "StatusIndicator":
        self._items.append(f"{INDENT * (indent_level + 1)}{text}")
        return self

    def with_explanation(self, text: str) -> "StatusIndicator":
        self._explanation = text
        return self

    def build(self) -> str:
        label, style = _INDICATORS[self.kind]
        prefix = f"[{style}]{label:<5}[/{style}]"
        line = " ".join([prefix] + self._parts)
        if self._explanation:
            line += f" [darktext.dim]- {self._explanation}[/darktext.dim]"
        return "\n".join([line] + self._items)

    def emit(self, console: Optional[Console] = None) -> None:
        (console or get_console()).print(self.build())


def create_progress_bar(console: Optional[Console] = None) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console or get_console(),
        transient=True,
    )
