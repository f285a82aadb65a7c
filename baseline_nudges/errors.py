"""Exception types raised by the nudge generator and their CLI rendering."""

from typing import Iterable, List, Optional

from rich.markup import escape

from . import console_styles as cs

SUPPORTED_FORMATS_HINT = "Supported formats: .woff2, .woff, .ttf, .otf"


class NudgeError(Exception):
    """Base class for every error the generator reports to the user."""

    hint: Optional[str] = None


class MetricsUnavailable(NudgeError):
    """Raised when a nudge is requested before font metrics were loaded."""

    hint = "Load a font file before calculating baseline nudges"

    def __init__(self, message: str = ""):
        super().__init__(
            message
            or "Font metrics not loaded. Cannot calculate baseline nudges without a font file."
        )


class UnknownFontFamily(NudgeError):
    def __init__(self, family: str, available: Iterable[str], element: str = ""):
        self.family = family
        self.available = sorted(available)
        self.element = element
        where = f"{element}: " if element else ""
        listed = ", ".join(self.available) if self.available else "(none)"
        super().__init__(
            f'{where}font family "{family}" is not configured. Available: {listed}'
        )


class ConfigurationError(NudgeError):
    hint = "Run 'baseline-nudges init' to create a sample config"

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.config_path = config_path
        self.errors = list(errors or [])


class FontFileError(NudgeError):
    hint = SUPPORTED_FORMATS_HINT

    def __init__(self, message: str, font_path: Optional[str] = None):
        super().__init__(message)
        self.font_path = font_path


class FontMetricsError(NudgeError):
    hint = "Try a different font format or check if the file is corrupted"

    def __init__(self, message: str, font_path: Optional[str] = None):
        super().__init__(message)
        self.font_path = font_path


def format_error(error: NudgeError) -> cs.StatusIndicator:
    """Build the status indicator shown by the CLI for a failed command."""
    indicator = cs.StatusIndicator("error").add_message(
        f"[field]{type(error).__name__}:[/field] {escape(str(error))}"
    )
    config_path = getattr(error, "config_path", None)
    if config_path:
        indicator.add_item(f"Config file: {escape(str(config_path))}")
    font_path = getattr(error, "font_path", None)
    if font_path:
        indicator.add_item(f"Font file: {escape(str(font_path))}")
    for item in getattr(error, "errors", None) or []:
        indicator.add_item(f"• {escape(item)}", indent_level=2)
    if error.hint:
        indicator.add_item(f"[darktext.dim]{error.hint}[/darktext.dim]")
    return indicator
