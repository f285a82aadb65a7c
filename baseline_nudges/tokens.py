"""Element token assembly: nudges, defaults and font references per element."""

import json
import re
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional

from . import config
from . import errors
from . import font_io
from . import models
from . import nudges
from .logging_config import get_logger

logger = get_logger(__name__)

ElementDefaults = config.ElementDefaults
NudgeConfig = config.NudgeConfig
ElementToken = models.ElementToken
LoadedFont = models.LoadedFont
TokenSet = models.TokenSet
TypographyConfig = models.TypographyConfig
TypographyElement = models.TypographyElement

DEFAULT_DEFAULTS = ElementDefaults()
TOKENS_FILENAME = "tokens.json"


def format_number(value: float, precision: int = 5) -> str:
    """Shortest decimal form: 1.0 -> "1", 0.750 -> "0.75"."""
    text = format(round(float(value), precision), f".{precision}f")
    text = text.rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_rem(value: float, precision: int = 5) -> str:
    return f"{format_number(value, precision)}rem"


def clean_identifier(identifier: str) -> str:
    """Element key used in the token set: ``.lead text`` -> ``lead_text``."""
    return re.sub(r"[^A-Za-z0-9_-]", "_", re.sub(r"^\.", "", identifier))


def resolve_family(
    element: TypographyElement,
    fonts: Dict[str, LoadedFont],
    defaults: Optional[ElementDefaults] = None,
) -> str:
    """Pick the family whose metrics an element is set in.

    An explicit reference must exist. Otherwise the default family wins, then
    the fallback family, then the only configured family.

    Raises:
        UnknownFontFamily: If no family can be selected
    """
    defaults = defaults or DEFAULT_DEFAULTS
    if element.font_family is not None:
        if element.font_family in fonts:
            return element.font_family
        raise errors.UnknownFontFamily(element.font_family, fonts, element.identifier)
    for family in (defaults.default_family, defaults.fallback_family):
        if family in fonts:
            return family
    if len(fonts) == 1:
        return next(iter(fonts))
    raise errors.UnknownFontFamily(defaults.default_family, fonts, element.identifier)


def build_element_token(
    element: TypographyElement,
    baseline_unit: float,
    fonts: Dict[str, LoadedFont],
    defaults: Optional[ElementDefaults] = None,
    nudge_config: Optional[NudgeConfig] = None,
) -> ElementToken:
    """Compute the nudge for one element and fill in its defaults."""
    defaults = defaults or DEFAULT_DEFAULTS
    family = resolve_family(element, fonts, defaults)
    nudge = nudges.calculate_nudge(
        element.font_size,
        element.line_height,
        baseline_unit,
        fonts[family].metrics,
        nudge_config,
    )
    space_after = (
        element.space_after if element.space_after is not None else defaults.space_after
    )
    return ElementToken(
        font_size=format_rem(element.font_size),
        line_height=format_rem(element.line_height * baseline_unit),
        font_family=family,
        font_weight=element.font_weight or defaults.font_weight,
        font_style=element.font_style or defaults.font_style,
        space_after=format_rem(space_after * baseline_unit),
        nudge_top=format_rem(nudge),
    )


def _display_font(
    config_: TypographyConfig, fonts: Dict[str, LoadedFont], defaults: ElementDefaults
) -> str:
    if config_.font_name:
        return config_.font_name
    for family in (defaults.default_family, defaults.fallback_family):
        if family in fonts:
            return fonts[family].name
    return next(iter(fonts.values())).name if fonts else config.UNKNOWN_FONT_NAME


def build_token_set(
    config_: TypographyConfig,
    fonts: Dict[str, LoadedFont],
    defaults: Optional[ElementDefaults] = None,
    nudge_config: Optional[NudgeConfig] = None,
) -> TokenSet:
    defaults = defaults or DEFAULT_DEFAULTS
    token_set = TokenSet(
        font=_display_font(config_, fonts, defaults),
        baseline_unit=format_rem(config_.baseline_unit),
        font_files=dict(config_.font_files),
    )
    for family, loaded in fonts.items():
        token_set.fonts[family] = {
            "name": loaded.name,
            "file": config_.font_files.get(family, Path(loaded.path).name),
            "weight": loaded.metrics.weight_class or defaults.font_weight,
            "metrics": loaded.metrics.to_dict(),
        }
    for element in config_.elements:
        key = clean_identifier(element.identifier)
        if key in token_set.elements:
            logger.warning("Duplicate element %r, keeping the last definition", key)
        token_set.elements[key] = build_element_token(
            element, config_.baseline_unit, fonts, defaults, nudge_config
        )
    return token_set


def load_fonts(config_: TypographyConfig, progress=None) -> Dict[str, LoadedFont]:
    """Load every configured family, reading each distinct file only once.

    Raises:
        FontFileError: If a configured file cannot be found
        FontMetricsError: If a file cannot be parsed
    """
    fonts: Dict[str, LoadedFont] = {}
    by_path: Dict[Path, LoadedFont] = {}
    task = None
    if progress is not None:
        task = progress.add_task("Reading fonts", total=len(config_.font_files))

    for family, font_file in config_.font_files.items():
        path = font_io.find_font_file(config_.base_dir, font_file)
        if path is None:
            raise errors.FontFileError(
                f"Font file not found: {font_file}", str(config_.base_dir / font_file)
            )
        resolved = path.resolve()
        if resolved in by_path:
            fonts[family] = replace(by_path[resolved], family=family)
        else:
            fonts[family] = by_path[resolved] = font_io.load_font(path, family)
        if progress is not None:
            progress.advance(task)
    return fonts


def write_tokens(token_set: TokenSet, output_dir=".") -> Path:
    """Write ``tokens.json`` into ``output_dir`` and return its path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / TOKENS_FILENAME
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(token_set.to_dict(), f, indent=2, ensure_ascii=False)
        f.write("\n")
    logger.info("Wrote %s", output_path)
    return output_path
