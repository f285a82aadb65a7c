"""Typography configuration validation and loading."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config
from . import errors
from . import font_io
from . import models

ElementDefaults = config.ElementDefaults
TypographyConfig = models.TypographyConfig
TypographyElement = models.TypographyElement

LEGACY_FIELDS = ("fontSizes", "lineHeights", "spAfter")


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_multiple_of_half(value: Any, allow_zero: bool = False) -> bool:
    """True for numbers on the half-unit grid (0.5, 1, 1.5, ...)."""
    if not _is_number(value):
        return False
    if value < 0 or (value == 0 and not allow_zero):
        return False
    return float(value * 2).is_integer()


def _check_font_path(
    result: ValidationResult, base_dir: Path, font_file: str, label: str
) -> None:
    resolved = font_io.find_font_file(base_dir, font_file)
    if resolved is None:
        result.errors.append(
            f"{label}: font file not found: {font_file} (resolved to: {base_dir / font_file})"
        )
        return
    ext = resolved.suffix.lower()
    if ext not in config.SUPPORTED_EXTENSIONS:
        result.warnings.append(
            f'Font file extension "{ext}" may not be supported. '
            f"Supported: {', '.join(config.SUPPORTED_EXTENSIONS)}"
        )


def _validate_fonts(data: Dict, base_dir: Path, result: ValidationResult) -> None:
    if "fontFiles" in data:
        font_files = data["fontFiles"]
        if not isinstance(font_files, list) or not font_files:
            result.errors.append("fontFiles must be a non-empty array")
            return
        seen = set()
        for index, entry in enumerate(font_files):
            prefix = f"fontFiles[{index}]"
            if not isinstance(entry, dict):
                result.errors.append(f"{prefix} must be an object")
                continue
            path = entry.get("path")
            if not path:
                result.errors.append(f"{prefix}.path is required")
            elif not isinstance(path, str):
                result.errors.append(f"{prefix}.path must be a string")
            else:
                _check_font_path(result, base_dir, path, prefix)
            family = entry.get("family")
            if not family:
                result.errors.append(f"{prefix}.family is required")
            elif not isinstance(family, str):
                result.errors.append(f"{prefix}.family must be a string")
            elif family in seen:
                result.errors.append(f'{prefix}.family "{family}" is declared twice')
            else:
                seen.add(family)
    elif "fontFile" in data:
        if not isinstance(data["fontFile"], str) or not data["fontFile"]:
            result.errors.append("fontFile must be a string")
        else:
            _check_font_path(result, base_dir, data["fontFile"], "fontFile")
    else:
        result.errors.append(
            'Font file is required. Add "fontFile": "your-font.woff2" '
            "(or a fontFiles array) to your config file"
        )


def _validate_element(
    element: Any, index: int, data: Dict, result: ValidationResult
) -> None:
    prefix = f"elements[{index}]"
    if not isinstance(element, dict):
        result.errors.append(f"{prefix} must be an object")
        return

    identifier = element.get("identifier", element.get("classname"))
    if not identifier:
        result.errors.append(f"{prefix}.identifier is required")
    elif not isinstance(identifier, str):
        result.errors.append(f"{prefix}.identifier must be a string")

    font_size = element.get("fontSize")
    if font_size is None:
        result.errors.append(f"{prefix}.fontSize is required")
    elif not _is_number(font_size) or font_size <= 0:
        result.errors.append(f"{prefix}.fontSize must be a positive number")

    line_height = element.get("lineHeight")
    if line_height is None:
        result.errors.append(f"{prefix}.lineHeight is required")
    elif not is_multiple_of_half(line_height):
        result.errors.append(
            f"{prefix}.lineHeight must be a positive number that is a multiple of 0.5 "
            "(e.g., 1.0, 1.5, 2.0, 2.5, etc.)"
        )

    space_after = element.get("spaceAfter")
    if space_after is not None and not is_multiple_of_half(space_after, allow_zero=True):
        result.errors.append(
            f"{prefix}.spaceAfter must be zero or a positive multiple of 0.5"
        )

    family = element.get("fontFamily")
    if family is not None:
        available = [
            f.get("family") for f in data.get("fontFiles") or [] if isinstance(f, dict)
        ]
        if not isinstance(family, str):
            result.errors.append(f"{prefix}.fontFamily must be a string")
        elif "fontFiles" in data and family not in available:
            result.errors.append(
                f'{prefix}.fontFamily "{family}" not found in fontFiles. '
                f"Available: {', '.join(str(a) for a in available)}"
            )

    weight = element.get("fontWeight")
    if weight is not None and (not _is_number(weight) or not 100 <= weight <= 900):
        result.errors.append(f"{prefix}.fontWeight must be a number between 100 and 900")

    style = element.get("fontStyle")
    if style is not None and style not in ("normal", "italic"):
        result.errors.append(f"{prefix}.fontStyle must be either 'normal' or 'italic'")

    baseline_unit = data.get("baselineUnit")
    if (
        _is_number(font_size)
        and font_size > 0
        and _is_number(line_height)
        and _is_number(baseline_unit)
        and baseline_unit > 0
    ):
        line_height_rem = line_height * baseline_unit
        ratio = line_height_rem / font_size
        if ratio < 1:
            result.warnings.append(
                f"{prefix}: line-height ({line_height_rem}rem) is smaller than "
                f"font-size ({font_size}rem)"
            )
        elif ratio > 3:
            result.warnings.append(
                f"{prefix}: line-height ratio ({ratio:.1f}) is unusually large"
            )


def _validate_legacy(data: Dict, result: ValidationResult) -> None:
    """Check the fontSizes/lineHeights/spAfter maps entry by entry."""
    usable = True
    for name in LEGACY_FIELDS:
        if name not in data:
            result.errors.append(f"{name} is required in legacy format")
            usable = False
        elif not isinstance(data[name], dict):
            result.errors.append(f"{name} must be an object")
            usable = False
    if not usable:
        return

    line_heights = data["lineHeights"]
    for key, font_size in data["fontSizes"].items():
        if not _is_number(font_size) or font_size <= 0:
            result.errors.append(f"fontSizes.{key} must be a positive number")
        elif key not in line_heights:
            result.warnings.append(
                f"fontSizes.{key} has no lineHeights entry and is skipped"
            )
    for key, line_height in line_heights.items():
        if not is_multiple_of_half(line_height):
            result.errors.append(
                f"lineHeights.{key} must be a positive number that is a multiple of 0.5"
            )
    for key, space_after in data["spAfter"].items():
        if not is_multiple_of_half(space_after, allow_zero=True):
            result.errors.append(
                f"spAfter.{key} must be zero or a positive multiple of 0.5"
            )


def validate_config(data: Any, config_path: Optional[str] = None) -> ValidationResult:
    """Validate a parsed configuration.

    Font paths are resolved relative to the directory of ``config_path``.
    """
    result = ValidationResult()
    if not isinstance(data, dict):
        result.errors.append("Configuration must be a valid JSON object")
        return result

    baseline_unit = data.get("baselineUnit")
    if baseline_unit is None:
        result.errors.append("baselineUnit is required")
    elif not _is_number(baseline_unit) or baseline_unit <= 0:
        result.errors.append("baselineUnit must be a positive number")

    base_dir = Path(config_path).parent if config_path else Path(".")
    _validate_fonts(data, base_dir, result)

    if "elements" in data:
        elements = data["elements"]
        if not isinstance(elements, list):
            result.errors.append("elements must be an array")
        else:
            if not elements:
                result.warnings.append("elements is empty, nothing will be generated")
            for index, element in enumerate(elements):
                _validate_element(element, index, data, result)
    else:
        _validate_legacy(data, result)

    if "font" in data and not isinstance(data["font"], str):
        result.errors.append("font must be a string")

    return result


def legacy_elements(data: Dict) -> List[Dict]:
    """Convert the legacy fontSizes/lineHeights/spAfter maps into elements.

    Keys without both a font size and a line height are skipped.
    """
    elements = []
    line_heights = data.get("lineHeights") or {}
    space_after = data.get("spAfter") or {}
    for key, font_size in (data.get("fontSizes") or {}).items():
        line_height = line_heights.get(key)
        if font_size is None or line_height is None:
            continue
        element = {"identifier": key, "fontSize": font_size, "lineHeight": line_height}
        if key in space_after:
            element["spaceAfter"] = space_after[key]
        elements.append(element)
    return elements


def _element_from_dict(entry: Dict) -> TypographyElement:
    return TypographyElement(
        identifier=entry.get("identifier") or entry.get("classname") or entry.get("tag") or "element",
        font_size=entry["fontSize"],
        line_height=entry["lineHeight"],
        space_after=entry.get("spaceAfter"),
        font_family=entry.get("fontFamily"),
        font_weight=entry.get("fontWeight"),
        font_style=entry.get("fontStyle"),
    )


def build_config(
    data: Dict,
    config_path: Optional[str] = None,
    defaults: Optional[ElementDefaults] = None,
) -> TypographyConfig:
    """Validate ``data`` and turn it into a TypographyConfig.

    Raises:
        ConfigurationError: Carrying every validation error found
    """
    defaults = defaults or ElementDefaults()
    result = validate_config(data, config_path)
    if not result.is_valid:
        raise errors.ConfigurationError(
            "Configuration validation failed", config_path, result.errors
        )

    if "fontFiles" in data:
        font_files = {entry["family"]: entry["path"] for entry in data["fontFiles"]}
    else:
        font_files = {defaults.default_family: data["fontFile"]}

    raw_elements = data["elements"] if "elements" in data else legacy_elements(data)
    return TypographyConfig(
        baseline_unit=data["baselineUnit"],
        font_files=font_files,
        elements=[_element_from_dict(entry) for entry in raw_elements],
        config_path=str(config_path) if config_path else None,
        font_name=data.get("font"),
        warnings=result.warnings,
    )


def load_config(
    config_path, defaults: Optional[ElementDefaults] = None
) -> TypographyConfig:
    """Read and validate a JSON configuration file."""
    config_path = Path(config_path)
    if not config_path.is_file():
        raise errors.ConfigurationError(
            f"Configuration file not found: {config_path}", str(config_path)
        )
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise errors.ConfigurationError(
            f"Invalid JSON in configuration file: {e}", str(config_path)
        ) from e
    except OSError as e:
        raise errors.ConfigurationError(
            f"Error reading configuration file: {e}", str(config_path)
        ) from e
    return build_config(data, str(config_path), defaults)
