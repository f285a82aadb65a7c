"""Data models shared by the metrics reader, resolver and token assembler."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from . import config
from . import errors


@dataclass(frozen=True)
class FontMetrics:
    """Vertical metrics of one font file, in font units."""

    ascent: float
    descent: float  # Usually negative
    line_gap: float
    units_per_em: float

    # Reporting only, not used by the nudge calculation
    cap_height: Optional[float] = None
    x_height: Optional[float] = None
    weight_class: Optional[int] = None
    path: Optional[str] = None

    def __post_init__(self):
        if not self.units_per_em or self.units_per_em <= 0:
            raise errors.FontMetricsError(
                f"unitsPerEm must be positive, got {self.units_per_em!r}", self.path
            )
        if self.line_gap < 0:
            # Some fonts ship a negative hhea.lineGap; treat as no gap
            object.__setattr__(self, "line_gap", 0)

    @classmethod
    def from_mapping(cls, values: Dict) -> "FontMetrics":
        """Build metrics from a ``{ascent, descent, lineGap, unitsPerEm}`` mapping."""
        return cls(
            ascent=values.get("ascent") or 0,
            descent=values.get("descent") or 0,
            line_gap=values.get("lineGap", values.get("line_gap")) or 0,
            units_per_em=values.get("unitsPerEm", values.get("units_per_em")) or 0,
            cap_height=values.get("capHeight"),
            x_height=values.get("xHeight"),
            weight_class=values.get("weightClass"),
            path=values.get("path"),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "ascent": self.ascent,
            "descent": self.descent,
            "lineGap": self.line_gap,
            "unitsPerEm": self.units_per_em,
        }


@dataclass(frozen=True)
class NameRecord:
    name_id: int
    platform_id: Optional[int]  # None when the source carries no platform
    value: str

    @property
    def platform(self) -> str:
        return config.PLATFORM_NAMES.get(self.platform_id, "any")


# Canonical name table: records in source order
NameTable = Tuple[NameRecord, ...]


@dataclass(frozen=True)
class NameCandidate:
    """One string offered to the resolver, tagged with where it came from.

    kind is one of ``table-entry``, ``metadata-xml``, ``vendor-id``,
    ``path-derived`` or ``fallback``.
    """

    kind: str
    value: str
    name_id: Optional[int] = None
    platform: Optional[str] = None
    table: Optional[str] = None  # "primary" or "secondary" for table entries

    def describe(self) -> str:
        if self.kind == "table-entry":
            return f"{self.table} name table, ID {self.name_id} ({self.platform})"
        return self.kind


@dataclass(frozen=True)
class TypographyElement:
    identifier: str
    font_size: float  # rem
    line_height: float  # baseline units
    space_after: Optional[float] = None  # baseline units
    font_family: Optional[str] = None
    font_weight: Optional[int] = None
    font_style: Optional[str] = None


@dataclass
class LoadedFont:
    """A font file after metrics loading and name resolution."""

    family: str
    path: str
    name: str
    metrics: FontMetrics
    name_source: Optional[NameCandidate] = None


@dataclass
class ElementToken:
    font_size: str
    line_height: str
    font_family: str
    font_weight: int
    font_style: str
    space_after: str
    nudge_top: str

    def to_dict(self) -> Dict:
        return {
            "fontSize": self.font_size,
            "lineHeight": self.line_height,
            "fontFamily": self.font_family,
            "fontWeight": self.font_weight,
            "fontStyle": self.font_style,
            "spaceAfter": self.space_after,
            "nudgeTop": self.nudge_top,
        }


@dataclass
class TokenSet:
    font: str
    baseline_unit: str
    font_files: Dict[str, str]
    fonts: Dict[str, Dict] = field(default_factory=dict)
    elements: Dict[str, ElementToken] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        data: Dict = {"font": self.font, "baselineUnit": self.baseline_unit}
        if len(self.font_files) == 1:
            data["fontFile"] = next(iter(self.font_files.values()))
        else:
            data["fontFiles"] = [
                {"family": family, "path": path}
                for family, path in self.font_files.items()
            ]
        data["fonts"] = self.fonts
        data["elements"] = {
            name: token.to_dict() for name, token in self.elements.items()
        }
        return data


@dataclass
class TypographyConfig:
    """A validated typography configuration file."""

    baseline_unit: float
    font_files: Dict[str, str]  # family -> path as written in the config
    elements: List[TypographyElement]
    config_path: Optional[str] = None
    font_name: Optional[str] = None  # overrides the resolved display name
    warnings: List[str] = field(default_factory=list)

    @property
    def base_dir(self) -> Path:
        return Path(self.config_path).parent if self.config_path else Path(".")
