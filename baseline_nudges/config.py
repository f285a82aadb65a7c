"""Configuration constants and dataclasses for nudge generation and naming."""

import re
from dataclasses import dataclass
from typing import Dict, Tuple


# --- OpenType name table ---
NAME_ID_TYPOGRAPHIC_FAMILY: int = 16
NAME_ID_FAMILY: int = 1
NAME_ID_FULL_NAME: int = 4
NAME_ID_POSTSCRIPT: int = 6

# Resolution order: typographic family first, PostScript name last
NAME_ID_PRIORITY: Tuple[int, ...] = (
    NAME_ID_TYPOGRAPHIC_FAMILY,
    NAME_ID_FAMILY,
    NAME_ID_FULL_NAME,
    NAME_ID_POSTSCRIPT,
)

PLATFORM_UNICODE: int = 0
PLATFORM_MAC: int = 1
PLATFORM_WINDOWS: int = 3

PLATFORM_PRIORITY: Tuple[int, ...] = (
    PLATFORM_WINDOWS,
    PLATFORM_UNICODE,
    PLATFORM_MAC,
)

PLATFORM_NAMES: Dict[int, str] = {
    PLATFORM_UNICODE: "unicode",
    PLATFORM_MAC: "mac",
    PLATFORM_WINDOWS: "windows",
}

# Keys of the flattened, language-keyed name table shape
LOCALIZED_NAME_KEYS: Dict[str, int] = {
    "preferredFamily": NAME_ID_TYPOGRAPHIC_FAMILY,
    "fontFamily": NAME_ID_FAMILY,
    "fullName": NAME_ID_FULL_NAME,
    "postScriptName": NAME_ID_POSTSCRIPT,
}

# OS/2.achVendID values that carry no identity
BAD_VENDOR_IDS = frozenset({"NONE", "XXXX", "UKWN", "PYRS", "PFED", "HL", "TN", "????"})

UNKNOWN_FONT_NAME = "Unknown Font"

SUPPORTED_EXTENSIONS: Tuple[str, ...] = (".woff2", ".woff", ".ttf", ".otf")

FONT_FORMATS: Dict[str, str] = {
    ".woff2": "woff2",
    ".woff": "woff",
    ".ttf": "truetype",
    ".otf": "opentype",
}


# --- Name cleanup ---
# Applied before the generic rules when the candidate contains the family
FONT_SPECIFIC_CLEANUP: Dict[str, Tuple["re.Pattern[str]", ...]] = {
    "questa regular": (
        re.compile(r"\s*Webfont$", re.I),
        re.compile(r"\s*Regular$", re.I),
    ),
    "inter": (
        re.compile(r"\s*\bVariable$", re.I),
        re.compile(r"\s*\bVF$", re.I),
    ),
    "ibm plex": (
        re.compile(r"\s*\bVar$", re.I),
        re.compile(r"\s*\bVariable$", re.I),
    ),
}

TECHNICAL_SUFFIXES: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"\s*-?\s*web\s*font$", re.I),
    re.compile(r"\s*\bVF$", re.I),
    re.compile(r"\s*\bVariable$", re.I),
    re.compile(r"\s*\bVar$", re.I),
)

VERSION_SUFFIXES: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"\s*\bv\d+(\.\d+)*\s*$", re.I),
    re.compile(r"\s*\bversion\s*\d+(\.\d+)*\s*$", re.I),
    re.compile(r"\s*\bgit-[a-f0-9]+\s*$", re.I),
    re.compile(r"\s*\d+\s*$"),
)

BRACKETED_SUFFIXES: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"\s*\([^)]*\)\s*$"),
    re.compile(r"\s*\[[^\]]*\]\s*$"),
    re.compile(r"\s*\{[^}]*\}\s*$"),
)

# Only stripped when no other weight/style keyword is present
REDUNDANT_STYLE_SUFFIXES: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"^(.+?)\s*-\s*Regular$", re.I),
    re.compile(r"^(.+?)\s*\bRegular$", re.I),
    re.compile(r"^(.+?)\s*-\s*Normal$", re.I),
    re.compile(r"^(.+?)\s*\bNormal$", re.I),
)

WEIGHT_STYLE_KEYWORDS = re.compile(
    r"\b(thin|light|medium|semibold|bold|heavy|black|ultra|extra|italic|oblique)\b",
    re.I,
)

# --- Name validation ---
INVALID_NAME_PATTERNS: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"^\.+$"),  # only dots
    re.compile(r"^\s*$"),  # blank
    re.compile(r"^.$"),  # single character
    re.compile(r"ilovetypography", re.I),
    re.compile(r"for\s+use\s+only", re.I),
    re.compile(r"version\s+\d", re.I),
    re.compile(r"git-", re.I),
    re.compile(r"\d{4}-\d{2}-\d{2}"),  # dates
    re.compile(r"\.(ttf|otf|woff|woff2)$", re.I),
    re.compile(r"test\s*font", re.I),
    re.compile(r"sample", re.I),
    re.compile(r"demo", re.I),
    re.compile(r"placeholder", re.I),
    re.compile(r"untitled", re.I),
    re.compile(r"^font\s*$", re.I),
    re.compile(r"^regular\s*$", re.I),
    re.compile(r"^bold\s*$", re.I),
    re.compile(r"^italic\s*$", re.I),
    re.compile(r"^\d+$"),
    re.compile(r"[^\x20-\x7E]"),  # non-ASCII
)

# Phrases removed from filename-derived names before a second validation pass
NOISE_PHRASES: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"\bfor\s+use\s+only\b", re.I),
    re.compile(r"\bilovetypography\b", re.I),
    re.compile(r"\btest\s*font\b", re.I),
    re.compile(r"\b(sample|demo|placeholder|untitled)\b", re.I),
)

WOFF_METADATA_NAME = re.compile(
    r"<description[^>]*>.*?<text[^>]*>([^<]+)</text>", re.I | re.S
)


@dataclass
class NudgeConfig:
    """Constants of the baseline nudge calculation."""

    root_font_size_px: float = 16.0  # 1rem in CSS pixels
    drift_compensation_px: float = (
        1.0  # Empirical optical drift, scaled by (font_size - 1)
    )
    precision: int = 5  # Decimal places of the returned rem value

    @property
    def one_pixel_rem(self) -> float:
        return 1.0 / self.root_font_size_px


@dataclass
class ElementDefaults:
    """Values substituted when a typography element leaves a field out."""

    font_weight: int = 400
    font_style: str = "normal"
    space_after: float = 4  # Baseline units
    default_family: str = "default"
    fallback_family: str = "sans"
