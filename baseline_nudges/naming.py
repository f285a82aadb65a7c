"""Display-safe font family name resolution from unreliable font metadata.

Sources are tried strongest first and the first candidate that survives cleanup
and validation wins:

1. primary name table (IDs 16, 1, 4, 6; Windows, Unicode, Mac platforms)
2. secondary name table, same order
3. WOFF/WOFF2 XML metadata ``<description><text>``
4. OS/2 vendor ID
5. the file name, then its parent directory
6. the raw file name, or "Unknown Font"

Resolution never raises. A rejected candidate only moves the search on to the
next one.
"""

import re
from dataclasses import replace
from pathlib import Path
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from . import config
from . import models
from .logging_config import get_logger

logger = get_logger(__name__)

NameRecord = models.NameRecord
NameTable = models.NameTable
NameCandidate = models.NameCandidate

# Accepted input shapes for a name table
RawNameTable = Union[NameTable, List[Any], Mapping[str, Any], None]


# ---------- Cleanup and validation ----------


def _collapse_spaces(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _apply_all(patterns: Iterable["re.Pattern[str]"], text: str, repl: str = "") -> str:
    for pattern in patterns:
        text = pattern.sub(repl, text)
    return text


def cleanup_font_name(name: Optional[str]) -> str:
    """Strip technical suffixes, versions and redundant Regular/Normal.

    Weight and style words (Bold, Light, Italic, ...) are kept, and their
    presence also protects a trailing "Regular" or "Normal".
    """
    if not name or not isinstance(name, str):
        return ""

    cleaned = name.strip()

    lowered = cleaned.lower()
    for family, patterns in config.FONT_SPECIFIC_CLEANUP.items():
        if family in lowered:
            cleaned = _apply_all(patterns, cleaned)

    has_weight_style = bool(config.WEIGHT_STYLE_KEYWORDS.search(cleaned))

    cleaned = _apply_all(config.TECHNICAL_SUFFIXES, cleaned)
    cleaned = _apply_all(config.VERSION_SUFFIXES, cleaned)
    cleaned = _apply_all(config.BRACKETED_SUFFIXES, cleaned)
    if not has_weight_style:
        cleaned = _apply_all(config.REDUNDANT_STYLE_SUFFIXES, cleaned, r"\1")

    return _collapse_spaces(cleaned)


def invalid_reason(name: Optional[str]) -> Optional[str]:
    """Return why ``name`` is unusable as a display name, or None if it is fine."""
    if not name or not isinstance(name, str):
        return "empty"
    trimmed = name.strip()
    for pattern in config.INVALID_NAME_PATTERNS:
        if pattern.search(trimmed):
            return f"matches {pattern.pattern!r}"
    if len(trimmed) < 2:
        return "shorter than 2 characters"
    if not re.search(r"[A-Za-z]", trimmed):
        return "contains no letter"
    return None


def is_valid_font_name(name: Optional[str]) -> bool:
    return invalid_reason(name) is None


def strip_noise_phrases(name: str) -> str:
    return _collapse_spaces(_apply_all(config.NOISE_PHRASES, name, " "))


def _title_words(text: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


# ---------- Name table adapters ----------


def _first_localized(value: Any) -> Optional[str]:
    """Pick English from a ``{lang: text}`` mapping, else the first language."""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        if isinstance(value.get("en"), str):
            return value["en"]
        for text in value.values():
            if isinstance(text, str):
                return text
    return None


def _record_from_entry(entry: Any) -> Optional[NameRecord]:
    if isinstance(entry, NameRecord):
        return entry
    if isinstance(entry, Mapping):
        name_id = entry.get("nameID", entry.get("name_id"))
        platform_id = entry.get("platformID", entry.get("platform_id"))
        value = entry.get("value")
    else:
        name_id = getattr(entry, "nameID", None)
        platform_id = getattr(entry, "platformID", None)
        value = getattr(entry, "value", None)
        if value is None and hasattr(entry, "toUnicode"):
            value = entry.toUnicode()
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if name_id is None or not isinstance(value, str):
        return None
    return NameRecord(int(name_id), platform_id, value)


def normalize_name_table(raw: RawNameTable) -> NameTable:
    """Adapt any supported name table shape into the canonical record tuple.

    Supported shapes:
        - a sequence of records (NameRecord, dicts with nameID/platformID/value,
          or fontTools NameRecord objects)
        - an object exposing such a sequence as ``names``
        - a language-keyed mapping such as ``{"preferredFamily": {"en": "Inter"}}``
    """
    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        if "names" in raw and not any(k in raw for k in config.LOCALIZED_NAME_KEYS):
            return normalize_name_table(raw["names"])
        records = []
        for key, name_id in config.LOCALIZED_NAME_KEYS.items():
            text = _first_localized(raw.get(key))
            if text is not None:
                records.append(NameRecord(name_id, None, text))
        return tuple(records)
    if not isinstance(raw, (list, tuple)) and hasattr(raw, "names"):
        raw = raw.names
    if isinstance(raw, (list, tuple)):
        records = []
        for entry in raw:
            try:
                record = _record_from_entry(entry)
            except (TypeError, ValueError, UnicodeDecodeError) as e:
                logger.debug("Skipping unreadable name record %r: %s", entry, e)
                continue
            if record is not None:
                records.append(record)
        return tuple(records)
    logger.debug("Unsupported name table shape: %s", type(raw).__name__)
    return ()


def _platform_rank(platform_id: Optional[int]) -> int:
    try:
        return config.PLATFORM_PRIORITY.index(platform_id)
    except ValueError:
        return len(config.PLATFORM_PRIORITY)


# ---------- Candidate sources ----------


def table_candidates(raw: RawNameTable, table: str = "primary") -> Iterator[NameCandidate]:
    """Yield table entries by name ID priority, then platform priority."""
    records = normalize_name_table(raw)
    for name_id in config.NAME_ID_PRIORITY:
        matching = [r for r in records if r.name_id == name_id and r.value.strip()]
        matching.sort(key=lambda r: _platform_rank(r.platform_id))
        for record in matching:
            yield NameCandidate(
                kind="table-entry",
                value=record.value,
                name_id=name_id,
                platform=record.platform,
                table=table,
            )


def metadata_candidates(metadata: Union[str, bytes, None]) -> Iterator[NameCandidate]:
    if not metadata:
        return
    if isinstance(metadata, bytes):
        metadata = metadata.decode("utf-8", errors="replace")
    match = config.WOFF_METADATA_NAME.search(metadata)
    if match:
        yield NameCandidate(kind="metadata-xml", value=match.group(1).strip())


def vendor_candidates(vendor_id: Union[str, bytes, None]) -> Iterator[NameCandidate]:
    if vendor_id is None:
        return
    if isinstance(vendor_id, bytes):
        vendor_id = vendor_id.decode("ascii", errors="ignore")
    vendor = vendor_id.replace("\x00", " ").strip()
    if not vendor or vendor.upper() in config.BAD_VENDOR_IDS:
        return
    yield NameCandidate(kind="vendor-id", value=vendor)


def _path_name(stem: str) -> str:
    name = re.sub(r"^\d+-", "", stem)
    name = re.sub(r"[-_]", " ", name)
    name = re.sub(r"\bwebfont\b", "", name, flags=re.I)
    return _title_words(_collapse_spaces(name))


def path_candidates(font_path: Union[str, Path, None]) -> Iterator[NameCandidate]:
    """Yield names derived from the file name and, failing that, its directory."""
    if not font_path:
        return
    path = Path(str(font_path))

    name = _path_name(path.stem)
    yield NameCandidate(kind="path-derived", value=name)
    # Filenames often carry licence or demo markers around a usable name
    salvaged = strip_noise_phrases(cleanup_font_name(name))
    if salvaged and salvaged != cleanup_font_name(name):
        yield NameCandidate(kind="path-derived", value=salvaged)

    parent = path.parent.name
    if parent:
        dir_name = re.sub(r"[-_]", " ", parent)
        dir_name = re.sub(r"\bfonts?\b", "", dir_name, flags=re.I)
        dir_name = _collapse_spaces(dir_name)
        if dir_name:
            yield NameCandidate(kind="path-derived", value=dir_name)


def _sources(
    font_path: Union[str, Path, None],
    primary: RawNameTable,
    secondary: RawNameTable,
    metadata: Union[str, bytes, None],
    vendor_id: Union[str, bytes, None],
) -> List[Tuple[str, Callable[[], Iterator[NameCandidate]]]]:
    return [
        ("primary name table", lambda: table_candidates(primary, "primary")),
        ("secondary name table", lambda: table_candidates(secondary, "secondary")),
        ("WOFF metadata", lambda: metadata_candidates(metadata)),
        ("OS/2 vendor ID", lambda: vendor_candidates(vendor_id)),
        ("file path", lambda: path_candidates(font_path)),
    ]


def iter_name_candidates(
    font_path: Union[str, Path, None],
    primary: RawNameTable = None,
    secondary: RawNameTable = None,
    metadata: Union[str, bytes, None] = None,
    vendor_id: Union[str, bytes, None] = None,
) -> Iterator[NameCandidate]:
    """Lazily yield every candidate in resolution order (before cleanup).

    A source that fails part way is abandoned and the next source is tried.
    """
    for label, source in _sources(font_path, primary, secondary, metadata, vendor_id):
        try:
            for candidate in source():
                yield candidate
        except Exception as e:  # best effort per source
            logger.debug("Name source %s failed: %s", label, e)


def _absolute_fallback(font_path: Union[str, Path, None]) -> NameCandidate:
    stem = Path(str(font_path)).stem if font_path else ""
    name = _collapse_spaces(re.sub(r"[-_]", " ", stem))
    if is_valid_font_name(name):
        return NameCandidate(kind="fallback", value=name)
    return NameCandidate(kind="fallback", value=config.UNKNOWN_FONT_NAME)


def resolve_font_name_with_source(
    font_path: Union[str, Path, None],
    primary: RawNameTable = None,
    secondary: RawNameTable = None,
    *,
    metadata: Union[str, bytes, None] = None,
    vendor_id: Union[str, bytes, None] = None,
) -> NameCandidate:
    """Resolve a display name and report the candidate it came from.

    The returned candidate carries the cleaned name as its ``value``.
    """
    for candidate in iter_name_candidates(
        font_path, primary, secondary, metadata, vendor_id
    ):
        cleaned = cleanup_font_name(candidate.value)
        reason = invalid_reason(cleaned)
        if reason is not None:
            logger.debug(
                "Rejected %r from %s: %s", candidate.value, candidate.describe(), reason
            )
            continue
        logger.debug(
            "Resolved %r from %s for %s", cleaned, candidate.describe(), font_path
        )
        return replace(candidate, value=cleaned)

    fallback = _absolute_fallback(font_path)
    logger.debug("Falling back to %r for %s", fallback.value, font_path)
    return fallback


def resolve_font_name(
    font_path: Union[str, Path, None],
    primary: RawNameTable = None,
    secondary: RawNameTable = None,
    *,
    metadata: Union[str, bytes, None] = None,
    vendor_id: Union[str, bytes, None] = None,
) -> str:
    """Return one clean, display-safe family name for a font file. Never raises."""
    return resolve_font_name_with_source(
        font_path, primary, secondary, metadata=metadata, vendor_id=vendor_id
    ).value
