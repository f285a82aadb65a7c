"""Font I/O helper functions for reading metrics and names from font files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from . import config
from . import errors
from . import models
from . import naming
from .logging_config import get_logger

if TYPE_CHECKING:
    from fontTools.ttLib import TTFont

logger = get_logger(__name__)

FontMetrics = models.FontMetrics
NameRecord = models.NameRecord
NameTable = models.NameTable


def _read_ttfont(path: str):
    from fontTools.ttLib import TTFont

    return TTFont(path)


def _get_upm(font: TTFont) -> int:
    return int(font["head"].unitsPerEm)


def find_font_file(directory, font_file: str) -> Optional[Path]:
    """Locate ``font_file`` in ``directory``, trying other web font extensions.

    The exact name wins; otherwise ``Inter.ttf`` also matches ``Inter.woff2``.
    """
    directory = Path(directory)
    exact = directory / font_file
    if exact.is_file():
        return exact
    base = Path(font_file).with_suffix("")
    for ext in config.SUPPORTED_EXTENSIONS:
        candidate = directory / base.with_suffix(ext)
        if candidate.is_file():
            return candidate
    return None


def font_format(font_file) -> str:
    """CSS ``format()`` hint for a font file, ``truetype`` when unknown."""
    return config.FONT_FORMATS.get(Path(str(font_file)).suffix.lower(), "truetype")


def _vertical_metrics(font: TTFont) -> Tuple[int, int, int]:
    """Ascent, descent and line gap, preferring hhea and falling back to OS/2 typo."""
    hhea = font["hhea"] if "hhea" in font else None
    os2 = font["OS/2"] if "OS/2" in font else None

    ascent = int(getattr(hhea, "ascent", 0) or 0) if hhea else 0
    descent = int(getattr(hhea, "descent", 0) or 0) if hhea else 0
    line_gap = int(getattr(hhea, "lineGap", 0) or 0) if hhea else 0

    if os2 is not None and not ascent and not descent:
        ascent = int(getattr(os2, "sTypoAscender", 0) or 0)
        descent = int(getattr(os2, "sTypoDescender", 0) or 0)
        line_gap = int(getattr(os2, "sTypoLineGap", 0) or 0)
    return ascent, descent, line_gap


def read_metrics(font: TTFont, path: Optional[str] = None) -> FontMetrics:
    """Normalize an open TTFont into FontMetrics."""
    try:
        upm = _get_upm(font)
    except KeyError as e:
        raise errors.FontMetricsError(f"missing {e} table", path) from e

    ascent, descent, line_gap = _vertical_metrics(font)
    if not ascent and not descent:
        raise errors.FontMetricsError("font has no vertical metrics", path)

    os2 = font["OS/2"] if "OS/2" in font else None
    cap_height = int(getattr(os2, "sCapHeight", 0) or 0) if os2 else 0
    x_height = int(getattr(os2, "sxHeight", 0) or 0) if os2 else 0
    weight_class = int(getattr(os2, "usWeightClass", 0) or 0) if os2 else 0

    return FontMetrics(
        ascent=ascent,
        descent=descent,
        line_gap=line_gap,
        units_per_em=upm,
        # Rough estimates when OS/2 leaves these at zero
        cap_height=cap_height or ascent * 0.7,
        x_height=x_height or ascent * 0.5,
        weight_class=weight_class or None,
        path=path,
    )


def read_name_table(font: TTFont) -> NameTable:
    """Structured name records from the ``name`` table (primary source)."""
    if "name" not in font:
        return ()
    records: List[NameRecord] = []
    for rec in font["name"].names:
        try:
            value = rec.toUnicode()
        except UnicodeDecodeError:
            continue
        records.append(NameRecord(int(rec.nameID), int(rec.platformID), value))
    return tuple(records)


def read_cff_names(font: TTFont) -> Optional[Dict[str, Dict[str, str]]]:
    """Family/full/PostScript names from the CFF top dict (secondary source).

    Returned in the language-keyed shape, since CFF names carry no platform.
    """
    if "CFF " not in font:
        return None
    try:
        cff = font["CFF "].cff
        top = cff.topDictIndex[0]
        ps_name = cff.fontNames[0] if cff.fontNames else None
    except (AttributeError, IndexError, KeyError) as e:
        logger.debug("Unreadable CFF table: %s", e)
        return None

    names: Dict[str, Dict[str, str]] = {}
    family = getattr(top, "FamilyName", None)
    full = getattr(top, "FullName", None)
    if family:
        names["fontFamily"] = {"en": str(family)}
    if full:
        names["fullName"] = {"en": str(full)}
    if ps_name:
        names["postScriptName"] = {"en": str(ps_name)}
    return names or None


def read_woff_metadata(font: TTFont) -> Optional[bytes]:
    """Extended metadata XML block of a WOFF/WOFF2 file, if present."""
    flavor_data = getattr(font, "flavorData", None)
    if flavor_data is None:
        return None
    return getattr(flavor_data, "metaData", None) or None


def read_vendor_id(font: TTFont) -> Optional[str]:
    if "OS/2" not in font:
        return None
    vendor = getattr(font["OS/2"], "achVendID", None)
    if isinstance(vendor, bytes):
        vendor = vendor.decode("ascii", errors="ignore")
    return vendor or None


def load_font(path, family: str = "default") -> models.LoadedFont:
    """Open a font file, read its metrics and resolve its display name.

    Raises:
        FontFileError: If the file is missing or has an unsupported extension
        FontMetricsError: If fontTools cannot read the file or its metrics
    """
    path = Path(path)
    if not path.is_file():
        raise errors.FontFileError(f"Font file not found: {path}", str(path))
    if path.suffix.lower() not in config.SUPPORTED_EXTENSIONS:
        raise errors.FontFileError(
            f"Unsupported font file extension: {path.suffix or '(none)'}", str(path)
        )

    try:
        font = _read_ttfont(str(path))
    except Exception as e:
        raise errors.FontMetricsError(
            f"Failed to read font metrics: {e}", str(path)
        ) from e

    try:
        metrics = read_metrics(font, str(path))
        source = naming.resolve_font_name_with_source(
            path,
            read_name_table(font),
            read_cff_names(font),
            metadata=read_woff_metadata(font),
            vendor_id=read_vendor_id(font),
        )
    except errors.NudgeError:
        raise
    except Exception as e:
        raise errors.FontMetricsError(
            f"Failed to read font metrics: {e}", str(path)
        ) from e
    finally:
        try:
            font.close()
        except Exception:
            pass

    logger.info(
        "Loaded %s: %r (ascent %s, descent %s, lineGap %s, UPM %s)",
        path.name,
        source.value,
        metrics.ascent,
        metrics.descent,
        metrics.line_gap,
        metrics.units_per_em,
    )
    return models.LoadedFont(
        family=family,
        path=str(path),
        name=source.value,
        metrics=metrics,
        name_source=source,
    )
