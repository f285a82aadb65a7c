import json
from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from baseline_nudges.models import FontMetrics

# Metrics of Inter Regular
INTER_METRICS = FontMetrics(ascent=1825, descent=-443, line_gap=0, units_per_em=2048)


def _rect(x0: int, y0: int, x1: int, y1: int):
    pen = TTGlyphPen(None)
    pen.moveTo((x0, y0))
    pen.lineTo((x1, y0))
    pen.lineTo((x1, y1))
    pen.lineTo((x0, y1))
    pen.closePath()
    return pen.glyph()


def make_font(
    path,
    *,
    ascent: int = 800,
    descent: int = -200,
    line_gap: int = 0,
    upm: int = 1000,
    names: dict | None = None,
    vendor: str = "????",
    flavor: str | None = None,
    metadata: bytes | None = None,
) -> Path:
    """
    Build a tiny TrueType font with the given vertical metrics and names.

    ``names`` is passed to FontBuilder.setupNameTable; ``flavor="woff"``
    writes a WOFF file, optionally carrying an extended metadata block.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fb = FontBuilder(upm, isTTF=True)
    fb.setupGlyphOrder([".notdef", "space", "H"])
    fb.setupCharacterMap({ord(" "): "space", ord("H"): "H"})
    fb.setupGlyf(
        {
            ".notdef": _rect(50, 0, upm // 2, ascent // 2),
            "space": TTGlyphPen(None).glyph(),
            "H": _rect(50, 0, upm // 2, (ascent * 7) // 10),
        }
    )
    fb.setupHorizontalMetrics(
        {".notdef": (upm // 2, 50), "space": (upm // 4, 0), "H": (upm // 2, 50)}
    )
    fb.setupHorizontalHeader(ascent=ascent, descent=descent, lineGap=line_gap)
    fb.setupNameTable(
        names
        if names is not None
        else {
            "familyName": "Test Sans",
            "styleName": "Regular",
            "fullName": "Test Sans Regular",
            "psName": "TestSans-Regular",
        }
    )
    fb.setupOS2(
        sTypoAscender=ascent,
        sTypoDescender=descent,
        sTypoLineGap=line_gap,
        usWinAscent=ascent,
        usWinDescent=abs(descent),
        sCapHeight=(ascent * 7) // 10,
        sxHeight=ascent // 2,
        usWeightClass=400,
        achVendID=vendor,
    )
    fb.setupPost()
    fb.setupMaxp()

    if flavor:
        fb.font.flavor = flavor
        if metadata is not None:
            from fontTools.ttLib.sfnt import WOFFFlavorData

            fb.font.flavorData = WOFFFlavorData()
            fb.font.flavorData.metaData = metadata
    fb.save(str(path))
    return path


def write_config(directory, data: dict, name: str = "typography-config.json") -> Path:
    path = Path(directory) / name
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path


def minimal_config(extra: dict | None = None) -> dict:
    config = {
        "baselineUnit": 0.5,
        "fontFile": "Test-Regular.ttf",
        "elements": [
            {"identifier": "h1", "fontSize": 2, "lineHeight": 5, "spaceAfter": 4},
            {"identifier": "p", "fontSize": 1, "lineHeight": 3},
        ],
    }
    if extra:
        config.update(extra)
    return config
