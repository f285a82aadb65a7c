import pytest

from helpers import make_font

from baseline_nudges.errors import FontFileError, FontMetricsError
from baseline_nudges.font_io import (
    find_font_file,
    font_format,
    load_font,
    read_woff_metadata,
)


def test_load_font_reads_metrics_and_name(tmp_path):
    path = make_font(tmp_path / "Test-Regular.ttf", ascent=900, descent=-250, line_gap=50)

    loaded = load_font(path, family="body")

    assert loaded.family == "body"
    assert loaded.name == "Test Sans"
    assert loaded.name_source.name_id == 1
    assert loaded.metrics.ascent == 900
    assert loaded.metrics.descent == -250
    assert loaded.metrics.line_gap == 50
    assert loaded.metrics.units_per_em == 1000
    assert loaded.metrics.cap_height == 630


def test_typographic_family_wins_over_style_linked_family(tmp_path):
    path = make_font(
        tmp_path / "Acme-Light.ttf",
        names={
            "familyName": "Acme Light",
            "styleName": "Regular",
            "typographicFamily": "Acme",
            "typographicSubfamily": "Light",
            "fullName": "Acme Light",
            "psName": "Acme-Light",
        },
    )

    assert load_font(path).name == "Acme"


def test_vendor_id_used_when_names_are_placeholders(tmp_path):
    path = make_font(
        tmp_path / "123.ttf",
        names={
            "familyName": "Untitled",
            "styleName": "Regular",
            "fullName": "Untitled",
            "psName": "Untitled",
        },
        vendor="ACME",
    )

    loaded = load_font(path)

    assert loaded.name == "ACME"
    assert loaded.name_source.kind == "vendor-id"


def test_woff_metadata_is_read(tmp_path):
    metadata = b'<metadata><description><text lang="en">Meta Sans</text></description></metadata>'
    path = make_font(
        tmp_path / "meta.woff",
        names={
            "familyName": "Untitled",
            "styleName": "Regular",
            "fullName": "Untitled",
            "psName": "Untitled",
        },
        flavor="woff",
        metadata=metadata,
    )

    from fontTools.ttLib import TTFont

    font = TTFont(str(path))
    try:
        assert read_woff_metadata(font) == metadata
    finally:
        font.close()
    assert load_font(path).name == "Meta Sans"


def test_missing_font_file(tmp_path):
    with pytest.raises(FontFileError):
        load_font(tmp_path / "missing.ttf")


def test_unsupported_extension(tmp_path):
    path = tmp_path / "font.pfb"
    path.write_bytes(b"not a font")

    with pytest.raises(FontFileError):
        load_font(path)


def test_corrupt_font_file(tmp_path):
    path = tmp_path / "broken.ttf"
    path.write_bytes(b"\x00\x01\x00\x00garbage")

    with pytest.raises(FontMetricsError):
        load_font(path)


def test_find_font_file_tries_other_extensions(tmp_path):
    make_font(tmp_path / "Inter.ttf")

    assert find_font_file(tmp_path, "Inter.ttf") == tmp_path / "Inter.ttf"
    assert find_font_file(tmp_path, "Inter.woff2") == tmp_path / "Inter.ttf"
    assert find_font_file(tmp_path, "Other.woff2") is None


@pytest.mark.parametrize(
    "name,expected",
    [
        ("a.woff2", "woff2"),
        ("a.WOFF", "woff"),
        ("a.ttf", "truetype"),
        ("a.otf", "opentype"),
        ("a.xyz", "truetype"),
    ],
)
def test_font_format(name, expected):
    assert font_format(name) == expected
