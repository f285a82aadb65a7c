from types import SimpleNamespace

import pytest

from baseline_nudges.models import NameRecord
from baseline_nudges.naming import (
    cleanup_font_name,
    is_valid_font_name,
    iter_name_candidates,
    normalize_name_table,
    resolve_font_name,
    resolve_font_name_with_source,
)


def test_preferred_family_from_primary_table():
    result = resolve_font_name_with_source(
        "fonts/Inter-Regular.woff2", {"preferredFamily": {"en": "Inter"}}
    )

    assert result.value == "Inter"
    assert result.kind == "table-entry"
    assert result.name_id == 16


def test_numbered_webfont_file_name():
    assert resolve_font_name("fonts/2-MyFont-webfont.ttf") == "MyFont"


def test_licence_noise_is_stripped_from_file_name():
    name = resolve_font_name(
        "fonts/licensed-for-use-only-v2.ttf", {"fullName": {"en": "For Use Only v2"}}
    )

    assert name == "Licensed"


def test_regular_suffix_dropped_from_path_name():
    assert resolve_font_name("Inter-Regular.ttf") == "Inter"


def test_weight_and_style_words_are_kept():
    name = resolve_font_name(
        "fonts/x.ttf", {"fullName": {"en": "Acme Sans Bold Italic"}}
    )

    assert name == "Acme Sans Bold Italic"


def test_digits_only_file_name_gives_unknown_font():
    assert resolve_font_name("123.ttf") == "Unknown Font"


def test_typographic_family_beats_family_name():
    table = {
        "fontFamily": {"en": "Acme Sans Light"},
        "preferredFamily": {"en": "Acme Sans"},
    }

    assert resolve_font_name("a.ttf", table) == "Acme Sans"


def test_windows_platform_beats_mac():
    table = [
        {"nameID": 1, "platformID": 1, "value": "Mac Name"},
        {"nameID": 1, "platformID": 3, "value": "Windows Name"},
    ]

    result = resolve_font_name_with_source("a.ttf", table)

    assert result.value == "Windows Name"
    assert result.platform == "windows"


def test_secondary_table_used_when_primary_is_unusable():
    result = resolve_font_name_with_source(
        "a.ttf",
        {"fontFamily": {"en": "Untitled"}},
        {"fontFamily": {"en": "Real Family"}},
    )

    assert result.value == "Real Family"
    assert result.table == "secondary"


def test_woff_metadata_description():
    metadata = (
        b'<?xml version="1.0"?>\n<metadata version="1.0">\n'
        b'  <description>\n    <text lang="en">Meta Sans</text>\n  </description>\n'
        b"</metadata>"
    )

    result = resolve_font_name_with_source("123.woff", metadata=metadata)

    assert result.value == "Meta Sans"
    assert result.kind == "metadata-xml"


def test_vendor_id_used_before_path():
    result = resolve_font_name_with_source("fonts/MyFont.ttf", vendor_id="ACME")

    assert result.value == "ACME"
    assert result.kind == "vendor-id"


@pytest.mark.parametrize("vendor", ["NONE", "XXXX", "UKWN", "    ", b"\x00\x00\x00\x00"])
def test_placeholder_vendor_ids_are_skipped(vendor):
    assert resolve_font_name("fonts/MyFont.ttf", vendor_id=vendor) == "MyFont"


def test_parent_directory_used_when_file_name_is_unusable():
    assert resolve_font_name("assets/merriweather-fonts/123.ttf") == "merriweather"


def test_failing_source_does_not_stop_resolution():
    class BrokenTable:
        @property
        def names(self):
            raise RuntimeError("corrupt name table")

    assert resolve_font_name("fonts/MyFont.ttf", BrokenTable()) == "MyFont"


def test_fonttools_style_records():
    records = [
        SimpleNamespace(nameID=4, platformID=3, toUnicode=lambda: "Tools Sans Bold"),
        SimpleNamespace(nameID=1, platformID=3, toUnicode=lambda: "Tools Sans"),
    ]

    assert resolve_font_name("a.ttf", SimpleNamespace(names=records)) == "Tools Sans"


def test_normalize_localized_mapping():
    table = normalize_name_table(
        {"fontFamily": {"de": "Schrift", "en": "Script"}, "fullName": "Script Bold"}
    )

    assert table == (NameRecord(1, None, "Script"), NameRecord(4, None, "Script Bold"))


def test_candidates_are_yielded_in_priority_order():
    kinds = [
        c.kind
        for c in iter_name_candidates(
            "fonts/MyFont.ttf",
            {"fontFamily": {"en": "Table Name"}},
            metadata=b"<description><text>Meta</text></description>",
            vendor_id="ACME",
        )
    ]

    assert kinds[:4] == ["table-entry", "metadata-xml", "vendor-id", "path-derived"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Inter Variable", "Inter"),
        ("Foo Sans (Beta)", "Foo Sans"),
        ("Foo-webfont", "Foo"),
        ("Foo Sans git-abc123", "Foo Sans"),
        ("Foo Sans Version 2.001", "Foo Sans"),
        ("Foo Sans v2", "Foo Sans"),
        ("Foo Sans Regular", "Foo Sans"),
        ("Foo Sans Bold Regular", "Foo Sans Bold Regular"),
        ("Foo Normal", "Foo"),
        ("Irregular", "Irregular"),
        ("Abnormal", "Abnormal"),
        ("  Foo   Sans  ", "Foo Sans"),
    ],
)
def test_cleanup_font_name(raw, expected):
    assert cleanup_font_name(raw) == expected


@pytest.mark.parametrize(
    "name",
    ["", "x", "...", "Font", "Regular", "Sample Sans", "Build 2024-01-02", "12345", "Café", "Foo.ttf"],
)
def test_invalid_names(name):
    assert not is_valid_font_name(name)


@pytest.mark.parametrize(
    "path,primary",
    [
        (None, None),
        ("", {}),
        ("fonts/.ttf", None),
        ("fonts/demo.woff2", {"fontFamily": {"en": "Demo"}}),
        ("fonts/font.ttf", [{"nameID": 1, "platformID": 3, "value": "Ä"}]),
        ("___/---.otf", {"fullName": {"en": "2024-01-01"}}),
        ("fonts/untitled-1.ttf", {"postScriptName": {"en": "v1"}}),
    ],
)
def test_resolved_name_is_always_valid(path, primary):
    assert is_valid_font_name(resolve_font_name(path, primary))
