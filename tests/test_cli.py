import json

from helpers import make_font, minimal_config, write_config

from baseline_nudges.cli import EXIT_ERROR, EXIT_NOTHING_TO_DO, EXIT_OK, main
from baseline_nudges.errors import ConfigurationError, format_error


def test_init_writes_sample_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert main(["init"]) == EXIT_OK

    data = json.loads((tmp_path / "typography-config.json").read_text(encoding="utf-8"))
    assert data["baselineUnit"] == 0.5
    assert data["fontFile"] == "your-font.woff2"
    by_id = {e["identifier"]: e for e in data["elements"]}
    assert by_id["p"]["lineHeight"] == 3
    assert by_id["h1"]["lineHeight"] == 9


def test_init_refuses_to_overwrite(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "mine.json").write_text("{}", encoding="utf-8")

    assert main(["init", "mine"]) == EXIT_ERROR
    assert (tmp_path / "mine.json").read_text(encoding="utf-8") == "{}"
    assert main(["init", "mine", "--force"]) == EXIT_OK


def test_legacy_sample_generates(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    make_font(tmp_path / "your-font.ttf")

    assert main(["init", "--legacy"]) == EXIT_OK
    assert main(["generate", "typography-config-legacy.json"]) == EXIT_OK

    data = json.loads((tmp_path / "tokens.json").read_text(encoding="utf-8"))
    assert "display" in data["elements"]
    assert data["elements"]["display"]["spaceAfter"] == "2rem"


def test_generate_writes_tokens(tmp_path, capsys):
    make_font(tmp_path / "Test-Regular.ttf")
    config_path = write_config(tmp_path, minimal_config())

    code = main(["generate", str(config_path), "-o", str(tmp_path / "dist")])

    assert code == EXIT_OK
    assert (tmp_path / "dist" / "tokens.json").is_file()
    out = capsys.readouterr().out
    assert "Test Sans" in out
    assert "h1" in out


def test_generate_without_elements(tmp_path):
    make_font(tmp_path / "Test-Regular.ttf")
    config_path = write_config(tmp_path, minimal_config({"elements": []}))

    assert main(["generate", str(config_path)]) == EXIT_NOTHING_TO_DO
    assert not (tmp_path / "tokens.json").exists()


def test_generate_reports_configuration_errors(tmp_path, capsys):
    config_path = write_config(tmp_path, minimal_config({"baselineUnit": 0}))

    assert main(["generate", str(config_path)]) == EXIT_ERROR

    out = capsys.readouterr().out
    assert "ConfigurationError" in out
    assert "baselineUnit must be a positive number" in out


def test_inspect_shows_name_and_breakdown(tmp_path, capsys):
    path = make_font(tmp_path / "Test-Regular.ttf")

    assert main(["inspect", str(path), "--size", "2", "--line-height", "5", "--explain"]) == EXIT_OK

    out = capsys.readouterr().out
    assert "Test Sans" in out
    assert "baselineOffset" in out
    assert "nudgeTop" in out


def test_inspect_missing_file(tmp_path):
    assert main(["inspect", str(tmp_path / "missing.ttf")]) == EXIT_ERROR


def test_format_error_lists_validation_errors():
    error = ConfigurationError("Configuration validation failed", "a.json", ["one", "two"])

    text = format_error(error).build()

    assert "a.json" in text
    assert "• one" in text
    assert "• two" in text
    assert "baseline-nudges init" in text


def test_generate_reports_bad_legacy_values(tmp_path, capsys):
    make_font(tmp_path / "Test-Regular.ttf")
    config_path = write_config(
        tmp_path,
        {
            "baselineUnit": 0.5,
            "fontFile": "Test-Regular.ttf",
            "fontSizes": {"h1": 0, "p": 1},
            "lineHeights": {"h1": 4, "p": "3"},
            "spAfter": {},
        },
    )

    assert main(["generate", str(config_path)]) == EXIT_ERROR

    out = capsys.readouterr().out
    assert "fontSizes.h1" in out
    assert "lineHeights.p" in out
    assert not (tmp_path / "tokens.json").exists()
