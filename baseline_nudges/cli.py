"""CLI parsing and main orchestration."""

import argparse
import json
import math
import sys
import time
from pathlib import Path
from typing import List, Optional

from . import config
from . import console_styles as cs
from . import errors
from . import font_io
from . import nudges
from . import tokens
from . import validation
from .logging_config import Verbosity, configure_logging, get_logger

console = cs.get_console()
logger = get_logger(__name__)

NudgeConfig = config.NudgeConfig

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOTHING_TO_DO = 2

SAMPLE_BASELINE_UNIT = 0.5
SAMPLE_FONT_SIZES = [
    ("h1", 4),
    ("h2", 3.5),
    ("h3", 3),
    ("h4", 2.5),
    ("h5", 2),
    ("h6", 1.5),
    ("p", 1),
]
SAMPLE_LEGACY = {
    "display": (4, 5, 4),
    "h1": (2, 4, 4),
    "h2": (1.5, 3, 3),
    "h3": (1.25, 3, 2),
    "h4": (1, 3, 2),
    "default": (1, 3, 2),
    "small": (0.875, 2, 1),
    "x-small": (0.75, 2, 1),
}


def get_version() -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("baseline-nudges")
    except PackageNotFoundError:
        return "0.0.0+unknown"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="baseline-nudges",
        description="Generate baseline grid nudges from real font metrics",
        epilog=errors.SUPPORTED_FORMATS_HINT,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v details, -vv debug)",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    generate = sub.add_parser(
        "generate", help="Generate tokens.json from a typography config"
    )
    generate.add_argument("config", help="Path to the JSON configuration file")
    generate.add_argument(
        "-o",
        "--output-dir",
        default=None,
        metavar="DIR",
        help="Where to write tokens.json (default: next to the config file)",
    )

    inspect = sub.add_parser(
        "inspect", help="Show the resolved name and metrics of font files"
    )
    inspect.add_argument("fonts", nargs="+", metavar="FONT", help="Font files")
    sizing = inspect.add_argument_group("nudge preview")
    sizing.add_argument(
        "--size", type=float, default=1.0, metavar="REM", help="Font size (default: 1)"
    )
    sizing.add_argument(
        "--line-height",
        type=float,
        default=3.0,
        metavar="UNITS",
        help="Line height in baseline units (default: 3)",
    )
    sizing.add_argument(
        "--baseline",
        type=float,
        default=SAMPLE_BASELINE_UNIT,
        metavar="REM",
        help="Baseline unit (default: 0.5)",
    )
    inspect.add_argument(
        "--explain",
        action="store_true",
        help="Show every intermediate value of the nudge calculation",
    )

    init = sub.add_parser("init", help="Create an example configuration file")
    init.add_argument(
        "name",
        nargs="?",
        default=None,
        help="File name without extension (default: typography-config)",
    )
    init.add_argument(
        "--legacy",
        action="store_true",
        help="Write the legacy fontSizes/lineHeights/spAfter format",
    )
    init.add_argument(
        "-f", "--force", action="store_true", help="Overwrite an existing file"
    )
    return parser.parse_args(argv)


# ---------- generate ----------


def run_generate(args: argparse.Namespace) -> int:
    start_time = time.time()
    config_path = Path(args.config)

    cs.StatusIndicator("parsing").add_file(config_path, filename_only=False).emit(
        console
    )
    typography = validation.load_config(config_path)
    for warning in typography.warnings:
        cs.StatusIndicator("warning").add_message(warning).emit(console)

    if not typography.elements:
        cs.StatusIndicator("warning").add_message(
            "No typography elements configured, nothing to generate"
        ).emit(console)
        return EXIT_NOTHING_TO_DO

    with cs.create_progress_bar(console) as progress:
        fonts = tokens.load_fonts(typography, progress)

    for family, loaded in fonts.items():
        indicator = cs.StatusIndicator("info").add_message(
            f"[field]{family}[/field]: {loaded.name}"
        )
        if loaded.name_source is not None:
            indicator.with_explanation(loaded.name_source.describe())
        indicator.add_item(
            f"ascent {loaded.metrics.ascent}, descent {loaded.metrics.descent}, "
            f"lineGap {loaded.metrics.line_gap}, UPM {loaded.metrics.units_per_em}"
        ).emit(console)

    token_set = tokens.build_token_set(typography, fonts)
    output_dir = args.output_dir or typography.base_dir
    output_path = tokens.write_tokens(token_set, output_dir)

    cs.emit("", console=console)
    summary = cs.StatusIndicator("saved").add_file(output_path, filename_only=False)
    summary.add_message(
        f"with {cs.fmt_count(len(token_set.elements))} element(s)"
    )
    for name, token in token_set.elements.items():
        summary.add_item(
            f"[field]{name}[/field] {token.font_size} / {token.line_height}"
            f"  nudge {token.nudge_top}  after {token.space_after}"
            f"  [darktext.dim]({token.font_family})[/darktext.dim]"
        )
    summary.emit(console)
    cs.emit(
        f"{cs.INDENT}[darktext.dim]Total time: [bold]{time.time() - start_time:.1f}[/bold]s[/darktext.dim]",
        console=console,
    )
    return EXIT_OK


# ---------- inspect ----------


def _emit_breakdown(breakdown) -> None:
    indicator = cs.StatusIndicator("info").add_message("Nudge breakdown (rem)")
    for key, value in breakdown.items():
        if key == "wrapped":
            indicator.add_item(f"{key}: {'yes' if value else 'no'}")
        else:
            indicator.add_item(f"{key}: {tokens.format_number(value)}")
    indicator.emit(console)


def run_inspect(args: argparse.Namespace) -> int:
    for flag, value in (
        ("--size", args.size),
        ("--line-height", args.line_height),
        ("--baseline", args.baseline),
    ):
        if value <= 0:
            cs.StatusIndicator("error").add_message(
                f"{flag} must be a positive number, got {value}"
            ).emit(console)
            return EXIT_ERROR

    nudge_config = NudgeConfig()
    failures = 0
    for font_path in args.fonts:
        try:
            loaded = font_io.load_font(font_path)
        except errors.NudgeError as e:
            errors.format_error(e).emit(console)
            failures += 1
            continue

        metrics = loaded.metrics
        cs.StatusIndicator("success").add_file(font_path).add_message(
            f"→ [field]{loaded.name}[/field]"
        ).with_explanation(loaded.name_source.describe()).add_item(
            f"format: {font_io.font_format(font_path)}"
        ).add_item(
            f"ascent {metrics.ascent}, descent {metrics.descent}, "
            f"lineGap {metrics.line_gap}, UPM {metrics.units_per_em}"
        ).add_item(
            f"capHeight {tokens.format_number(metrics.cap_height or 0)}, "
            f"xHeight {tokens.format_number(metrics.x_height or 0)}"
        ).emit(console)

        breakdown = nudges.nudge_breakdown(
            args.size, args.line_height, args.baseline, metrics, nudge_config
        )
        cs.StatusIndicator("info").add_message(
            f"{args.size}rem / {args.line_height} × {args.baseline}rem"
        ).add_message(
            f"nudgeTop [value.new]{tokens.format_rem(breakdown['nudge'])}[/value.new]"
        ).emit(console)
        if args.explain:
            _emit_breakdown(breakdown)
    return EXIT_ERROR if failures else EXIT_OK


# ---------- init ----------


def sample_config() -> dict:
    """Example configuration; line height is one baseline unit above the font size."""
    elements = []
    for identifier, font_size in SAMPLE_FONT_SIZES:
        units_in_font_size = math.ceil(font_size / SAMPLE_BASELINE_UNIT)
        elements.append(
            {
                "identifier": identifier,
                "fontSize": font_size,
                "lineHeight": units_in_font_size + 1,
            }
        )
    return {
        "font": "Inter",
        "baselineUnit": SAMPLE_BASELINE_UNIT,
        "fontFile": "your-font.woff2",
        "elements": elements,
    }


def sample_legacy_config() -> dict:
    return {
        "baselineUnit": SAMPLE_BASELINE_UNIT,
        "fontFile": "your-font.woff2",
        "fontSizes": {key: values[0] for key, values in SAMPLE_LEGACY.items()},
        "lineHeights": {key: values[1] for key, values in SAMPLE_LEGACY.items()},
        "spAfter": {key: values[2] for key, values in SAMPLE_LEGACY.items()},
    }


def run_init(args: argparse.Namespace) -> int:
    default_name = "typography-config-legacy" if args.legacy else "typography-config"
    path = Path(f"{args.name or default_name}.json")
    if path.exists() and not args.force:
        cs.StatusIndicator("error").add_file(path).with_explanation(
            "already exists"
        ).add_item("Use --force to overwrite").emit(console)
        return EXIT_ERROR

    data = sample_legacy_config() if args.legacy else sample_config()
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")

    indicator = cs.StatusIndicator("saved").add_file(path)
    indicator.add_item(f"Baseline unit: {data['baselineUnit']}rem")
    indicator.add_item(f"Font file: {data['fontFile']} (add this file next to the config)")
    if not args.legacy:
        for element in data["elements"]:
            line_height_rem = element["lineHeight"] * data["baselineUnit"]
            indicator.add_item(
                f"{element['identifier']}: {element['fontSize']}rem / "
                f"{tokens.format_number(line_height_rem)}rem",
                indent_level=2,
            )
    indicator.emit(console)
    cs.StatusIndicator("info").add_message(
        f"Then run: baseline-nudges generate {path}"
    ).emit(console)
    return EXIT_OK


COMMANDS = {
    "generate": run_generate,
    "inspect": run_inspect,
    "init": run_init,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(Verbosity.from_count(args.verbose))
    try:
        return COMMANDS[args.command](args)
    except errors.NudgeError as e:
        cs.emit("", console=console)
        errors.format_error(e).emit(console)
        logger.debug("Command %s failed", args.command, exc_info=True)
        return EXIT_ERROR
    except KeyboardInterrupt:
        cs.StatusIndicator("warning").add_message("Interrupted").emit(console)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
