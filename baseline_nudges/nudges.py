"""Baseline nudge calculation: padding-top offsets that land text on the grid."""

import math
from typing import Dict, Optional

from . import config
from . import errors
from . import models

NudgeConfig = config.NudgeConfig
FontMetrics = models.FontMetrics
MetricsUnavailable = errors.MetricsUnavailable

DEFAULT_NUDGE_CONFIG = NudgeConfig()


def round_half_up(value: float, precision: int = 5) -> float:
    """Round to ``precision`` decimals with ties going up (towards +inf)."""
    factor = 10**precision
    return math.floor(value * factor + 0.5) / factor


def _check_positive(**values: float) -> None:
    for name, value in values.items():
        if value is None or value <= 0:
            raise ValueError(f"{name} must be a positive number, got {value!r}")


def nudge_breakdown(
    font_size: float,
    line_height: float,
    baseline_unit: float,
    metrics: Optional[FontMetrics],
    nudge_config: Optional[NudgeConfig] = None,
) -> Dict[str, float]:
    """Compute every intermediate value of the nudge calculation.

    Args:
        font_size: Element font size in rem
        line_height: Element line height in baseline units
        baseline_unit: Grid step in rem
        metrics: Metrics of the font the element is set in
        nudge_config: Drift compensation constants (default: 16px root, 1px drift)

    Returns:
        Dict of rem values keyed by step name; ``nudge`` is the final rounded result.

    Raises:
        MetricsUnavailable: If no metrics were supplied
        ValueError: If any size is not positive
    """
    if metrics is None:
        raise MetricsUnavailable()
    _check_positive(
        font_size=font_size, line_height=line_height, baseline_unit=baseline_unit
    )
    cfg = nudge_config or DEFAULT_NUDGE_CONFIG
    upm = metrics.units_per_em

    ascender = metrics.ascent * font_size / upm
    descender = abs(metrics.descent) * font_size / upm
    line_gap = metrics.line_gap * font_size / upm

    # Line gap counts towards the ascender side of the content area
    content_area = ascender + line_gap + descender
    line_height_rem = line_height * baseline_unit
    leading = line_height_rem - content_area

    # Gap split evenly above and below the glyph box
    baseline_offset = leading / 2 + ascender + line_gap / 2

    raw_nudge = (
        math.ceil(baseline_offset / baseline_unit) * baseline_unit - baseline_offset
    )

    compensation = 0.0
    if raw_nudge > 0:
        # Zero at 1rem, growing with size
        scale_factor = max(0.0, font_size - 1)
        drift = cfg.one_pixel_rem * cfg.drift_compensation_px
        compensation = drift / font_size * scale_factor

    nudge = raw_nudge - compensation
    wrapped = nudge < 0
    # Compensation can exceed a baseline unit below 1/16rem
    while nudge < 0:
        nudge += baseline_unit

    rounded = round_half_up(nudge, cfg.precision)
    if rounded >= baseline_unit:
        # Rounded onto the next grid line, same position as no nudge
        rounded = 0.0

    return {
        "ascender": ascender,
        "descender": descender,
        "lineGap": line_gap,
        "contentArea": content_area,
        "lineHeight": line_height_rem,
        "leading": leading,
        "baselineOffset": baseline_offset,
        "rawNudge": raw_nudge,
        "compensation": compensation,
        "wrapped": float(wrapped),
        "nudge": rounded,
    }


def calculate_nudge(
    font_size: float,
    line_height: float,
    baseline_unit: float,
    metrics: Optional[FontMetrics],
    nudge_config: Optional[NudgeConfig] = None,
) -> float:
    """Return the padding-top (rem) that moves the first baseline onto the grid.

    ``line_height`` is given in baseline units, so ``line_height * baseline_unit``
    is the CSS line-height in rem. The result is rounded to five decimals and is
    never negative.
    """
    return nudge_breakdown(
        font_size, line_height, baseline_unit, metrics, nudge_config
    )["nudge"]


class NudgeCalculator:
    """Nudge calculation bound to the currently loaded font metrics."""

    def __init__(
        self,
        metrics: Optional[FontMetrics] = None,
        nudge_config: Optional[NudgeConfig] = None,
    ):
        self.metrics = metrics
        self.nudge_config = nudge_config or DEFAULT_NUDGE_CONFIG

    def load(self, metrics: FontMetrics) -> "NudgeCalculator":
        self.metrics = metrics
        return self

    def nudge(self, font_size: float, line_height: float, baseline_unit: float) -> float:
        if self.metrics is None:
            raise MetricsUnavailable()
        return calculate_nudge(
            font_size, line_height, baseline_unit, self.metrics, self.nudge_config
        )
