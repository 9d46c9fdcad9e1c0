"""Link-quality (LQI) to edge style tiers."""

from __future__ import annotations

from zhaviz.models.schemas import EdgeColor, EdgeStyle
from zhaviz.utils.formatting import parse_leading_int

STRONG_LQI = 192
MEDIUM_LQI = 128

TIER_COLORS: dict[str, str] = {
    "strong": "#17ab00",
    "medium": "#e6b402",
    "weak": "#bfbfbf",
}


def parse_lqi(value: object) -> float:
    """LQI as a number; NaN when the reported value is not numeric."""
    return parse_leading_int(value)


def edge_length(lqi: float) -> float:
    """Preferred edge length, shorter for stronger links."""
    return 2000 - 4 * lqi


def classify_lqi(lqi: float) -> EdgeStyle:
    """Map a link-quality value to its visual tier.

    NaN fails both threshold comparisons and lands in the weak tier.
    Per-edge physics is off in every tier so the layout keeps the asserted
    lengths across refreshes.
    """
    if lqi > STRONG_LQI:
        tier, width = "strong", lqi / 20
    elif lqi > MEDIUM_LQI:
        tier, width = "medium", 9
    else:
        tier, width = "weak", 1

    color = TIER_COLORS[tier]
    return EdgeStyle(
        tier=tier,
        color=EdgeColor(color=color, highlight=color),
        width=width,
        length=edge_length(lqi),
        physics=False,
    )
