"""Board orientation and panel-side resolution.

The page lays out two player panels, one below the board (the local viewer)
and one above it. Every color-relative field is read from a panel, so the
panel's side must be mapped to a color through the orientation, which is
resolved once per cycle.
"""

from __future__ import annotations

from enum import StrEnum

from chessmirror.core.enums import Color
from chessmirror.dom.interfaces import IDomNode

BOTTOM_PANEL = ".board-layout-bottom, .player-bottom, .board-player-default-bottom"
TOP_PANEL = ".board-layout-top, .player-top, .board-player-default-top"
PANEL = f"{BOTTOM_PANEL}, {TOP_PANEL}"

_CLOCK = ".clock-component"
_CLOCK_COLOR_TOKENS = {"clock-white": Color.WHITE, "clock-black": Color.BLACK}


class PanelSide(StrEnum):
    BOTTOM = "bottom"
    TOP = "top"


def panel_side(node: IDomNode) -> PanelSide | None:
    """Side of the nearest enclosing player panel (inclusive)."""
    panel = node.closest(PANEL)
    if panel is None:
        return None
    return PanelSide.BOTTOM if panel.matches(BOTTOM_PANEL) else PanelSide.TOP


def side_color(side: PanelSide, orientation: Color) -> Color:
    """Color playing on *side* given the viewer's *orientation*."""
    return orientation if side is PanelSide.BOTTOM else orientation.opposite


def node_color(node: IDomNode, orientation: Color) -> Color | None:
    side = panel_side(node)
    return None if side is None else side_color(side, orientation)


def resolve_orientation(document: IDomNode) -> Color:
    """Color the local viewer plays, read from the bottom panel.

    The clock in the bottom panel carries a ``clock-white`` /
    ``clock-black`` token; failing that the bottom panel may expose a
    ``data-color`` attribute. Defaults to white.
    """
    for clock in document.select(_CLOCK):
        if panel_side(clock) is not PanelSide.BOTTOM:
            continue
        for token in clock.classes:
            color = _CLOCK_COLOR_TOKENS.get(token)
            if color is not None:
                return color

    for panel in document.select(BOTTOM_PANEL):
        value = (panel.get_attribute("data-color") or "").strip().lower()
        if value in (Color.WHITE, Color.BLACK):
            return Color(value)

    return Color.WHITE
