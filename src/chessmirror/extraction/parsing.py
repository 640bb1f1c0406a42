"""Token and text parsers used by the snapshot extractor.

Every helper is total: malformed input yields ``None`` (or the documented
default) instead of raising, so one odd element never aborts a cycle.
"""

from __future__ import annotations

import re

from chessmirror.core.enums import ArrowColor, Color, GameResult

# Class tokens used by the source site for piece sprites.
PIECE_TOKENS: dict[str, str] = {
    "wp": "P",
    "wn": "N",
    "wb": "B",
    "wr": "R",
    "wq": "Q",
    "wk": "K",
    "bp": "p",
    "bn": "n",
    "bb": "b",
    "br": "r",
    "bq": "q",
    "bk": "k",
}

_KIND_LETTERS: dict[str, str] = {
    "pawn": "p",
    "knight": "n",
    "bishop": "b",
    "rook": "r",
    "queen": "q",
}

_COLOR_PREFIX: dict[str, Color] = {
    "w": Color.WHITE,
    "white": Color.WHITE,
    "b": Color.BLACK,
    "black": Color.BLACK,
}

_CAPTURED_TOKEN_RE = re.compile(
    r"^captured-pieces-(?:(?P<color>white|black|w|b)-)?(?:(?P<count>\d+)-)?"
    r"(?P<kind>pawn|knight|bishop|rook|queen)s?$"
)
_OPACITY_RE = re.compile(r"opacity\s*:\s*([0-9]*\.?[0-9]+)")
_RGB_RE = re.compile(r"rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})")
_COUNTRY_TOKEN_RE = re.compile(r"^country-(\w+)$")
_WON_BY_NAME_RE = re.compile(r"^\s*(?P<name>\S.*?)\s+won\b", re.IGNORECASE)

DIMMED_OPACITY = 0.5
MARK_OPACITY = 0.8

# Checked in order: the first palette entry with a matching triple wins.
_ARROW_PALETTE: tuple[tuple[ArrowColor, tuple[tuple[int, int, int], ...]], ...] = (
    (ArrowColor.ORANGE, ((255, 170, 0),)),
    (ArrowColor.RED, ((255, 0, 0), (218, 64, 79), (248, 85, 63))),
    (ArrowColor.GREEN, ((0, 255, 0), (0, 128, 0), (101, 168, 58), (159, 207, 63))),
    (ArrowColor.BLUE, ((0, 0, 255), (82, 176, 220), (72, 193, 249))),
    (ArrowColor.YELLOW, ((255, 255, 0), (241, 194, 50))),
)

_DRAW_WORDS = (
    "draw",
    "stalemate",
    "½-½",
    "1/2-1/2",
    "agreement",
    "repetition",
    "insufficient",
)


def parse_clock(text: str | None) -> float | None:
    """Parse ``H:MM:SS``, ``M:SS`` or bare (possibly fractional) seconds.

    The format is chosen by counting ``:`` separators so locale or layout
    drift in the readout does not break parsing.
    """
    if not text:
        return None
    cleaned = "".join(ch for ch in text.strip() if ch.isdigit() or ch in ":.")
    if not cleaned:
        return None
    parts = cleaned.split(":")
    try:
        if len(parts) == 3:
            return int(parts[0]) * 3600 + int(parts[1]) * 60 + float(parts[2])
        if len(parts) == 2:
            return int(parts[0]) * 60 + float(parts[1])
        if len(parts) == 1:
            return float(parts[0])
    except ValueError:
        return None
    return None


def parse_rating(text: str | None) -> int | None:
    """Strip decoration such as ``(1500)`` and parse the digits."""
    if not text:
        return None
    digits = re.sub(r"\D", "", text)
    return int(digits) if digits else None


def parse_opacity(style: str) -> float | None:
    match = _OPACITY_RE.search(style)
    if match is None:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


def parse_rgb(style: str) -> tuple[int, int, int] | None:
    match = _RGB_RE.search(style)
    if match is None:
        return None
    r, g, b = (int(v) for v in match.groups())
    if max(r, g, b) > 255:
        return None
    return r, g, b


def format_rgb(rgb: tuple[int, int, int]) -> str:
    return f"rgb({rgb[0]}, {rgb[1]}, {rgb[2]})"


def classify_arrow_color(style: str) -> ArrowColor:
    """Map a free-form style string onto the fixed arrow palette.

    Unknown colours fall back to orange.
    """
    triples = {
        tuple(int(v) for v in m.groups()) for m in _RGB_RE.finditer(style)
    }
    for color, known in _ARROW_PALETTE:
        if any(triple in triples for triple in known):
            return color
    lowered = style.lower()
    for color in (
        ArrowColor.ORANGE,
        ArrowColor.RED,
        ArrowColor.GREEN,
        ArrowColor.BLUE,
        ArrowColor.YELLOW,
    ):
        if str(color) in lowered:
            return color
    return ArrowColor.ORANGE


def parse_captured_token(token: str, captured_by: Color) -> list[str]:
    """Expand a captured-piece marker into piece codes like ``bp``.

    ``captured-pieces-b-pawn`` and ``captured-pieces-b-3-pawns`` are both
    understood; without a colour prefix the pieces are assumed to belong to
    the opponent of *captured_by*.
    """
    match = _CAPTURED_TOKEN_RE.match(token)
    if match is None:
        return []
    prefix = match.group("color")
    color = _COLOR_PREFIX[prefix] if prefix else captured_by.opposite
    count = int(match.group("count") or 1)
    code = color.fen_char + _KIND_LETTERS[match.group("kind")]
    return [code] * count


def parse_country_token(classes: tuple[str, ...]) -> str | None:
    for token in classes:
        match = _COUNTRY_TOKEN_RE.match(token)
        if match is not None:
            return match.group(1)
    return None


def classify_result(
    text: str | None,
    orientation: Color,
    viewer_name: str | None = None,
) -> GameResult | None:
    """Derive win/loss/draw for the local (bottom) viewer from terminal text."""
    if not text:
        return None
    lowered = " ".join(text.lower().split())
    if not lowered:
        return None

    if any(word in lowered for word in _DRAW_WORDS):
        return GameResult.DRAW
    if "1-0" in lowered:
        return GameResult.WIN if orientation is Color.WHITE else GameResult.LOSS
    if "0-1" in lowered:
        return GameResult.WIN if orientation is Color.BLACK else GameResult.LOSS
    if "you won" in lowered or "you win" in lowered:
        return GameResult.WIN
    if "you lost" in lowered or "you lose" in lowered:
        return GameResult.LOSS

    match = _WON_BY_NAME_RE.match(text.strip())
    if match is None:
        return None
    winner = match.group("name").strip().lower()
    if winner in (str(Color.WHITE), str(Color.BLACK)):
        return GameResult.WIN if winner == str(orientation) else GameResult.LOSS
    if viewer_name:
        return GameResult.WIN if winner == viewer_name.lower() else GameResult.LOSS
    return None
