"""
Tolerant parsing of device protocol text.

Device firmware reply formats are not tightly specified, so the parsers here
match small token grammars inside free text instead of validating a schema:

- signed decimal: optional ``-``, digits, optional ``.`` and trailing digits
  (``12``, ``-2``, ``0.125``, ``7.``). Exponents and leading ``+`` are not tokens.
- numeric triple: the first three signed decimals, left to right, are x, y, z.
  Any other text and any further numbers are ignored.
- channel prefix: exactly two digits followed by whitespace at line start.
"""

from __future__ import annotations

import re

# Digits kept after every pose write (millimetres)
POSE_PRECISION = 3

SIGNED_DECIMAL_RE = re.compile(r"-?\d+\.?\d*")
CHANNEL_PREFIX_RE = re.compile(r"^\d{2}\s")
PLACEHOLDER_RE = re.compile(r"<([^>]+)>")


def round_coord(value: float) -> float:
    """Round a coordinate to POSE_PRECISION digits, normalizing -0.0."""
    r = round(float(value), POSE_PRECISION)
    return r + 0.0


def format_coord(value: float) -> str:
    """Shortest decimal text for a coordinate: 10, 5.123, -2.5."""
    text = f"{round_coord(value):.{POSE_PRECISION}f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def numeric_tokens(text: str) -> list[float]:
    """All signed-decimal tokens in text, in order."""
    return [float(tok) for tok in SIGNED_DECIMAL_RE.findall(text or "")]


def extract_triple(text: str) -> tuple[float, float, float] | None:
    """
    Extract (x, y, z) from a device reply.

    Returns None when fewer than three numeric tokens are present.
    """
    nums = numeric_tokens(text)
    if len(nums) < 3:
        return None
    x, y, z = nums[:3]
    return round_coord(x), round_coord(y), round_coord(z)


def looks_like_channel_prefixed(line: str) -> bool:
    """True if line starts with exactly two digits followed by whitespace."""
    return bool(CHANNEL_PREFIX_RE.match(line or ""))


def placeholders(syntax: str) -> list[str]:
    """Placeholder names of a syntax template, channel included."""
    return PLACEHOLDER_RE.findall(syntax)
