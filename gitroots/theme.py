"""Shared visual constants and helpers for gitroots."""

from __future__ import annotations

import time
from typing import Optional

from rich.style import Style
from rich.text import Text

# ── Color Palette (GitHub Dark) ─────────────────────────────────────────

SURFACE = "#161b22"
MUTED = "#8b949e"

CYAN = "#58a6ff"
GREEN = "#39d353"
YELLOW = "#e3b341"
RED = "#f85149"

# ── ASCII Banner ────────────────────────────────────────────────────────

BANNER = r"""
        _ _                   _
   __ _(_) |_ _ __ ___   ___ | |_ ___
  / _` | | __| '__/ _ \ / _ \| __/ __|
 | (_| | | |_| | | (_) | (_) | |_\__ \
  \__, |_|\__|_|  \___/ \___/ \__|___/
  |___/"""

TAGLINE = "every repo you've got"

ICON_REPO = "📦"
ICON_KNOWN = "★"


def format_age(timestamp: Optional[int], now: Optional[float] = None) -> str:
    """Render an epoch timestamp as a short relative age ("5m ago")."""
    if timestamp is None:
        return "never"
    now = time.time() if now is None else now
    seconds = max(int(now - timestamp), 0)
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if seconds >= size:
            return f"{seconds // size}{unit} ago"
    return "just now"


def render_banner() -> Text:
    """Render the gitroots ASCII banner as styled Rich Text."""
    text = Text(justify="center")
    for line in BANNER.strip("\n").split("\n"):
        text.append(line + "\n", style=Style(color=GREEN, bold=True))
    text.append(f"  {TAGLINE}\n", style=Style(color=MUTED, italic=True))
    return text
