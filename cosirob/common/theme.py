from __future__ import annotations

import logging
from typing import Literal, cast, get_args

from nicegui import app, ui

ThemeMode = Literal["light", "dark"]


def get_palette(mode: ThemeMode) -> dict[str, str]:
    """Palette tokens for the given mode."""
    if mode == "dark":
        return {
            "primary": "#2563EB",
            "background": "#0F172A",
            "surface": "#1E293B",
            "text": "#E2E8F0",
            "muted": "#94A3B8",
            "accent": "#22D3EE",
            "positive": "#21BA45",
            "negative": "#DB2828",
            "warning": "#F2C037",
        }
    return {
        "primary": "#1D4ED8",
        "background": "#F1F5F9",
        "surface": "#FFFFFF",
        "text": "#0F172A",
        "muted": "#64748B",
        "accent": "#0891B2",
        "positive": "#21BA45",
        "negative": "#DB2828",
        "warning": "#F2C037",
    }


def apply_theme(mode: ThemeMode) -> None:
    """Set Quasar colors, dark mode and the CSS variables used by the log panels."""
    pal = get_palette(mode)
    ui.colors(
        primary=pal["primary"],
        accent=pal["accent"],
        positive=pal["positive"],
        negative=pal["negative"],
        warning=pal["warning"],
    )
    if mode == "dark":
        ui.dark_mode().enable()
    else:
        ui.dark_mode().disable()
    ui.add_css(
        f"""
:root {{
  --cr-bg: {pal["background"]};
  --cr-surface: {pal["surface"]};
  --cr-text: {pal["text"]};
  --cr-muted: {pal["muted"]};
  --cr-accent: {pal["accent"]};
}}
body, .q-page {{ background: var(--cr-bg); color: var(--cr-text); }}
.log-tx {{ color: var(--cr-accent); }}
.log-rx {{ color: {pal["positive"]}; }}
.log-error {{ color: {pal["negative"]}; }}
.log-warning {{ color: {pal["warning"]}; }}
.log-info {{ color: var(--cr-muted); }}
"""
    )
    logging.debug("Applied theme: %s", mode)


def set_theme(mode: ThemeMode) -> ThemeMode:
    """Persist, set and apply theme mode."""
    app.storage.general["theme_mode"] = mode
    apply_theme(mode)
    return mode


def get_theme() -> ThemeMode:
    mode = app.storage.general.get("theme_mode", "dark")
    if isinstance(mode, str) and mode in get_args(ThemeMode):
        return cast("ThemeMode", mode)
    return "dark"
