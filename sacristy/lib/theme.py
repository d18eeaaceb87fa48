"""Site theme colors as CSS custom properties.

The public site reads its palette from the ``theme`` settings group. The
settings are typed into :class:`ThemeSettings`, mapped to CSS variables by the
pure :func:`compute_css_variables`, and exposed to templates through the
``theme_css`` Jinja global backed by a short-lived :class:`ThemeContext` cache.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, fields
from typing import Any, Callable

from markupsafe import Markup

from sacristy.lib.settings_codec import decode_group, is_valid_color, is_valid_font

THEME_CACHE_TTL = 300.0


@dataclass(frozen=True)
class ThemeSettings:
    primary_color_from: str = "#19274e"
    primary_color_to: str = "#2a3b63"
    use_primary_gradient: bool = True
    secondary_color_from: str = "#1a3a70"
    secondary_color_to: str = "#2d5299"
    use_secondary_gradient: bool = True
    text_color_dark: str = "#374151"
    text_color_light: str = "#FFFFFF"
    background_color_light: str = "#F9FAFB"
    background_color_dark: str = "#19274e"
    accent_color_1: str = "#60a5fa"
    accent_color_2: str = "#93c5fd"
    button_text_color: str = "#FFFFFF"
    header_text_color: str = "#FFFFFF"
    header_font_family: str = "Inter"
    hero_title: str = "Tradição e Fé"
    hero_description: str = ""

    @classmethod
    def from_settings(cls, values: dict[str, Any]) -> "ThemeSettings":
        """Build from decoded ``site_*`` setting values, ignoring unknown keys."""
        kwargs = {}
        for f in fields(cls):
            key = f"site_{f.name}"
            if key in values and values[key] is not None:
                kwargs[f.name] = values[key]
        return cls(**kwargs)

    @classmethod
    def from_stored(cls, stored: dict[str, str | None]) -> "ThemeSettings":
        """Build from raw values as read from the settings table."""
        return cls.from_settings(decode_group("theme", stored))


_DEFAULTS = {f.name: f.default for f in fields(ThemeSettings)}


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _color(theme: ThemeSettings, name: str) -> str:
    value = getattr(theme, name)
    return value if is_valid_color(value) else _DEFAULTS[name]


def _font(theme: ThemeSettings) -> str:
    value = theme.header_font_family
    return value if is_valid_font(value) else _DEFAULTS["header_font_family"]


def compute_css_variables(theme: ThemeSettings) -> dict[str, str]:
    """Map theme settings to CSS custom property values.

    Colors and the font name that fail validation are replaced by their
    defaults, since the result is emitted unescaped.
    """
    return {
        "--color-primary-from": _color(theme, "primary_color_from"),
        "--color-primary-to": _color(theme, "primary_color_to"),
        "--use-primary-gradient": _flag(theme.use_primary_gradient),
        "--color-secondary-from": _color(theme, "secondary_color_from"),
        "--color-secondary-to": _color(theme, "secondary_color_to"),
        "--use-secondary-gradient": _flag(theme.use_secondary_gradient),
        "--color-text-dark": _color(theme, "text_color_dark"),
        "--color-text-light": _color(theme, "text_color_light"),
        "--color-background-light": _color(theme, "background_color_light"),
        "--color-background-dark": _color(theme, "background_color_dark"),
        "--color-accent-1": _color(theme, "accent_color_1"),
        "--color-accent-2": _color(theme, "accent_color_2"),
        "--color-button-text": _color(theme, "button_text_color"),
        "--color-header-text": _color(theme, "header_text_color"),
        "--site-header-font-family": (
            f"'{_font(theme)}', system-ui, -apple-system, sans-serif"
        ),
    }


def render_css_block(variables: dict[str, str]) -> str:
    """Render variables as a ``:root`` rule for an inline ``<style>`` tag."""
    lines = [f"  {name}: {value};" for name, value in variables.items()]
    return ":root {\n" + "\n".join(lines) + "\n}"


class ThemeContext:
    """Process-wide cache of the current theme.

    Refreshed lazily once the TTL expires and dropped whenever the theme
    group is saved.
    """

    def __init__(self, ttl: float = THEME_CACHE_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._theme: ThemeSettings | None = None
        self._loaded_at = 0.0

    @property
    def is_fresh(self) -> bool:
        return self._theme is not None and self._clock() - self._loaded_at < self.ttl

    @property
    def theme(self) -> ThemeSettings:
        return self._theme or ThemeSettings()

    def set(self, theme: ThemeSettings) -> None:
        self._theme = theme
        self._loaded_at = self._clock()

    def invalidate(self) -> None:
        self._theme = None
        self._loaded_at = 0.0

    def css(self) -> str:
        return render_css_block(compute_css_variables(self.theme))


theme_context = ThemeContext()


async def refresh_theme(db_session, context: ThemeContext = theme_context) -> ThemeSettings:
    """Reload the theme from the database unless the cached copy is fresh."""
    if context.is_fresh:
        return context.theme

    from sacristy.db.services.setting_service import get_group

    theme = ThemeSettings.from_settings(await get_group(db_session, "theme"))
    context.set(theme)
    return theme


def theme_css() -> Markup:
    """Jinja global: the cached theme rendered as a ``:root`` block."""
    return Markup(theme_context.css())
