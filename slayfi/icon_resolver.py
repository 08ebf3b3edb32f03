"""
Icon Resolver: Turn the Icon= value of a desktop entry into a file path.

Lookup order:
1. An absolute path that exists (or exists with a common extension added)
2. The icon theme lookup with the default theme
3. The configured fallback theme at 48px, for themes the default lookup
   misses (KDE themes are only found when named explicitly)

Any miss ends with "" so callers never see None.
"""

import logging
import os
from typing import Callable, Optional

from xdg import IconTheme
from xdg.Exceptions import ParsingError

logger = logging.getLogger(__name__)

FALLBACK_ICON_SIZE = 48
ICON_EXTENSIONS = (".png", ".svg", ".xpm")

# (icon name, size or None, theme or None) -> path or None
IconLookup = Callable[[str, Optional[int], Optional[str]], Optional[str]]


def xdg_icon_lookup(icon_name: str, size: Optional[int] = None,
                    theme: Optional[str] = None) -> Optional[str]:
    """Look up an icon in the installed freedesktop icon themes (pyxdg)."""
    try:
        path = IconTheme.getIconPath(icon_name, size, theme)
    except (OSError, ValueError, ParsingError) as exc:
        logger.debug("Icon lookup failed for %s: %s", icon_name, exc)
        return None
    if path and os.path.isfile(path):
        return path
    return None


def _existing_absolute_path(icon: str) -> Optional[str]:
    if not os.path.isabs(icon):
        return None
    if os.path.isfile(icon):
        return icon
    for ext in ICON_EXTENSIONS:
        if os.path.isfile(icon + ext):
            return icon + ext
    return None


class IconResolver:
    """Resolves icon references with an optional fallback theme."""

    def __init__(self, fallback_theme: str = "", lookup: Optional[IconLookup] = None):
        self.fallback_theme = fallback_theme
        self._lookup = lookup or xdg_icon_lookup
        # pyxdg reloads its theme index whenever the theme changes between
        # calls, so each (name, size, theme) is asked once per resolver
        self._found = {}

    def _lookup_once(self, icon: str, size: Optional[int], theme: Optional[str]) -> Optional[str]:
        key = (icon, size, theme)
        if key not in self._found:
            self._found[key] = self._lookup(icon, size, theme)
        return self._found[key]

    def find_icon_path(self, icon: str) -> Optional[str]:
        """Standard lookup: absolute path first, then the default theme."""
        path = _existing_absolute_path(icon)
        if path:
            return path
        return self._lookup_once(icon, None, None)

    def resolve(self, icon: Optional[str], app_name: str = "") -> str:
        if not icon:
            logger.debug("No icon found for %s", app_name)
            return ""

        path = self.find_icon_path(icon)
        if path:
            return path

        logger.debug("No icon path found for %s", app_name)
        if not self.fallback_theme:
            return ""

        path = self._lookup_once(icon, FALLBACK_ICON_SIZE, self.fallback_theme)
        return path or ""
