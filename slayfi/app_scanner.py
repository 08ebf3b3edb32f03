"""
App Scanner: Discover installed Linux applications from .desktop files.

Walks every lookup directory recursively, parses each .desktop entry, drops
the ones that should not be shown in the current desktop, cleans the Exec
line and resolves the icon path. The resulting list keeps traversal order
and is written to the cache once the walk is done.
"""

import logging
import os
from typing import Iterator, List, Optional

from slayfi.app_cache import AppCache
from slayfi.desktop_entry import DesktopEntryError, parse_desktop_entry
from slayfi.exec_sanitizer import build_launch_command
from slayfi.icon_resolver import IconResolver
from slayfi.models import Application, ScanSettings
from slayfi.visibility import check_visibility

logger = logging.getLogger(__name__)

DESKTOP_FILE_SUFFIX = ".desktop"


def iter_desktop_files(lookup_dir: str) -> Iterator[str]:
    """Yield .desktop files under ``lookup_dir`` in directory walk order."""
    if not os.path.isdir(lookup_dir):
        logger.debug("Skipping lookup dir %s: not a directory", lookup_dir)
        return

    for dirpath, dirnames, filenames in os.walk(lookup_dir, onerror=_log_walk_error):
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            if not filename.endswith(DESKTOP_FILE_SUFFIX):
                logger.debug("Skipping '%s': not a desktop file", path)
                continue
            # Symlinks are followed, dangling ones dropped
            if not os.path.isfile(path):
                logger.debug("Skipping '%s': not a regular file", path)
                continue
            yield path


def _log_walk_error(exc: OSError) -> None:
    logger.error("Error while walking %s: %s", exc.filename, exc)


def parse_application_file(path: str, settings: ScanSettings,
                           icon_resolver: IconResolver) -> Optional[Application]:
    """Run one desktop file through the pipeline. Returns None when skipped."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Error reading file %s: %s", path, exc)
        return None

    try:
        entry = parse_desktop_entry(content)
    except DesktopEntryError as exc:
        logger.error("Error parsing desktop file %s: %s", path, exc)
        return None

    app_name = entry.name.default
    rejection = check_visibility(entry, settings.desktop_environment)
    if rejection is not None:
        logger.debug("Skipping %s: %s", app_name or path, rejection.value)
        return None

    exec_cmd = build_launch_command(
        entry.exec,
        app_name,
        terminal=bool(entry.terminal),
        terminal_app=settings.terminal_app,
    )

    return Application(
        name=app_name,
        comment=entry.comment.default if entry.comment else "",
        icon=icon_resolver.resolve(entry.icon, app_name),
        exec=exec_cmd,
    )


def scan_applications(settings: ScanSettings, cache: Optional[AppCache] = None,
                      icon_resolver: Optional[IconResolver] = None) -> List[Application]:
    """
    Scan the lookup directories for applications.

    Files that cannot be read or parsed, and entries that are filtered out,
    are skipped. After the walk the list is saved to ``cache`` (the default
    cache location when None); a failed save is logged and ignored.

    Returns the applications in traversal order.
    """
    if cache is None:
        cache = AppCache()
    if icon_resolver is None:
        icon_resolver = IconResolver(settings.icon_theme_fallback)

    logger.debug("Current desktop environment: %s", settings.desktop_environment)
    logger.debug("Current default terminal: %s", settings.terminal_app)
    logger.debug("Current fallback icon theme: %s", settings.icon_theme_fallback)

    apps = []
    for lookup_dir in settings.lookup_dirs:
        for path in iter_desktop_files(lookup_dir):
            logger.debug("Processing: %s", path)
            app = parse_application_file(path, settings, icon_resolver)
            if app is None:
                continue
            logger.debug("Adding application: %s", app)
            apps.append(app)

    logger.info("Total applications found: %d", len(apps))

    try:
        cache.save(apps)
        logger.info("Applications cached to %s", cache.path)
    except OSError as exc:
        logger.error("Error occurred when writing cache to file: %s", exc)

    return apps
