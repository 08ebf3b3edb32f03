"""
Visibility: Decide whether a parsed desktop entry is shown to the user.

Rules are checked in order and the first one that matches rejects the entry:
- not an Application entry
- no Exec line
- Hidden=true or NoDisplay=true
- OnlyShowIn set and the current desktop is not listed
- NotShowIn lists the current desktop
"""

from enum import Enum
from typing import Optional

from slayfi.desktop_entry import EntryType, RawDesktopEntry


class Rejection(Enum):
    NOT_APPLICATION = "Not an application entry"
    NO_EXEC = "No exec field"
    HIDDEN = "Hidden or no display"
    ONLY_SHOW_IN = "Not compatible with current desktop environment"
    NOT_SHOW_IN = "Explicitly not shown in current desktop environment"


def check_visibility(entry: RawDesktopEntry, desktop_environment: str) -> Optional[Rejection]:
    """Return the reason ``entry`` is rejected, or None if it is shown."""
    if entry.entry_type is not EntryType.APPLICATION:
        return Rejection.NOT_APPLICATION

    if not entry.exec:
        return Rejection.NO_EXEC

    if entry.hidden or entry.no_display:
        return Rejection.HIDDEN

    only_show_in = entry.only_show_in or frozenset()
    if only_show_in and desktop_environment not in only_show_in:
        return Rejection.ONLY_SHOW_IN

    not_show_in = entry.not_show_in or frozenset()
    if desktop_environment in not_show_in:
        return Rejection.NOT_SHOW_IN

    return None


def is_visible(entry: RawDesktopEntry, desktop_environment: str) -> bool:
    return check_visibility(entry, desktop_environment) is None
