"""
Desktop Entry: Parse the [Desktop Entry] group of a .desktop file.

Only the first [Desktop Entry] group is handed to the key/value parser. Some
files (realvnc-vncviewer.desktop for one) repeat keys such as Name inside
their [Desktop Action ...] groups, which a whole-file parse rejects.
"""

import configparser
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

DESKTOP_ENTRY_HEADER = "[Desktop Entry]"
DESKTOP_ENTRY_GROUP = "Desktop Entry"

# String escapes defined by the desktop entry format
_ESCAPES = {"s": " ", "n": "\n", "t": "\t", "r": "\r", "\\": "\\"}
_ESCAPE_RE = re.compile(r"\\(.)")
_LIST_SPLIT_RE = re.compile(r"(?<!\\);")
_LOCALIZED_KEY_RE = re.compile(r"^(?P<key>[A-Za-z0-9-]+)\[(?P<locale>[^\]]+)\]$")


class DesktopEntryError(Exception):
    """Raised when a desktop file has no usable [Desktop Entry] group."""


class EntryType(Enum):
    APPLICATION = "Application"
    LINK = "Link"
    DIRECTORY = "Directory"
    OTHER = "Other"

    @classmethod
    def from_value(cls, value: str) -> "EntryType":
        for member in cls:
            if member is not cls.OTHER and member.value == value:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class LocaleString:
    """A localized value. Only ``default`` is used by the launcher."""
    default: str
    variants: Dict[str, str] = field(default_factory=dict)


@dataclass
class RawDesktopEntry:
    """Parsed [Desktop Entry] group, before filtering and cleanup."""
    entry_type: EntryType
    type_name: str
    name: LocaleString
    comment: Optional[LocaleString] = None
    generic_name: Optional[LocaleString] = None
    icon: Optional[str] = None
    exec: Optional[str] = None
    try_exec: Optional[str] = None
    terminal: Optional[bool] = None
    hidden: Optional[bool] = None
    no_display: Optional[bool] = None
    only_show_in: Optional[FrozenSet[str]] = None
    not_show_in: Optional[FrozenSet[str]] = None
    categories: FrozenSet[str] = frozenset()


def extract_desktop_entry_section(text: str) -> str:
    """Return the first [Desktop Entry] group of ``text``, header included.

    The group runs up to the next line starting with ``[`` or the end of the
    text. Raises DesktopEntryError when there is no such group.
    """
    start = text.find(DESKTOP_ENTRY_HEADER)
    if start < 0:
        raise DesktopEntryError("no [Desktop Entry] section found")

    body = text[start + len(DESKTOP_ENTRY_HEADER):]
    end = body.find("\n[")
    if end >= 0:
        body = body[:end]
    return DESKTOP_ENTRY_HEADER + body


def unescape_string(value: str) -> str:
    """Decode the \\s, \\n, \\t, \\r and \\\\ escapes. Unknown escapes are kept."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), value)


def parse_list(value: str) -> FrozenSet[str]:
    """Split a semicolon-separated list value. Empty items are dropped."""
    items = (item.replace("\\;", ";").strip() for item in _LIST_SPLIT_RE.split(value))
    return frozenset(item for item in items if item)


def parse_boolean(key: str, value: str) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise DesktopEntryError(f"invalid boolean value for {key}: {value!r}")


def _make_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=True,
        delimiters=("=",),
        comment_prefixes=("#",),
        inline_comment_prefixes=None,
        empty_lines_in_values=False,
        default_section="\x00",  # no group of a desktop file is special
    )
    parser.optionxform = str  # keys are case-sensitive
    return parser


def _read_group(section_text: str) -> Dict[str, str]:
    # No continuation lines in desktop files: leading whitespace is ignored
    lines = "\n".join(line.lstrip() for line in section_text.splitlines())
    parser = _make_parser()
    try:
        parser.read_string(lines)
    except configparser.Error as exc:
        raise DesktopEntryError(f"malformed [Desktop Entry] section: {exc}") from exc
    return dict(parser[DESKTOP_ENTRY_GROUP])


def _locale_string(values: Dict[str, str], key: str) -> Optional[LocaleString]:
    variants = {}
    for raw_key, value in values.items():
        match = _LOCALIZED_KEY_RE.match(raw_key)
        if match and match.group("key") == key:
            variants[match.group("locale")] = unescape_string(value)

    if key not in values:
        return None
    return LocaleString(default=unescape_string(values[key]), variants=variants)


def _optional_bool(values: Dict[str, str], key: str) -> Optional[bool]:
    if key not in values:
        return None
    return parse_boolean(key, values[key])


def _optional_list(values: Dict[str, str], key: str) -> Optional[FrozenSet[str]]:
    if key not in values:
        return None
    return parse_list(values[key])


def _optional_str(values: Dict[str, str], key: str) -> Optional[str]:
    value = values.get(key)
    if value is None or value == "":
        return None
    return value


def parse_desktop_entry(text: str) -> RawDesktopEntry:
    """
    Parse the text of a desktop file into a RawDesktopEntry.

    Steps:
    1. Isolate the first [Desktop Entry] group (later groups are ignored)
    2. Parse it as Key=Value lines, rejecting duplicate keys and lines
       without '='
    3. Require Type and Name, decode booleans and lists

    Raises:
        DesktopEntryError: when the group is missing or malformed
    """
    values = _read_group(extract_desktop_entry_section(text))

    type_name = values.get("Type")
    if not type_name:
        raise DesktopEntryError("missing required key: Type")
    name = _locale_string(values, "Name")
    if name is None:
        raise DesktopEntryError("missing required key: Name")

    return RawDesktopEntry(
        entry_type=EntryType.from_value(type_name),
        type_name=type_name,
        name=name,
        comment=_locale_string(values, "Comment"),
        generic_name=_locale_string(values, "GenericName"),
        icon=_optional_str(values, "Icon"),
        # Exec keeps its own quoting rules, so it is not unescaped here
        exec=_optional_str(values, "Exec"),
        try_exec=_optional_str(values, "TryExec"),
        terminal=_optional_bool(values, "Terminal"),
        hidden=_optional_bool(values, "Hidden"),
        no_display=_optional_bool(values, "NoDisplay"),
        only_show_in=_optional_list(values, "OnlyShowIn"),
        not_show_in=_optional_list(values, "NotShowIn"),
        categories=_optional_list(values, "Categories") or frozenset(),
    )
