import pytest

from slayfi.desktop_entry import (
    DesktopEntryError,
    EntryType,
    extract_desktop_entry_section,
    parse_desktop_entry,
    parse_list,
    unescape_string,
)


def _lines(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def test_parse_application_entry() -> None:
    entry = parse_desktop_entry(
        _lines(
            "[Desktop Entry]",
            "Type=Application",
            "Name=Firefox",
            "Name[de]=Feuerfuchs",
            "Comment=Browse the web",
            "Icon=firefox",
            "Exec=firefox %u",
            "Terminal=false",
            "Categories=Network;WebBrowser;",
        )
    )

    assert entry.entry_type is EntryType.APPLICATION
    assert entry.name.default == "Firefox"
    assert entry.name.variants == {"de": "Feuerfuchs"}
    assert entry.comment.default == "Browse the web"
    assert entry.icon == "firefox"
    assert entry.exec == "firefox %u"
    assert entry.terminal is False
    assert entry.hidden is None
    assert entry.no_display is None
    assert entry.only_show_in is None
    assert entry.categories == frozenset({"Network", "WebBrowser"})


def test_later_sections_redeclaring_keys_are_ignored() -> None:
    entry = parse_desktop_entry(
        _lines(
            "[Desktop Entry]",
            "Type=Application",
            "Name=VNC Viewer",
            "Exec=/usr/bin/vncviewer",
            "Actions=new;",
            "",
            "[Desktop Action new]",
            "Name=New Connection",
            "Exec=/usr/bin/vncviewer -new",
            "Name=New Connection",
        )
    )

    assert entry.name.default == "VNC Viewer"
    assert entry.exec == "/usr/bin/vncviewer"


def test_only_first_desktop_entry_group_is_used() -> None:
    text = _lines(
        "# generated file",
        "[Desktop Entry]",
        "Type=Application",
        "Name=First",
        "Exec=first",
        "[Desktop Entry]",
        "Type=Application",
        "Name=Second",
        "Exec=second",
    )

    section = extract_desktop_entry_section(text)
    assert section.startswith("[Desktop Entry]")
    assert "Second" not in section
    assert parse_desktop_entry(text).name.default == "First"


def test_localized_key_lines_do_not_end_the_section() -> None:
    entry = parse_desktop_entry(
        _lines(
            "[Desktop Entry]",
            "Name[fr]=Terminal",
            "Type=Application",
            "Name=Terminal",
            "Exec=xterm",
        )
    )
    assert entry.exec == "xterm"


def test_indented_lines_are_separate_keys() -> None:
    entry = parse_desktop_entry(
        _lines("[Desktop Entry]", "Type=Application", "Name=Foo", "  Exec=foo", "\tIcon=foo")
    )

    assert entry.name.default == "Foo"
    assert entry.exec == "foo"
    assert entry.icon == "foo"


def test_missing_desktop_entry_header() -> None:
    with pytest.raises(DesktopEntryError):
        parse_desktop_entry(_lines("[Desktop Action new]", "Name=New", "Exec=foo"))


def test_empty_text() -> None:
    with pytest.raises(DesktopEntryError):
        parse_desktop_entry("")


def test_duplicate_key_inside_entry_group() -> None:
    with pytest.raises(DesktopEntryError):
        parse_desktop_entry(
            _lines("[Desktop Entry]", "Type=Application", "Name=One", "Name=Two", "Exec=one")
        )


def test_line_without_separator() -> None:
    with pytest.raises(DesktopEntryError):
        parse_desktop_entry(
            _lines("[Desktop Entry]", "Type=Application", "Name=Broken", "this is not a key")
        )


def test_invalid_boolean() -> None:
    with pytest.raises(DesktopEntryError):
        parse_desktop_entry(
            _lines("[Desktop Entry]", "Type=Application", "Name=App", "Exec=app", "NoDisplay=yes")
        )


def test_missing_name() -> None:
    with pytest.raises(DesktopEntryError):
        parse_desktop_entry(_lines("[Desktop Entry]", "Type=Application", "Exec=app"))


def test_missing_type() -> None:
    with pytest.raises(DesktopEntryError):
        parse_desktop_entry(_lines("[Desktop Entry]", "Name=App", "Exec=app"))


@pytest.mark.parametrize(
    "type_name, expected",
    [
        ("Application", EntryType.APPLICATION),
        ("Link", EntryType.LINK),
        ("Directory", EntryType.DIRECTORY),
        ("Service", EntryType.OTHER),
    ],
)
def test_entry_types(type_name: str, expected: EntryType) -> None:
    entry = parse_desktop_entry(_lines("[Desktop Entry]", f"Type={type_name}", "Name=Thing"))
    assert entry.entry_type is expected
    assert entry.type_name == type_name


def test_visibility_keys() -> None:
    entry = parse_desktop_entry(
        _lines(
            "[Desktop Entry]",
            "Type=Application",
            "Name=Settings",
            "Exec=settings",
            "Hidden=true",
            "NoDisplay=false",
            "OnlyShowIn=KDE;GNOME;",
            "NotShowIn=",
        )
    )

    assert entry.hidden is True
    assert entry.no_display is False
    assert entry.only_show_in == frozenset({"KDE", "GNOME"})
    assert entry.not_show_in == frozenset()


def test_empty_exec_is_absent() -> None:
    entry = parse_desktop_entry(_lines("[Desktop Entry]", "Type=Application", "Name=App", "Exec="))
    assert entry.exec is None


def test_string_escapes() -> None:
    assert unescape_string(r"Line\sone\ntwo\\three") == "Line one\ntwo\\three"
    assert unescape_string(r"keep \q as is") == r"keep \q as is"


def test_list_with_escaped_separator() -> None:
    assert parse_list(r"a\;b;c;;") == frozenset({"a;b", "c"})
