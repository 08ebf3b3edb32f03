"""
Exec Sanitizer: Turn a raw Exec= value into a command line we can launch.

Taking only the first word breaks wrappers such as
``/usr/bin/env --unset=QT_QPA_PLATFORM /usr/bin/Winbox``, and stripping the
field codes alone keeps launch noise such as ``vlc --started-from-file``.
The command is cut right after the word naming the program, and the field
codes are only stripped when no such cut happens. This is a heuristic: odd
Exec lines can still come out wrong.
"""

import re
from pathlib import Path

# Field codes removed by the fallback pass
FIELD_CODES = ("%U", "%u", "%F", "%f", "%i", "%c", "%k")

_FIELD_CODE_RE = re.compile("|".join(re.escape(code) for code in FIELD_CODES))


def _basename(token: str) -> str:
    return Path(token).name.lower()


def clean_exec_command(exec_cmd: str, app_name: str) -> str:
    """
    Clean an Exec value using the application's display name.

    1. Split on whitespace and keep words up to and including the first one
       whose basename equals the display name (case-insensitive)
    2. If every word was kept, strip the field codes from the original
       string and collapse whitespace instead
    """
    parts = exec_cmd.split()
    app_name_lower = app_name.lower()

    result = []
    for part in parts:
        result.append(part)
        base = _basename(part)
        if base and base == app_name_lower:
            break

    # No cut happened (some names differ from their binary, e.g. "VNC Viewer"
    # is vncviewer and "LibreOffice Calc" is libreoffice --calc)
    if len(result) == len(parts):
        cleaned = _FIELD_CODE_RE.sub("", exec_cmd)
        return " ".join(cleaned.split())

    return " ".join(result)


def build_launch_command(exec_cmd: str, app_name: str, terminal: bool = False,
                         terminal_app: str = "") -> str:
    """Clean ``exec_cmd`` and prefix the terminal program for Terminal=true entries."""
    cleaned = clean_exec_command(exec_cmd, app_name)
    if terminal:
        return f"{terminal_app} {cleaned}"
    return cleaned
