"""
Models: Records shared between the scanner, the cache and the front end.

Application is the only thing that leaves the discovery pipeline. ScanSettings
is built once per scan from the user config and never mutated.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Application:
    """A launchable application as shown by the launcher."""
    name: str
    comment: str
    icon: str  # Resolved icon path, "" when no icon was found
    exec: str  # Final command line, terminal prefix included

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "comment": self.comment,
            "icon": self.icon,
            "exec": self.exec,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Application":
        """Build an Application from a cache record.

        Raises KeyError when a field is missing and TypeError when a field
        is not a string.
        """
        values = {}
        for key in ("name", "comment", "icon", "exec"):
            value = data[key]
            if not isinstance(value, str):
                raise TypeError(f"field '{key}' must be a string, got {type(value).__name__}")
            values[key] = value
        return cls(**values)

    def __str__(self) -> str:
        return (
            f"\n\tName:\t{self.name},"
            f"\n\tComment:\t{self.comment},"
            f"\n\tIcon:\t{self.icon},"
            f"\n\tExec:\t{self.exec}\n"
        )


@dataclass(frozen=True)
class ScanSettings:
    """Immutable inputs of a discovery scan."""
    lookup_dirs: Tuple[str, ...] = field(default_factory=tuple)
    desktop_environment: str = ""
    terminal_app: str = ""
    icon_theme_fallback: str = ""  # "" means no fallback theme
