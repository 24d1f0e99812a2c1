"""Settings-file reader kept alongside the XML library.

Independent of the XML layers; it reads simple ``label = value`` files.
"""

from .reader import (
    ParsedSettings,
    Setting,
    SettingsError,
    SettingsFile,
    parse_lines,
)

__all__ = [
    "ParsedSettings",
    "Setting",
    "SettingsError",
    "SettingsFile",
    "parse_lines",
]
