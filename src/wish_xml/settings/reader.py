"""Reader for line-oriented ``label = value`` settings files.

Format, one setting per line::

    & VPMDECO          file identifier
    ! comment          everything from the first "!" on is ignored
    Units = msw
    Altitude=0.0       ! trailing comments are fine
    /                  end of data; later lines are not read

Lines without ``=``, with an empty label or with an empty value are skipped.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, NamedTuple, Optional, Union

from wish_xml.shared.logging import get_logger

COMMENT_MARK = "!"
FILE_ID_MARK = "&"
END_MARK = "/"
SEPARATOR = "="

logger = get_logger(__name__, component="settings_reader")


class SettingsError(ValueError):
    """A setting value could not be converted."""


class Setting(NamedTuple):
    """One resolved ``label = value`` pair."""

    label: str
    value: str


@dataclass
class ParsedSettings:
    """Result of reading a settings source."""

    settings: List[Setting]
    file_id: Optional[str] = None


def _strip_comment(line: str) -> Optional[str]:
    """Cut ``line`` at the first comment mark; None for comment-only lines."""
    index = line.find(COMMENT_MARK)
    if index < 0:
        return line.strip()
    if index == 0:
        return None
    return line[:index].strip()


def _split_setting(line: str) -> Optional[Setting]:
    label, separator, value = line.partition(SEPARATOR)
    label = label.strip()
    value = value.strip()
    if not separator or not label or not value:
        return None
    return Setting(label, value)


def parse_lines(lines: Iterable[str]) -> ParsedSettings:
    """Resolve settings from an iterable of text lines."""
    result = ParsedSettings(settings=[])
    for raw in lines:
        line = _strip_comment(raw)
        if line is None:
            continue
        if line.startswith(END_MARK):
            break
        if line.startswith(FILE_ID_MARK):
            result.file_id = line[1:].strip()
            continue
        setting = _split_setting(line)
        if setting is not None:
            result.settings.append(setting)
    return result


class SettingsFile:
    """Settings loaded from a file, with a cursor over the resolved pairs.

    A missing file yields an empty set of settings. Iterating the object
    yields every :class:`Setting` independently of the cursor.

    Args:
        path: Location of the settings file
        encoding: Text encoding of the file
    """

    def __init__(self, path: Union[str, Path, None] = None, encoding: str = "utf-8") -> None:
        self.path = Path(path) if path is not None else None
        self.file_id: Optional[str] = None
        self._settings: List[Setting] = []
        self._index = 0

        if self.path is not None and self.exists():
            with self.path.open(encoding=encoding) as handle:
                self._load(parse_lines(handle))
            logger.debug(
                "Settings loaded",
                extra={"path": str(self.path), "count": len(self._settings)}
            )

    @classmethod
    def from_text(cls, text: str) -> "SettingsFile":
        """Create settings from in-memory text."""
        settings = cls()
        settings._load(parse_lines(text.splitlines()))
        return settings

    def _load(self, parsed: ParsedSettings) -> None:
        self.file_id = parsed.file_id
        self._settings = parsed.settings
        self._index = 0

    def exists(self) -> bool:
        """Check whether the backing file exists."""
        return self.path is not None and self.path.is_file()

    # Cursor

    def reset(self) -> None:
        """Move the cursor back to the first setting."""
        self._index = 0

    def advance(self) -> None:
        """Move the cursor to the next setting; stops one past the last."""
        if self._index < len(self._settings):
            self._index += 1

    def current(self) -> Optional[Setting]:
        """Setting under the cursor, or None past the end."""
        if self._index < len(self._settings):
            return self._settings[self._index]
        return None

    @property
    def label(self) -> Optional[str]:
        setting = self.current()
        return setting.label if setting else None

    @property
    def value(self) -> Optional[str]:
        setting = self.current()
        return setting.value if setting else None

    def value_as_float(self) -> float:
        """Current value as a float; 0.0 when the cursor is past the end.

        Raises:
            SettingsError: If the current value is not numeric
        """
        setting = self.current()
        if setting is None:
            return 0.0
        try:
            return float(setting.value)
        except ValueError:
            raise SettingsError(
                f"Setting {setting.label!r} is not numeric: {setting.value!r}"
            ) from None

    # Collection access

    def get(self, label: str, default: Optional[str] = None) -> Optional[str]:
        """Value of the first setting called ``label``."""
        for setting in self._settings:
            if setting.label == label:
                return setting.value
        return default

    def __iter__(self) -> Iterator[Setting]:
        return iter(list(self._settings))

    def __len__(self) -> int:
        return len(self._settings)
