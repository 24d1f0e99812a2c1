"""Character source with push-back and line/column tracking.

The parser pulls one character at a time and occasionally needs to return
characters it has already consumed, for example the ``<`` and the first
letter of a nested tag. Pushed-back characters are kept on an explicit
last-in-first-out stack.
"""

import io
from typing import List, Optional, TextIO, Tuple

from wish_xml.shared.config import ReaderConfig

EOF = ""


class PushbackReader:
    """Sequential character reader over a text stream.

    Line endings are normalised while reading: ``\\n``, ``\\r`` and
    ``\\r\\n`` are all returned as a single ``\\n``. Line and column
    describe the last character drawn from the underlying stream; characters
    returned from the push-back stack do not move the position again.

    Args:
        stream: Any object with a ``read(size)`` method returning ``str``
        config: Reader configuration (chunk size for underlying reads)
    """

    def __init__(self, stream: TextIO, config: Optional[ReaderConfig] = None) -> None:
        self.config = config or ReaderConfig()
        self._stream = stream
        self._pushed: List[str] = []
        self._chunk = ""
        self._chunk_pos = 0
        self._after_cr = False
        self._exhausted = False
        self.line = 1
        self.column = 0
        self.characters_read = 0

    @classmethod
    def from_string(
        cls, text: str, config: Optional[ReaderConfig] = None
    ) -> "PushbackReader":
        """Create a reader over in-memory text."""
        # newline="" keeps "\r" visible so normalisation happens here
        return cls(io.StringIO(text, newline=""), config)

    @property
    def position(self) -> Tuple[int, int]:
        """Current (line, column) pair."""
        return self.line, self.column

    @property
    def pending(self) -> int:
        """Number of pushed-back characters waiting to be re-read."""
        return len(self._pushed)

    def read(self) -> str:
        """Return the next character, or ``EOF`` when the stream is exhausted."""
        if self._pushed:
            return self._pushed.pop()

        while True:
            char = self._next_raw()
            if char == EOF:
                return EOF
            if char == "\n" and self._after_cr:
                # second half of a "\r\n" pair
                self._after_cr = False
                continue
            break

        self._after_cr = False
        if char == "\r":
            self._after_cr = True
            char = "\n"
        if char == "\n":
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return char

    def unread(self, char: str) -> None:
        """Push ``char`` back so the next :meth:`read` returns it."""
        if len(char) != 1:
            raise ValueError(f"Can only push back single characters, got {char!r}")
        self._pushed.append(char)

    def _next_raw(self) -> str:
        if self._chunk_pos >= len(self._chunk):
            if self._exhausted:
                return EOF
            # OSError from the stream propagates unchanged
            self._chunk = self._stream.read(self.config.buffer_size)
            self._chunk_pos = 0
            if not self._chunk:
                self._exhausted = True
                return EOF
        char = self._chunk[self._chunk_pos]
        self._chunk_pos += 1
        self.characters_read += 1
        return char
