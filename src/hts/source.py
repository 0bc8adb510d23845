# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Position-addressable source file loading and atomic writing."""

import bisect
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class SourceIOError(RuntimeError):
    """Represent a file that cannot be read or written."""


@dataclass(frozen=True)
class SourceLine:
    """One physical line without its line terminator.

    Attributes:
        number: Line number (1-based).
        start: Text offset of the first character of the line.
        text: Line content without the terminator.
    """

    number: int
    start: int
    text: str


@dataclass(frozen=True)
class SourceFile:
    """Represent loaded file text with offset and position conversions.

    Offsets are indices into the decoded ``text``. Tree-sitter reports UTF-8
    byte offsets, which ``text_offset_from_byte`` maps back to text offsets.
    """

    path: Path
    display_path: str
    text: str
    _line_starts: list[int] = field(init=False, repr=False, compare=False)
    _byte_starts: list[int] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0] + [match.end() for match in _LINE_BREAK.finditer(self.text)]
        object.__setattr__(self, "_line_starts", starts)
        object.__setattr__(self, "_byte_starts", _char_byte_starts(self.text))

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def lines(self) -> list[SourceLine]:
        """Split text into lines while keeping their start offsets."""
        result: list[SourceLine] = []
        for index, start in enumerate(self._line_starts):
            if index + 1 < len(self._line_starts):
                raw = self.text[start : self._line_starts[index + 1]]
            else:
                raw = self.text[start:]
            result.append(
                SourceLine(number=index + 1, start=start, text=raw.rstrip("\r\n"))
            )
        return result

    def position_of(self, offset: int) -> tuple[int, int]:
        """Convert a text offset to a 1-based ``(line, column)`` pair.

        Raises:
            ValueError: If the offset is outside the text.
        """
        if offset < 0 or offset > len(self.text):
            raise ValueError(f"offset {offset} outside text of length {len(self.text)}")
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index] + 1

    def offset_of(self, line: int, column: int) -> int:
        """Convert a 1-based ``(line, column)`` pair to a text offset.

        Raises:
            ValueError: If the line does not exist.
        """
        if line < 1 or line > len(self._line_starts):
            raise ValueError(f"line {line} outside 1..{len(self._line_starts)}")
        return self._line_starts[line - 1] + column - 1

    def text_offset_from_byte(self, byte_offset: int) -> int:
        """Map a UTF-8 byte offset onto a text offset."""
        if self._byte_starts is None:
            return byte_offset
        return bisect.bisect_left(self._byte_starts, byte_offset)

    def encoded(self) -> bytes:
        return self.text.encode("utf-8")


def read_source(path: Path, display_path: str | None = None) -> SourceFile:
    """Load a UTF-8 source file.

    Args:
        path: File to read.
        display_path: Path reported in occurrences; defaults to ``path``.

    Returns:
        Loaded source file.

    Raises:
        SourceIOError: If the file is missing, unreadable, not UTF-8, or binary.
    """
    try:
        text = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Failed reading source file (path={path} error={exc})")
        raise SourceIOError(f"Cannot read {path}: {exc}") from exc
    if "\x00" in text:
        logger.warning(f"Refusing binary source file (path={path})")
        raise SourceIOError(f"Cannot read {path}: binary content")
    return SourceFile(
        path=path,
        display_path=display_path if display_path is not None else str(path),
        text=text,
    )


def write_source_atomically(path: Path, text: str) -> None:
    """Replace a file's content without leaving a partially written file.

    Raises:
        SourceIOError: If the temporary file cannot be written or moved.
    """
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    try:
        tmp_path.write_text(text, encoding="utf-8", newline="")
        tmp_path.replace(path)
    except OSError as exc:
        logger.warning(f"Failed writing source file (path={path} error={exc})")
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            logger.warning(f"Failed removing temporary file (path={tmp_path})")
        raise SourceIOError(f"Cannot write {path}: {exc}") from exc


def _char_byte_starts(text: str) -> list[int] | None:
    """Build the UTF-8 byte offset of every character, plus the end offset.

    Returns ``None`` for ASCII text, where byte and text offsets coincide.
    """
    if text.isascii():
        return None
    starts: list[int] = []
    position = 0
    for char in text:
        starts.append(position)
        code = ord(char)
        if code < 0x80:
            position += 1
        elif code < 0x800:
            position += 2
        elif code < 0x10000:
            position += 3
        else:
            position += 4
    starts.append(position)
    return starts
