"""Streaming pattern scanner that classifies an object's header."""

from __future__ import annotations

import logging
import re
from contextlib import closing
from typing import BinaryIO, Iterator, Sequence

from headerprop.core.config import HeaderConfig
from headerprop.core.exceptions import ConfigurationError
from headerprop.core.protocols import IObjectStore
from headerprop.models.header import Header

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def split_terminator(line: str) -> tuple[str, str]:
    """Split a decoded line into its text and its terminator ("\\r\\n", "\\n" or "")."""
    if line.endswith("\r\n"):
        return line[:-2], "\r\n"
    if line.endswith("\n"):
        return line[:-1], "\n"
    return line, ""


class LineReader:
    """Reads a binary stream as lines that keep their terminator.

    ``read_rest`` returns everything after the last line handed out, so a caller
    can consume a leading line and take the remainder as one piece.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._buffer = b""
        self._eof = False

    def readline(self) -> bytes:
        while True:
            pos = self._buffer.find(b"\n")
            if pos >= 0:
                line, self._buffer = self._buffer[:pos + 1], self._buffer[pos + 1:]
                return line
            if self._eof:
                line, self._buffer = self._buffer, b""
                return line
            chunk = self._stream.read(self._chunk_size)
            if chunk:
                self._buffer += chunk
            else:
                self._eof = True

    def read_rest(self) -> bytes:
        rest = self._buffer if self._eof else self._buffer + self._stream.read()
        self._buffer = b""
        self._eof = True
        return rest

    def __iter__(self) -> Iterator[bytes]:
        while True:
            line = self.readline()
            if not line:
                return
            yield line


class PatternScanner:
    """Matches the lines of an object against an ordered pattern set.

    Every pattern may claim one line. For each line the still-pending patterns
    are tried in configured order and the first match claims it; scanning stops
    once every pattern has matched, which makes the header complete.
    """

    def __init__(self, store: IObjectStore, patterns: Sequence[re.Pattern[str]], *,
                 encoding: str = "utf-8", chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if not patterns:
            raise ConfigurationError("Pattern scanner needs at least one header pattern")
        self._store = store
        self._patterns = list(patterns)
        self._encoding = encoding
        self._chunk_size = chunk_size

    @classmethod
    def from_config(cls, store: IObjectStore, config: HeaderConfig) -> PatternScanner:
        return cls(
            store,
            config.compiled_patterns(),
            encoding=config.encoding,
            chunk_size=config.read_chunk_size,
        )

    @property
    def patterns(self) -> list[re.Pattern[str]]:
        return list(self._patterns)

    def scan(self, container: str, path: str) -> Header:
        """Scan ``container/path`` from the start and return the header found."""
        with closing(self._store.open_read(container, path)) as stream:
            return self.scan_stream(stream, name=f"{container}/{path}")

    def scan_stream(self, stream: BinaryIO, name: str = "<stream>") -> Header:
        pending = list(range(len(self._patterns)))
        lines: list[str] = []

        for raw in LineReader(stream, self._chunk_size):
            text, terminator = split_terminator(raw.decode(self._encoding, errors="replace"))
            for index in pending:
                pattern = self._patterns[index]
                if pattern.search(text):
                    logger.info("Found header matching pattern %r in %s", pattern.pattern, name)
                    lines.append(text + (terminator or "\n"))
                    pending.remove(index)
                    break
            if not pending:
                logger.info("Complete header (%d lines) found in %s", len(lines), name)
                return Header(lines=tuple(lines), is_complete=True)

        return Header(lines=tuple(lines), is_complete=False)
