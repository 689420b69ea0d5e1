"""File references handed around by the directory scanner."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path

from .config import DEFAULT_CHUNK_SIZE

__all__ = ["SEPARATOR", "File", "FileError"]

SEPARATOR = "/"


class FileError(RuntimeError):
    """Raised when a file reference is misused or its content cannot be read."""


@dataclass(slots=True, init=False, eq=False)
class File:
    """A named file under a directory path.

    The handle only records where the file lives; nothing is opened until
    :meth:`digest` reads the content.
    """

    _fullname: str
    _closed: bool

    def __init__(self, path: str | None, name: str) -> None:
        if not path:
            fullname = name
        elif path.endswith(SEPARATOR):
            fullname = f"{path}{name}"
        else:
            fullname = f"{path}{SEPARATOR}{name}"
        self._fullname = fullname
        self._closed = False

    def __repr__(self) -> str:
        state = " closed" if self._closed else ""
        return f"<File {self._fullname!r}{state}>"

    def __copy__(self) -> File:
        return self.dup()

    def __enter__(self) -> File:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def fullname(self) -> str:
        self._require_open()
        return self._fullname

    def filename(self, path: str | None = None) -> str:
        """Return the file name relative to ``path``.

        Only the ``path`` prefix and one separator after it are removed; a
        ``fullname`` that does not live under ``path`` is returned as is.
        """
        self._require_open()
        fullname = self._fullname
        if not path or not fullname.startswith(path):
            return fullname
        remainder = fullname[len(path):]
        if path.endswith(SEPARATOR):
            return remainder
        if remainder.startswith(SEPARATOR):
            return remainder[len(SEPARATOR):]
        return fullname

    def dup(self) -> File:
        """Return an independent handle for the same file."""
        self._require_open()
        copy = type(self).__new__(type(self))
        copy._fullname = self._fullname
        copy._closed = False
        return copy

    def close(self) -> None:
        self._closed = True

    def digest(self, *, algorithm: str = "sha1", chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
        """Hash the current file content and return the hex digest."""
        self._require_open()
        hasher = hashlib.new(algorithm)
        try:
            with Path(self._fullname).open("rb") as handle:
                for chunk in iter(lambda: handle.read(chunk_size), b""):
                    hasher.update(chunk)
        except OSError as error:
            raise FileError(f"Unable to read {self._fullname}: {error}") from error
        return hasher.hexdigest()

    def _require_open(self) -> None:
        if self._closed:
            raise FileError("File handle has been closed")
