"""Directory patches: one "create this file" or "delete this file" change."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .config import DigestSettings
from .file import SEPARATOR, File, FileError

__all__ = [
    "DirPatch",
    "PatchContractError",
    "PatchError",
    "PatchOperation",
]

LOGGER = logging.getLogger(__name__)

_DEFAULT_SETTINGS = DigestSettings()


class PatchError(RuntimeError):
    """Raised when a patch digest cannot be computed."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = dict(details or {})


class PatchContractError(AssertionError):
    """Raised when a patch is built from, or used with, invalid arguments."""


class PatchOperation(str, Enum):
    """Change described by a patch."""

    CREATE = "create"
    DELETE = "delete"


@dataclass(slots=True, init=False, eq=False)
class DirPatch:
    """A single change to a directory, addressed by its virtual path.

    The patch owns a duplicate of the file it was given, so the caller may
    close its own handle straight away. The content digest is computed on
    request via :meth:`ensure_digest` and then kept for the life of the
    patch and of any duplicate made afterwards.
    """

    _path: str
    _vpath: str
    _file: File | None
    _op: PatchOperation
    _settings: DigestSettings
    _digest: str | None

    def __init__(
        self,
        path: str,
        file: File,
        op: PatchOperation | str,
        alias: str,
        *,
        settings: DigestSettings | None = None,
    ) -> None:
        if not alias:
            raise PatchContractError("alias must be a non-empty string")
        if file.closed:
            raise PatchContractError("cannot build a patch from a closed file")
        try:
            operation = PatchOperation(op)
        except ValueError as error:
            raise PatchContractError(f"unknown patch operation: {op!r}") from error

        owned = file.dup()
        filename = owned.filename(path)
        if filename.startswith(SEPARATOR):
            message = f"relative filename {filename!r} starts with a separator"
            owned.close()
            raise PatchContractError(message)
        if path and filename == owned.fullname:
            message = f"{owned.fullname!r} is not located under {path!r}"
            owned.close()
            raise PatchContractError(message)

        self._path = path
        self._file = owned
        self._op = operation
        self._settings = settings if settings is not None else _DEFAULT_SETTINGS
        self._digest = None
        if alias.endswith(SEPARATOR):
            self._vpath = f"{alias}{filename}"
        else:
            self._vpath = f"{alias}{SEPARATOR}{filename}"
        LOGGER.debug("Created %s patch for %s", self._op.value, self._vpath)

    def __repr__(self) -> str:
        if self._file is None:
            return "<DirPatch closed>"
        return f"<DirPatch {self._op.value} {self._vpath!r}>"

    def __copy__(self) -> DirPatch:
        return self.dup()

    def __enter__(self) -> DirPatch:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._file is None

    @property
    def path(self) -> str:
        """Directory path the patch was generated relative to."""
        self._require_open()
        return self._path

    @property
    def file(self) -> File:
        """File the patch refers to; owned by the patch."""
        return self._require_open()

    @property
    def op(self) -> PatchOperation:
        self._require_open()
        return self._op

    @property
    def vpath(self) -> str:
        """Virtual path of the file under the alias."""
        self._require_open()
        return self._vpath

    @property
    def digest(self) -> str | None:
        """Cached content digest; ``None`` until computed or for deletes."""
        self._require_open()
        return self._digest

    @property
    def settings(self) -> DigestSettings:
        self._require_open()
        return self._settings

    def ensure_digest(self) -> str | None:
        """Compute and cache the content digest for create patches.

        A digest already cached is kept even if the file has changed since.
        """
        file = self._require_open()
        if self._op is not PatchOperation.CREATE or self._digest is not None:
            return self._digest
        try:
            self._digest = file.digest(
                algorithm=self._settings.algorithm,
                chunk_size=self._settings.chunk_size,
            )
        except FileError as error:
            LOGGER.warning("Digest failed for %s: %s", self._vpath, error)
            raise PatchError(
                f"Unable to compute digest for {self._vpath}",
                details={"vpath": self._vpath, "fullname": file.fullname},
            ) from error
        LOGGER.debug("Digest %s for %s", self._digest, self._vpath)
        return self._digest

    def dup(self) -> DirPatch:
        """Return an independent copy; the cached digest is copied, not recomputed."""
        file = self._require_open()
        copy = type(self).__new__(type(self))
        copy._path = self._path
        copy._vpath = self._vpath
        copy._file = file.dup()
        copy._op = self._op
        copy._settings = self._settings
        copy._digest = self._digest
        return copy

    def close(self) -> None:
        """Release the owned file handle. Closing twice is a no-op."""
        if self._file is None:
            return
        self._file.close()
        self._file = None
        self._digest = None

    def _require_open(self) -> File:
        if self._file is None:
            raise PatchContractError("patch has been closed")
        return self._file
