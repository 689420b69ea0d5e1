"""Directory patch records used by directory synchronisation."""

from .config import DigestSettings, SettingsError, load_settings
from .file import File, FileError
from .patch import DirPatch, PatchContractError, PatchError, PatchOperation

__all__ = [
    "DigestSettings",
    "DirPatch",
    "File",
    "FileError",
    "PatchContractError",
    "PatchError",
    "PatchOperation",
    "SettingsError",
    "load_settings",
]
