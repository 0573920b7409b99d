"""Working-directory file access (the ``file:`` and ``servlet:`` source types).

Implements :class:`lib_app_properties.application.ports.FileSystemProvider`.
Relative paths resolve against a fixed working directory (or the process
working directory at read time); absolute paths are used as given.
"""

from __future__ import annotations

from pathlib import Path

from ...application.ports import LoadedSource
from ...observability import log_debug


class WorkingDirectoryProvider:
    """Read files relative to *cwd*.

    Parameters
    ----------
    cwd:
        Base directory for relative paths. ``None`` uses :func:`Path.cwd` at
        read time so later ``chdir`` calls are honoured.
    """

    def __init__(self, cwd: str | Path | None = None) -> None:
        self.cwd = Path(cwd) if cwd is not None else None

    def resolve(self, relative_path: str) -> Path:
        """Return the absolute path *relative_path* refers to."""

        path = Path(relative_path)
        if not path.is_absolute():
            path = (self.cwd or Path.cwd()) / path
        return path.absolute()

    def read(self, relative_path: str) -> LoadedSource:
        """Return the bytes of the file at *relative_path*.

        Raises
        ------
        FileNotFoundError / PermissionError / IsADirectoryError
            Propagated from the filesystem.
        """

        path = self.resolve(relative_path)
        payload = path.read_bytes()
        log_debug("file_read", source="file:", path=str(path), size=len(payload))
        return LoadedSource(identifier=str(path), payload=payload)
