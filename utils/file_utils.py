from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

__all__: list[str] = [
    "FileMissingError",
    "FileUtils",
    "FileUtilsError",
    "InvalidFileFormatError",
]


class FileUtils:
    """Utility class for file operations used by the JSON-backed stores.

    Provides methods to resolve paths and to read and atomically write JSON documents.
    """

    @staticmethod
    def resolve_path(path: str | Path, *, strict: bool = False) -> Path:
        """Convert a user-input path to an absolute path safely.

        Expands environment variables (e.g., $HOME, %APPDATA%), expands ~ to the home directory,
        and resolves relative paths based on the current working directory.

        Args:
            path (str | Path): The input path (e.g., "~/data/$APP_ENV/memory.json").
            strict (bool): Whether to raise an exception if the path does not exist. Defaults to False.

        Returns:
            Path: The converted absolute `Path` object.
        """
        path_str = str(path)
        expanded: str = os.path.expandvars(path_str)
        user_expanded: Path = Path(expanded).expanduser()

        resolved_path: Path
        if user_expanded.is_absolute():
            resolved_path = user_expanded.resolve(strict=strict)
        else:
            resolved_path = (Path.cwd() / user_expanded).resolve(strict=strict)
        return resolved_path

    @staticmethod
    def read_json(file_path: Path) -> Any:
        """Read and decode a UTF-8 JSON document.

        Args:
            file_path (Path): The document to read.

        Returns:
            Any: The decoded document.

        Raises:
            FileMissingError: If the file does not exist.
            InvalidFileFormatError: If the file cannot be read or decoded.
        """
        if not file_path.exists():
            msg = f"File does not exist: {file_path}"
            raise FileMissingError(msg)
        try:
            return json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as err:
            msg = f"Unreadable JSON document '{file_path}': {err}"
            raise InvalidFileFormatError(msg) from err

    @staticmethod
    def write_json_atomic(file_path: Path, payload: Any) -> None:
        """Write a JSON document through a temporary file and an atomic replace.

        Missing parent directories are created. A reader never observes a partially written file.

        Args:
            file_path (Path): Destination file.
            payload (Any): JSON-serialisable document.

        Raises:
            OSError: If the file cannot be written.
            TypeError: If the payload is not JSON-serialisable.
        """
        tmp_path: Path = file_path.with_name(file_path.name + ".tmp")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, file_path)


class FileUtilsError(Exception):
    """Custom exception for FileUtils-related errors."""


class FileMissingError(FileUtilsError):
    """Custom exception for file missing errors."""


class InvalidFileFormatError(FileUtilsError):
    """Custom exception for unreadable or undecodable files."""
