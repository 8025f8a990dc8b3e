from __future__ import annotations

ERROR_CODE_MALFORMED_PATH = "MALFORMED_PATH"
ERROR_CODE_PATH_DIALECT_MISMATCH = "PATH_DIALECT_MISMATCH"
ERROR_CODE_INVALID_SETTINGS = "INVALID_SETTINGS"


class PathSyntaxError(ValueError):
    """A path string does not follow the path grammar."""

    code = ERROR_CODE_MALFORMED_PATH

    def __init__(self, path: str, message: str, position: int | None = None) -> None:
        self.path = path
        self.position = position
        location = f" at offset {position}" if position is not None else ""
        super().__init__(f"Malformed path {path!r}{location}: {message}")


class PathDialectError(ValueError):
    """A well-formed path was handed to a path type whose dialect forbids it."""

    code = ERROR_CODE_PATH_DIALECT_MISMATCH

    def __init__(self, path: str, dialect: str, message: str) -> None:
        self.path = path
        self.dialect = dialect
        super().__init__(f"Path {path!r} is not a valid {dialect}: {message}")


class SettingsError(ValueError):
    code = ERROR_CODE_INVALID_SETTINGS


__all__ = [
    "ERROR_CODE_INVALID_SETTINGS",
    "ERROR_CODE_MALFORMED_PATH",
    "ERROR_CODE_PATH_DIALECT_MISMATCH",
    "PathDialectError",
    "PathSyntaxError",
    "SettingsError",
]
