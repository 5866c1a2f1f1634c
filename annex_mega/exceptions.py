"""
annex-mega exception hierarchy.

All exceptions inherit from MegaAnnexError for easy catching. The bare
``message`` is what ends up on the protocol line; ``str()`` adds the context.
"""

from typing import Any


class MegaAnnexError(Exception):
    """Base exception for all annex_mega errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class ConfigurationError(MegaAnnexError):
    """Invalid or missing configuration."""


class SessionError(MegaAnnexError):
    """Session bootstrap failed or the session is not usable."""


class AuthenticationError(SessionError):
    """The remote store rejected the credentials."""


class ProtocolError(MegaAnnexError):
    """Malformed line received from the driving process."""

    def __init__(self, message: str, *, line: str | None = None) -> None:
        super().__init__(message, line=line)
        self.line = line


class StoreError(MegaAnnexError):
    """Remote store operation failed."""


class PathError(MegaAnnexError):
    """Path-related error."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message, path=path)
        self.path = path


class InvalidPathError(PathError):
    """Address text is not of the form ``<root>:/<segments>``."""

    def __init__(self, message: str = "Invalid mega path", *, path: str) -> None:
        super().__init__(message, path=path)


class PathNotFoundError(PathError):
    """Path does not exist in the remote store."""

    def __init__(self, message: str = "key not found", *, path: str) -> None:
        super().__init__(message, path=path)


class NotAFileError(PathError):
    """Expected a file but got a folder."""

    def __init__(self, message: str = "Requested object is not a file", *, path: str) -> None:
        super().__init__(message, path=path)


class NotAFolderError(PathError):
    """Expected a folder but got a file."""

    def __init__(
        self, message: str = "A non-directory exists at this path", *, path: str
    ) -> None:
        super().__init__(message, path=path)


class TransferError(MegaAnnexError):
    """Local side of a transfer is unusable."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message, path=path)
        self.path = path


class InvalidSourceError(TransferError):
    """Source of a STORE is missing or not a regular file."""

    def __init__(self, message: str = "Invalid source path", *, path: str) -> None:
        super().__init__(message, path=path)


class InvalidDestinationError(TransferError):
    """Destination of a RETRIEVE has no existing parent directory."""

    def __init__(self, message: str = "Invalid destination path", *, path: str) -> None:
        super().__init__(message, path=path)


class FileConflictError(TransferError):
    """A file with the same name but different size already exists."""

    def __init__(self, message: str = "File with same name already exists", *, path: str) -> None:
        super().__init__(message, path=path)


class DirectoryConflictError(TransferError):
    """A directory occupies the destination path."""

    def __init__(
        self, message: str = "A directory with same name already exists", *, path: str
    ) -> None:
        super().__init__(message, path=path)
