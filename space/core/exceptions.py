# space/core/exceptions.py

from typing import Optional, Sequence


class SpaceError(Exception):
    """Base class for every error the cache tooling raises on purpose."""


class BinaryNotFoundError(SpaceError):
    """Raised when a tool binary cannot be resolved on PATH."""
    def __init__(self, binary: str):
        self.binary = binary
        super().__init__(f"executable file not found in $PATH: {binary}")


class CommandError(SpaceError):
    """Raised when a subprocess cannot be started or exits nonzero."""
    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
        reason: Optional[str] = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr

        message = " ".join(self.command)
        if reason:
            message += f": {reason}"
        elif returncode is not None:
            message += f": exit status {returncode}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(message)


class OutputParseError(SpaceError):
    """Raised when tool output lacks the data a provider needs."""


class FilesystemError(SpaceError):
    """Raised for filesystem failures other than a missing path."""
    def __init__(self, operation: str, path: str, cause: BaseException):
        self.operation = operation
        self.path = path
        super().__init__(f"{operation} {path!r}: {cause}")


class InvalidInputError(SpaceError):
    """Raised when a request or resolved value fails validation."""


class UnknownModeError(InvalidInputError):
    def __init__(self, mode: str):
        self.mode = mode
        super().__init__(f"unknown mode: {mode}")


class EmptyMountRequestError(InvalidInputError):
    def __init__(self):
        super().__init__("at least one cache mode or path must be specified")


class EmptyCacheDirError(InvalidInputError):
    def __init__(self, source: str):
        self.source = source
        super().__init__(f"empty cache dir from {source}")


class ModeError(SpaceError):
    """A single provider failed while detecting or planning."""
    def __init__(self, operation: str, mode: str, cause: BaseException):
        self.operation = operation
        self.mode = mode
        super().__init__(f"{operation} {mode}: {cause}")


class MountError(SpaceError):
    """An orchestrator step failed; carries the step and the path involved."""
    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        super().__init__(f"{operation}: {cause}")
