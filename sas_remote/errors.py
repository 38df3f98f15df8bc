class SasRemoteError(Exception):
    """Base class for failures surfaced to the caller as a non-zero exit."""

    kind = "error"
    exit_code = 1


class ValidationError(SasRemoteError):
    """Malformed arguments (missing file, wrong path kind). Raised before any connection."""

    kind = "validation"
    exit_code = 2


class RemoteConnectionError(SasRemoteError):
    """Host unreachable, authentication rejected or handshake failed. Never retried."""

    kind = "connection"
    exit_code = 3


class SubmissionError(SasRemoteError):
    """The code could not be handed to the remote session (not a runtime error in the program)."""

    kind = "submission"
    exit_code = 4


class DrainError(SasRemoteError):
    """Reading the log or listing buffer failed. Output already written is kept."""

    kind = "drain"
    exit_code = 5


# Ctrl+C, following the shell's 128 + SIGINT convention
INTERRUPTED_EXIT_CODE = 130
