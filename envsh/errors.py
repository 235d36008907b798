"""Error taxonomy shared by the request builders, transport and CLI."""

from enum import Enum


class EnvshError(Exception):
    """Base class for every failure surfaced to the user."""

    exit_code = 1


class ParseError(EnvshError):
    """Bad user input, detected before any network call."""

    exit_code = 2

    class Kind(str, Enum):
        NOT_A_NUMBER = "not_a_number"
        CONFLICTING_OPTIONS = "conflicting_options"
        MISSING_OPTION = "missing_option"
        INVALID_TARGET = "invalid_target"

    def __init__(self, kind: "ParseError.Kind", message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class FileReadError(EnvshError):
    """A local file could not be read for upload."""

    def __init__(self, path, reason: str):
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class TransportError(EnvshError):
    """Network-level failure talking to the host (DNS, refused, timeout)."""


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    UNRECOGNIZED_RESPONSE = "unrecognized_response"


class HostError(EnvshError):
    """The host answered, but not with a success we can use."""

    def __init__(self, kind: ErrorKind, message: str, status: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status
