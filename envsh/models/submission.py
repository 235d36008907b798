"""Operations, requests and results exchanged with the host."""

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel

from envsh.models.timespec import TimeSpec


# ── User intent ──────────────────────────────────────────────────────────────

@dataclass
class SubmissionOptions:
    secret: bool = False
    display_secret: bool = False
    expires: TimeSpec | None = None


@dataclass
class SendFile:
    path: Path
    options: SubmissionOptions = field(default_factory=SubmissionOptions)


@dataclass
class SendRemoteUrl:
    url: str
    options: SubmissionOptions = field(default_factory=SubmissionOptions)


@dataclass
class ShortenUrl:
    url: str
    options: SubmissionOptions = field(default_factory=SubmissionOptions)


Operation = SendFile | SendRemoteUrl | ShortenUrl


@dataclass(frozen=True)
class SetExpiry:
    expires: TimeSpec


@dataclass(frozen=True)
class Delete:
    pass


ManagementAction = SetExpiry | Delete


# ── Wire level ───────────────────────────────────────────────────────────────

@dataclass
class HttpRequest:
    """A multipart form POST ready for the transport."""

    url: str
    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, tuple[str, bytes]] = field(default_factory=dict)
    method: str = "POST"


@dataclass
class HostResponse:
    status: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


# ── Results ──────────────────────────────────────────────────────────────────

class SubmissionResult(BaseModel):
    url: str
    token: str | None = None
    expires_display: str | None = None


class ManagementResult(BaseModel):
    accepted: bool = True
    message: str
