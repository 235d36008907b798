"""Build the multipart form for a new submission (upload, fetch or shorten)."""

import logging
from pathlib import Path
from typing import Callable

from envsh.models.submission import (
    HttpRequest,
    Operation,
    SendFile,
    SendRemoteUrl,
    ShortenUrl,
)
from envsh.services.filesystem import read_bytes
from envsh.services.timespec import now_millis, resolve

logger = logging.getLogger(__name__)

# Form field names understood by the host's submission endpoint
FIELD_FILE = "file"
FIELD_URL = "url"
FIELD_SHORTEN = "shorten"
FIELD_SECRET = "secret"
FIELD_EXPIRES = "expires"


def build_submission(
    op: Operation,
    host_url: str,
    now_ms: int | None = None,
    reader: Callable[[Path], bytes] = read_bytes,
) -> HttpRequest:
    """Map an operation onto a POST against the host root.

    Only ``SendFile`` touches the filesystem. An expiry is resolved here, so
    relative hours count from the moment the request is built.
    """
    request = HttpRequest(url=host_url)

    if isinstance(op, SendFile):
        request.files[FIELD_FILE] = (Path(op.path).name, reader(op.path))
    elif isinstance(op, SendRemoteUrl):
        request.fields[FIELD_URL] = op.url
    elif isinstance(op, ShortenUrl):
        request.fields[FIELD_SHORTEN] = op.url
    else:
        raise TypeError(f"Unknown operation: {op!r}")

    options = op.options
    if options.secret:
        request.fields[FIELD_SECRET] = ""
    if options.expires is not None:
        if now_ms is None:
            now_ms = now_millis()
        request.fields[FIELD_EXPIRES] = str(resolve(options.expires, now_ms).millis)

    logger.debug(
        "Built %s submission: fields=%s files=%s",
        type(op).__name__, sorted(request.fields), sorted(request.files),
    )
    return request
